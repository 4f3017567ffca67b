"""
Setup script for d2q9_bgk package.
"""

from setuptools import setup, find_packages

setup(
    name="d2q9_bgk",
    version="0.1.0",
    description="D2Q9 BGK lattice Boltzmann simulation with periodic boundaries and obstacles",
    author="Andrey",
    packages=find_packages(include=["d2q9_bgk", "d2q9_bgk.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.20",
        "numba>=0.56",
        "matplotlib>=3.5",
    ],
    extras_require={
        "dev": ["pytest>=7.0", "black", "flake8"],
    },
    entry_points={
        "console_scripts": [
            "d2q9-bgk=d2q9_bgk.cli:main",
        ],
    },
)
