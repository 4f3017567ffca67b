"""
D2Q9 BGK lattice Boltzmann solver.

2D flow on a periodic grid with bounce-back obstacles, driven by momentum
injection on one row.
"""

from .boundary import ObstacleMask, load_obstacles
from .diagnostics import average_velocity, calc_reynolds, reynolds_number, total_density
from .errors import (
    ConfigurationError,
    LBMError,
    NumericalInstabilityError,
    OutputError,
    SimulationCompleteError,
)
from .field import LatticeField
from .parameters import ParameterSet, load_parameters
from .simulator import Simulator

__version__ = "0.1.0"
