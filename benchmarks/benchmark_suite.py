"""
Benchmark Suite

Timestep throughput of the NumPy reference and Numba kernels, in Million
Lattice Updates Per Second, on grids with a channel-wall obstacle layout.
"""

import sys
import os
import time

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from d2q9_bgk.boundary import ObstacleMask, create_channel_walls
from d2q9_bgk.parameters import ParameterSet
from d2q9_bgk.simulator import Simulator


def make_simulator(nx, ny, num_steps, use_fast, omega=1.7):
    params = ParameterSet(
        nx=nx, ny=ny, max_iters=num_steps, reynolds_dim=ny,
        density=0.1, accel=0.005, omega=omega,
    )
    return Simulator(params, ObstacleMask(create_channel_walls(nx, ny)), use_fast=use_fast)


def benchmark_solver(nx, ny, num_steps, use_fast=True, warmup_steps=10):
    """
    Benchmark one kernel set on one grid.

    Returns
    -------
    mlups : float
        Million Lattice Updates Per Second
    """
    # Warmup (JIT compilation)
    make_simulator(nx, ny, warmup_steps, use_fast).run()

    sim = make_simulator(nx, ny, num_steps, use_fast)
    start = time.perf_counter()
    sim.run()
    elapsed = time.perf_counter() - start

    return num_steps * nx * ny / elapsed / 1e6


def run_full_benchmark(grid_sizes=None, num_steps=200):
    """
    Run the benchmark for both kernel sets.

    Returns
    -------
    results : dict
        ``results[name][(nx, ny)]`` is the MLUPS of kernel set ``name``
    """
    if grid_sizes is None:
        grid_sizes = [
            (128, 128),
            (256, 256),
            (512, 512),
            (1024, 1024),
        ]

    print("=" * 60)
    print("D2Q9 BGK Benchmark")
    print("=" * 60)
    print(f"Steps: {num_steps}")
    print()

    results = {}
    for name, use_fast in (("numpy", False), ("numba", True)):
        print(f"Benchmarking {name} kernels...")
        print("-" * 40)
        results[name] = {}
        for nx, ny in grid_sizes:
            mlups = benchmark_solver(nx, ny, num_steps, use_fast=use_fast)
            results[name][(nx, ny)] = mlups
            print(f"  {nx:4d} x {ny:4d}: {mlups:8.2f} MLUPS")
        print()

    print("Speedup (numba / numpy)")
    print("-" * 40)
    for size in grid_sizes:
        speedup = results["numba"][size] / results["numpy"][size]
        print(f"  {size[0]:4d} x {size[1]:4d}: {speedup:6.1f}x")

    return results


if __name__ == "__main__":
    run_full_benchmark()
