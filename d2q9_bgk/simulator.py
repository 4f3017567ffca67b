"""
D2Q9 BGK Simulator

Owns the two distribution fields and advances them one timestep at a time:

    accelerate(current)                 momentum injection, in place
    stream_collide(current -> scratch)  fused pass, returns mean speed
    swap                                scratch becomes current

The fields are never copied; only the index of the current one changes.
"""

import math
import time

import numpy as np

from .diagnostics import average_velocity, calc_reynolds, total_density
from .errors import NumericalInstabilityError, SimulationCompleteError
from .field import LatticeField
from .forcing import accelerate_flow, accelerate_flow_fast
from .streaming import stream_collide, stream_collide_fast


class Simulator:
    """
    Lattice Boltzmann solver on a periodic grid with obstacles.

    Parameters
    ----------
    params : ParameterSet
        Simulation constants
    mask : ObstacleMask
        Solid cells, must match the grid size of ``params``
    use_fast : bool
        Use Numba kernels (default True) instead of the NumPy reference
    dtype : numpy dtype
        Storage type of the distribution fields (default float64)

    Attributes
    ----------
    av_vels : ndarray
        Mean velocity of every completed iteration, shape (max_iters,)
    iteration : int
        Number of completed iterations
    total_time : float
        Wall-clock seconds spent inside step()
    """

    def __init__(self, params, mask, use_fast=True, dtype=np.float64):
        if (mask.nx, mask.ny) != (params.nx, params.ny):
            raise ValueError(
                f"obstacle mask is {mask.nx} x {mask.ny}, "
                f"parameters describe {params.nx} x {params.ny}"
            )
        self.params = params
        self.mask = mask
        self.use_fast = use_fast

        self._fields = (
            LatticeField(params.nx, params.ny, dtype).initialize_equilibrium(params),
            LatticeField(params.nx, params.ny, dtype),
        )
        self._current = 0

        self.av_vels = np.zeros(params.max_iters, dtype=np.float64)
        self.iteration = 0
        self.total_time = 0.0

    @property
    def current(self):
        """Field holding the latest state."""
        return self._fields[self._current]

    @property
    def scratch(self):
        """Field the next streaming pass writes into."""
        return self._fields[1 - self._current]

    @property
    def finished(self):
        return self.iteration >= self.params.max_iters

    def accelerate(self):
        """Inject momentum into the current field; returns cells updated."""
        p = self.params
        if self.use_fast:
            return accelerate_flow_fast(self.current.speeds, self.mask.solid, p.density, p.accel)
        return int(np.count_nonzero(
            accelerate_flow(self.current.speeds, self.mask.solid, p.density, p.accel)
        ))

    def stream_collide(self):
        """
        Stream, collide and bounce back from current into scratch.

        Returns
        -------
        av_vel : float
            Mean velocity magnitude over fluid cells
        """
        kernel = stream_collide_fast if self.use_fast else stream_collide
        return kernel(self.current.speeds, self.scratch.speeds, self.mask.solid, self.params.omega)

    def swap(self):
        """Make the scratch field current."""
        self._current = 1 - self._current

    def step(self):
        """
        Perform one timestep and record its mean velocity.

        Returns
        -------
        av_vel : float
            Mean velocity magnitude over fluid cells
        """
        if self.finished:
            raise SimulationCompleteError(
                f"all {self.params.max_iters} iterations have already run"
            )
        start = time.perf_counter()

        self.accelerate()
        av_vel = self.stream_collide()
        self.swap()

        self.av_vels[self.iteration] = av_vel
        self.iteration += 1
        self.total_time += time.perf_counter() - start

        return av_vel

    def run(self, num_steps=None, verbose=False, report_interval=1000, debug=False):
        """
        Run the remaining iterations, or ``num_steps`` of them.

        Parameters
        ----------
        num_steps : int, optional
            Number of timesteps; default runs up to max_iters
        verbose : bool
            Print progress information every ``report_interval`` steps
        report_interval : int
            Steps between progress reports
        debug : bool
            Print mean velocity and total density after every timestep

        Returns
        -------
        av_vels : ndarray
            Mean velocities of all completed iterations

        Raises
        ------
        NumericalInstabilityError
            If a timestep yields a non-finite mean velocity.
        """
        remaining = self.params.max_iters - self.iteration
        if num_steps is None or num_steps > remaining:
            num_steps = remaining

        cells = self.params.num_cells
        start = time.perf_counter()

        for step in range(num_steps):
            tt = self.iteration
            av_vel = self.step()

            if not math.isfinite(av_vel):
                raise NumericalInstabilityError(tt, av_vel)

            if debug:
                print(f"==timestep: {tt}==")
                print(f"av velocity: {av_vel:.12E}")
                print(f"tot density: {total_density(self.current):.12E}")

            if verbose and (step + 1) % report_interval == 0:
                elapsed = time.perf_counter() - start
                mlups = (step + 1) * cells / elapsed / 1e6
                print(f"Step {tt + 1}/{self.params.max_iters}, "
                      f"av velocity: {av_vel:.6e}, MLUPS: {mlups:.2f}")

        if verbose:
            total = time.perf_counter() - start
            print(f"Completed {num_steps} steps in {total:.2f}s")

        return self.av_vels[:self.iteration]

    def average_velocity(self):
        """Mean fluid speed of the current field."""
        return average_velocity(self.current, self.mask)

    def total_density(self):
        return total_density(self.current)

    def reynolds_number(self):
        """Reynolds number of the current field."""
        return calc_reynolds(self.params, self.current, self.mask)
