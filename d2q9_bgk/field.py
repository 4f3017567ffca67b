"""
Distribution Field Storage

A LatticeField holds the 9 particle distributions of every cell in a
Structure of Arrays layout: one contiguous (ny, nx) plane per direction, so
the flat offset of cell (x, y) inside a plane is ``x + y * nx``.
"""

import numpy as np

from .lattice import Q, equilibrium_weights


class LatticeField:
    """
    Distribution values for an nx x ny grid.

    Parameters
    ----------
    nx : int
        Number of cells in x-direction
    ny : int
        Number of cells in y-direction
    dtype : numpy dtype
        Floating point type of the storage (default float64)

    Attributes
    ----------
    speeds : ndarray
        Distribution functions, shape (Q, ny, nx), C-contiguous
    """

    def __init__(self, nx, ny, dtype=np.float64):
        if nx < 1 or ny < 1:
            raise ValueError(f"grid must be at least 1 x 1, got {nx} x {ny}")
        self.nx = nx
        self.ny = ny
        self.speeds = np.zeros((Q, ny, nx), dtype=dtype)

    @classmethod
    def from_speeds(cls, speeds):
        """Wrap a copy of an existing (Q, ny, nx) array."""
        speeds = np.asarray(speeds)
        if speeds.ndim != 3 or speeds.shape[0] != Q:
            raise ValueError(f"expected shape (9, ny, nx), got {speeds.shape}")
        field = cls(speeds.shape[2], speeds.shape[1], dtype=speeds.dtype)
        field.speeds[...] = speeds
        return field

    @property
    def shape(self):
        return self.speeds.shape

    @property
    def dtype(self):
        return self.speeds.dtype

    def _check(self, direction, x, y):
        if not 0 <= direction < Q:
            raise IndexError(f"direction {direction} outside 0..{Q - 1}")
        if not (0 <= x < self.nx and 0 <= y < self.ny):
            raise IndexError(f"cell ({x}, {y}) outside {self.nx} x {self.ny} grid")

    def get(self, direction, x, y):
        """Distribution value of ``direction`` at cell (x, y)."""
        self._check(direction, x, y)
        return float(self.speeds[direction, y, x])

    def set(self, direction, x, y, value):
        """Overwrite the distribution value of ``direction`` at cell (x, y)."""
        self._check(direction, x, y)
        self.speeds[direction, y, x] = value

    def cell(self, x, y):
        """All 9 values of cell (x, y) as a new array."""
        self._check(0, x, y)
        return self.speeds[:, y, x].copy()

    def initialize_equilibrium(self, params):
        """
        Fill every cell with the rest-state equilibrium of ``params.density``.

        Obstacle cells receive the same values; they only differ in how they
        are updated.
        """
        if (params.nx, params.ny) != (self.nx, self.ny):
            raise ValueError(
                f"parameters describe a {params.nx} x {params.ny} grid, "
                f"field is {self.nx} x {self.ny}"
            )
        weights = equilibrium_weights(params.density).astype(self.dtype)
        self.speeds[...] = weights[:, None, None]
        return self

    def __repr__(self):
        return f"LatticeField(nx={self.nx}, ny={self.ny}, dtype={self.dtype})"
