"""
Obstacles and Bounce-Back

Solid cells are described by an ObstacleMask. Inside the fused streaming pass
they apply the bounce-back rule (no-slip walls): every incoming distribution
is reflected into the opposite direction.

The obstacle file lists one blocked cell per line as ``x y 1``.
"""

import numpy as np

from .errors import ConfigurationError
from .lattice import OPPOSITE, Q


class ObstacleMask:
    """
    Immutable per-cell solid/fluid flags.

    Parameters
    ----------
    solid : array_like of bool
        Solid flags, shape (ny, nx); ``solid[y, x]`` is True for an obstacle.

    Attributes
    ----------
    solid : ndarray
        Read-only boolean array, shape (ny, nx)
    """

    def __init__(self, solid):
        solid = np.array(solid, dtype=bool, order="C")
        if solid.ndim != 2:
            raise ValueError(f"obstacle mask must be 2D, got shape {solid.shape}")
        solid.setflags(write=False)
        self.solid = solid

    @classmethod
    def empty(cls, nx, ny):
        """Mask with no obstacles."""
        return cls(np.zeros((ny, nx), dtype=bool))

    @classmethod
    def from_cells(cls, nx, ny, cells):
        """Build a mask from an iterable of ``(x, y)`` blocked cells."""
        solid = np.zeros((ny, nx), dtype=bool)
        for x, y in cells:
            solid[y, x] = True
        return cls(solid)

    @property
    def nx(self):
        return self.solid.shape[1]

    @property
    def ny(self):
        return self.solid.shape[0]

    @property
    def num_solid(self):
        return int(np.count_nonzero(self.solid))

    @property
    def num_fluid(self):
        return self.solid.size - self.num_solid

    def is_solid(self, x, y):
        if not (0 <= x < self.nx and 0 <= y < self.ny):
            raise IndexError(f"cell ({x}, {y}) outside {self.nx} x {self.ny} grid")
        return bool(self.solid[y, x])

    def cells(self):
        """Blocked cells as ``(x, y)`` pairs in row-major order."""
        ys, xs = np.nonzero(self.solid)
        return list(zip(xs.tolist(), ys.tolist()))

    def __eq__(self, other):
        if not isinstance(other, ObstacleMask):
            return NotImplemented
        return np.array_equal(self.solid, other.solid)

    def __repr__(self):
        return f"ObstacleMask(nx={self.nx}, ny={self.ny}, solid={self.num_solid})"


def parse_obstacles(text, params, path="<string>"):
    """
    Parse obstacle file contents against the grid size in ``params``.

    Blank lines are skipped. Any other line must hold exactly three integers
    ``x y flag`` with ``0 <= x < nx``, ``0 <= y < ny`` and ``flag == 1``.
    """
    solid = np.zeros((params.ny, params.nx), dtype=bool)

    for lineno, line in enumerate(text.splitlines(), start=1):
        fields = line.split()
        if not fields:
            continue
        try:
            if len(fields) != 3:
                raise ValueError(line)
            x, y, blocked = (int(value) for value in fields)
        except ValueError:
            raise ConfigurationError(
                "expected 3 values per line in obstacle file", path, lineno
            ) from None
        if x < 0 or x > params.nx - 1:
            raise ConfigurationError("obstacle x-coord out of range", path, lineno)
        if y < 0 or y > params.ny - 1:
            raise ConfigurationError("obstacle y-coord out of range", path, lineno)
        if blocked != 1:
            raise ConfigurationError("obstacle blocked value should be 1", path, lineno)

        solid[y, x] = True

    return ObstacleMask(solid)


def load_obstacles(path, params):
    """Read and validate an obstacle file."""
    try:
        with open(path, "r") as fp:
            text = fp.read()
    except OSError as exc:
        raise ConfigurationError(
            f"could not open input obstacles file: {exc.strerror}", path
        ) from exc
    return parse_obstacles(text, params, str(path))


def write_obstacles(path, mask):
    """Write ``mask`` in obstacle file format."""
    with open(path, "w") as fp:
        for x, y in mask.cells():
            fp.write(f"{x} {y} 1\n")


def apply_bounce_back(f, solid_mask):
    """
    Reflect every distribution of the solid cells into its opposite direction.

        f_out[i] = f[OPPOSITE[i]]   on solid cells, f elsewhere

    The rest direction is its own opposite and is copied unchanged.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx)
    solid_mask : ndarray
        Boolean mask for solid nodes, shape (ny, nx)

    Returns
    -------
    f : ndarray
        Copy of ``f`` with solid cells reflected
    """
    f_new = f.copy()

    for i in range(Q):
        f_new[i, solid_mask] = f[OPPOSITE[i], solid_mask]

    return f_new


def create_cylinder_mask(nx, ny, cx, cy, radius):
    """
    Solid disc of cells within ``radius`` of ``(cx, cy)``.

    Parameters
    ----------
    nx, ny : int
        Grid dimensions
    cx, cy : float
        Cylinder center coordinates
    radius : float
        Cylinder radius

    Returns
    -------
    mask : ndarray
        True inside the disc, shape (ny, nx)
    """
    X, Y = np.meshgrid(np.arange(nx), np.arange(ny))
    return (X - cx)**2 + (Y - cy)**2 <= radius * radius


def create_channel_walls(nx, ny):
    """Solid bottom and top rows, shape (ny, nx)."""
    mask = np.zeros((ny, nx), dtype=bool)
    mask[0, :] = True   # Bottom wall
    mask[-1, :] = True  # Top wall
    return mask


def create_box_mask(nx, ny, x0, y0, x1, y1):
    """Solid axis-aligned rectangle covering ``x0 <= x < x1``, ``y0 <= y < y1``."""
    mask = np.zeros((ny, nx), dtype=bool)
    mask[max(y0, 0):min(y1, ny), max(x0, 0):min(x1, nx)] = True
    return mask
