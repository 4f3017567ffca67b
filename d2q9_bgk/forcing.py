"""
Flow Acceleration

Drives the flow by moving density from the west-pointing to the
east-pointing distributions of one row (the second row from the top),
which acts like a body force in +x.

For every fluid cell of that row, with

    w1 = density * accel / 9
    w2 = density * accel / 36

directions 1, 5, 8 gain w1, w2, w2 and directions 3, 6, 7 lose w1, w2, w2.
A cell is skipped entirely when the update would leave f3, f6 or f7
non-positive. Total mass is unchanged.
"""

import numpy as np
from numba import njit


def accelerated_row(ny):
    return ny - 2 if ny >= 2 else 0


def acceleration_weights(density, accel):
    """Return (w1, w2) moved per cell by the accelerate step."""
    return density * accel / 9.0, density * accel / 36.0


def accelerate_flow(f, solid_mask, density, accel):
    """
    Apply the accelerate step in place (vectorised NumPy).

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx); modified in place
    solid_mask : ndarray
        Boolean obstacle mask, shape (ny, nx)
    density : float
        Reference density
    accel : float
        Acceleration

    Returns
    -------
    applied : ndarray
        Boolean mask of the cells of the row that were updated, shape (nx,)
    """
    w1, w2 = acceleration_weights(density, accel)
    jj = accelerated_row(f.shape[1])
    row = f[:, jj, :]

    applied = (
        ~solid_mask[jj]
        & (row[3] - w1 > 0.0)
        & (row[6] - w2 > 0.0)
        & (row[7] - w2 > 0.0)
    )

    # increase 'east-side' densities
    row[1, applied] += w1
    row[5, applied] += w2
    row[8, applied] += w2
    # decrease 'west-side' densities
    row[3, applied] -= w1
    row[6, applied] -= w2
    row[7, applied] -= w2

    return applied


@njit(cache=True)
def accelerate_flow_numba(f, solid_mask, w1, w2, jj):
    """
    Numba accelerate step on row ``jj``, in place.

    Returns the number of cells that were updated.
    """
    nx = f.shape[2]
    count = 0

    for ii in range(nx):
        if solid_mask[jj, ii]:
            continue
        if f[3, jj, ii] - w1 > 0.0 and f[6, jj, ii] - w2 > 0.0 and f[7, jj, ii] - w2 > 0.0:
            f[1, jj, ii] += w1
            f[5, jj, ii] += w2
            f[8, jj, ii] += w2
            f[3, jj, ii] -= w1
            f[6, jj, ii] -= w2
            f[7, jj, ii] -= w2
            count += 1

    return count


def accelerate_flow_fast(f, solid_mask, density, accel):
    """Numba version of accelerate_flow; returns the number of updated cells."""
    w1, w2 = acceleration_weights(density, accel)
    return accelerate_flow_numba(
        f, solid_mask, np.float64(w1), np.float64(w2), accelerated_row(f.shape[1])
    )
