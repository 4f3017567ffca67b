"""
Macroscopic Fields

Density and momentum are the zeroth and first moments of the nine
distributions of a cell:

    rho   = f0 + f1 + ... + f8
    rho u = sum_i f_i e_i

Pressure, speed and vorticity are derived from those for output and plots.
"""

import numpy as np

from .lattice import CS2, DENSITY_FLOOR


def compute_density(f):
    """Per-cell density, shape (ny, nx)."""
    return np.sum(f, axis=0)


def compute_macroscopic(f):
    """
    Compute density and velocity fields from distribution functions.

    Cells whose density is not above DENSITY_FLOOR get zero velocity.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx)

    Returns
    -------
    rho : ndarray
        Density field, shape (ny, nx)
    ux, uy : ndarray
        Velocity components, shape (ny, nx)
    """
    rho = compute_density(f)

    rho_ux = (f[1] + f[5] + f[8]) - (f[3] + f[6] + f[7])
    rho_uy = (f[2] + f[5] + f[6]) - (f[4] + f[7] + f[8])

    moving = rho > DENSITY_FLOOR
    rho_safe = np.where(moving, rho, 1.0)

    ux = np.where(moving, rho_ux / rho_safe, 0.0)
    uy = np.where(moving, rho_uy / rho_safe, 0.0)

    return rho, ux, uy


def compute_pressure(rho, cs2=CS2):
    """Pressure field p = rho * c_s^2."""
    return rho * cs2


def compute_velocity_magnitude(ux, uy):
    """Velocity magnitude field |u| = sqrt(ux^2 + uy^2)."""
    return np.sqrt(ux * ux + uy * uy)


def compute_vorticity(ux, uy, dx=1.0):
    """
    Curl of the velocity field, du_y/dx - du_x/dy.

    Central differences that wrap around the periodic edges.

    Parameters
    ----------
    ux, uy : ndarray
        Velocity components, shape (ny, nx)
    dx : float
        Cell size (1.0 in lattice units)

    Returns
    -------
    vorticity : ndarray
        Vorticity field, shape (ny, nx)
    """
    duy_dx = (np.roll(uy, -1, axis=1) - np.roll(uy, 1, axis=1)) / (2.0 * dx)
    dux_dy = (np.roll(ux, -1, axis=0) - np.roll(ux, 1, axis=0)) / (2.0 * dx)

    return duy_dx - dux_dy


def final_state_fields(f, solid_mask, density):
    """
    Per-cell output quantities of a final state.

    Obstacle cells report zero velocity and the reference pressure
    ``density * c_s^2``.

    Returns
    -------
    ux, uy, speed, pressure : ndarray
        Each of shape (ny, nx)
    """
    rho, ux, uy = compute_macroscopic(f)

    ux = np.where(solid_mask, 0.0, ux)
    uy = np.where(solid_mask, 0.0, uy)
    speed = compute_velocity_magnitude(ux, uy)
    pressure = np.where(solid_mask, compute_pressure(density), compute_pressure(rho))

    return ux, uy, speed, pressure
