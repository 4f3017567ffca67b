"""
Run Diagnostics

Scalar summaries of a field snapshot: mean fluid speed, total mass and the
Reynolds number.
"""

import numpy as np

from .errors import ConfigurationError
from .observables import compute_macroscopic
from .streaming import mean_speed


def average_velocity(field, mask):
    """
    Mean velocity magnitude over the fluid cells of ``field``.

    Agrees with the value returned by the streaming pass that produced
    ``field``, since collision conserves each cell's density and momentum.
    Returns 0.0 when every cell is an obstacle.

    Parameters
    ----------
    field : LatticeField
    mask : ObstacleMask
    """
    _, ux, uy = compute_macroscopic(field.speeds)
    return mean_speed(ux, uy, mask.solid)


def total_density(field):
    """Sum of all distribution values; constant from one timestep to the next."""
    return float(np.sum(field.speeds, dtype=np.float64))


def reynolds_number(params, av_velocity):
    """
    Reynolds number Re = u * L / nu.

    Parameters
    ----------
    params : ParameterSet
        Supplies omega and the characteristic length ``reynolds_dim``
    av_velocity : float
        Mean fluid velocity

    Raises
    ------
    ConfigurationError
        If omega == 2, where the viscosity vanishes.
    """
    viscosity = (2.0 / params.omega - 1.0) / 6.0
    if viscosity == 0.0:
        raise ConfigurationError("viscosity is zero for omega == 2; Reynolds number undefined")
    return av_velocity * params.reynolds_dim / viscosity


def calc_reynolds(params, field, mask):
    """Reynolds number of a field snapshot."""
    return reynolds_number(params, average_velocity(field, mask))
