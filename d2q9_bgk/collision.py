"""
BGK Collision Operator

The collision step relaxes every distribution toward its local equilibrium
at rate omega (the inverse relaxation time tau = 1/omega):

    f_i' = f_i + omega * (f_i^eq - f_i)

omega sets the kinematic viscosity in lattice units:

    nu = c_s^2 * (1/omega - 1/2) = (2/omega - 1) / 6

Stability requires 0 < omega < 2 (nu > 0).
"""

from .lattice import CS2


def viscosity_from_omega(omega, cs2=CS2):
    """
    Kinematic viscosity for relaxation parameter ``omega``.

    Raises
    ------
    ValueError
        If omega is not in (0, 2), where the viscosity is not positive.
    """
    if not 0.0 < omega < 2.0:
        raise ValueError(f"omega must be in (0, 2) for a positive viscosity, got {omega}")
    return cs2 * (1.0 / omega - 0.5)


def omega_from_viscosity(nu, cs2=CS2):
    """Relaxation parameter that yields kinematic viscosity ``nu``."""
    if nu <= 0.0:
        raise ValueError(f"viscosity must be positive, got {nu}")
    return 1.0 / (nu / cs2 + 0.5)


def bgk_collision(f, f_eq, omega):
    """
    BGK (Bhatnagar-Gross-Krook) collision operator.

    Parameters
    ----------
    f : ndarray
        Distribution functions (Q, ny, nx)
    f_eq : ndarray
        Equilibrium distribution (Q, ny, nx)
    omega : float
        Relaxation parameter

    Returns
    -------
    f_out : ndarray
        Post-collision distribution
    """
    return f + omega * (f_eq - f)
