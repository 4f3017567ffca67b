"""
Equilibrium Distribution Functions

Second-order Maxwell-Boltzmann equilibrium for the D2Q9 lattice:

    f_i^eq = w_i * rho * [1 + 3 (e_i . u) + 4.5 (e_i . u)^2 - 1.5 u^2]

which is the usual expansion with c_s^2 = 1/3 substituted, i.e.
(e.u)/c_s^2, (e.u)^2/(2 c_s^4) and u^2/(2 c_s^2).
"""

import numpy as np

from .lattice import EX, EY, W, CS2_INV, Q

_LINEAR = CS2_INV
_QUADRATIC = 0.5 * CS2_INV * CS2_INV
_ISOTROPIC = 0.5 * CS2_INV


def compute_equilibrium(rho, ux, uy):
    """
    Compute equilibrium distribution for all lattice sites.

    Parameters
    ----------
    rho : ndarray
        Density field, shape (ny, nx)
    ux, uy : ndarray
        Velocity components, shape (ny, nx)

    Returns
    -------
    f_eq : ndarray
        Equilibrium distribution, shape (Q, ny, nx)
    """
    ny, nx = rho.shape
    f_eq = np.empty((Q, ny, nx), dtype=np.result_type(rho, ux, uy))
    u_sq = ux * ux + uy * uy

    for i in range(Q):
        eu = EX[i] * ux + EY[i] * uy
        f_eq[i] = W[i] * rho * (1.0 + _LINEAR * eu + _QUADRATIC * eu * eu - _ISOTROPIC * u_sq)

    return f_eq


def equilibrium_single_site(rho, ux, uy):
    """
    Equilibrium distribution of one cell, shape (Q,).

    Useful for boundary conditions and testing.
    """
    u_sq = ux * ux + uy * uy
    eu = EX * ux + EY * uy
    return W * rho * (1.0 + _LINEAR * eu + _QUADRATIC * eu * eu - _ISOTROPIC * u_sq)
