"""
Streaming, Collision and Bounce-Back

The timestep core. Every cell pulls its incoming distributions from its
8 neighbours (periodic in both axes) plus its own rest value, then

- obstacle cells reflect them (bounce-back: 1<->3, 2<->4, 5<->7, 6<->8,
  rest value copied unchanged), and
- fluid cells relax them toward the local BGK equilibrium.

Results go to a second field at the same position (pull scheme), so each
cell update only reads the input field and writes its own output cell; rows
can be processed in parallel without synchronisation.

The pass also returns the mean velocity magnitude over fluid cells, which
is 0.0 on a fully obstructed grid. Fluid cells whose local density is not
above DENSITY_FLOOR are treated as being at rest.
"""

import math

import numpy as np
from numba import njit, prange

from .boundary import apply_bounce_back
from .collision import bgk_collision
from .equilibrium import compute_equilibrium
from .lattice import EX, EY, Q, W0, W1, W2, DENSITY_FLOOR
from .observables import compute_macroscopic


def stream_periodic(f):
    """
    Periodic streaming using pull scheme.

    f_out[i](x) = f[i](x - e_i), wrapping at the domain edges.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx)

    Returns
    -------
    f_streamed : ndarray
        Post-streaming distribution
    """
    f_out = np.empty_like(f)

    for i in range(Q):
        f_out[i] = np.roll(f[i], (EY[i], EX[i]), axis=(0, 1))

    return f_out


def mean_speed(ux, uy, solid_mask):
    """Mean of |u| over fluid cells, 0.0 when there are none."""
    fluid = ~solid_mask
    num_fluid = np.count_nonzero(fluid)
    if num_fluid == 0:
        return 0.0
    speed = np.sqrt(ux[fluid] ** 2 + uy[fluid] ** 2)
    return float(speed.sum() / num_fluid)


def stream_collide(f_in, f_out, solid_mask, omega):
    """
    Fused streaming, collision and bounce-back (vectorised NumPy).

    Parameters
    ----------
    f_in : ndarray
        Current distribution, shape (Q, ny, nx); not modified
    f_out : ndarray
        Scratch distribution, shape (Q, ny, nx); fully overwritten
    solid_mask : ndarray
        Boolean obstacle mask, shape (ny, nx)
    omega : float
        Relaxation parameter

    Returns
    -------
    av_vel : float
        Mean velocity magnitude over fluid cells
    """
    pulled = stream_periodic(f_in)
    rho, ux, uy = compute_macroscopic(pulled)

    f_eq = compute_equilibrium(rho, ux, uy)
    collided = bgk_collision(pulled, f_eq, omega)
    bounced = apply_bounce_back(pulled, solid_mask)

    f_out[...] = np.where(solid_mask, bounced, collided)

    return mean_speed(ux, uy, solid_mask)


@njit(parallel=True, cache=True)
def stream_collide_numba(f_in, f_out, solid_mask, omega, density_floor):
    """
    Numba fused streaming, collision and bounce-back.

    Parameters
    ----------
    f_in : ndarray
        Current distribution, shape (Q, ny, nx)
    f_out : ndarray
        Output distribution, shape (Q, ny, nx)
    solid_mask : ndarray
        Boolean obstacle mask, shape (ny, nx)
    omega : float
        Relaxation parameter
    density_floor : float
        Local densities at or below this are treated as fluid at rest

    Returns
    -------
    tot_u : float
        Sum of |u| over fluid cells
    tot_cells : int
        Number of fluid cells
    """
    q, ny, nx = f_in.shape

    tot_u = 0.0
    tot_cells = 0

    for jj in prange(ny):
        y_n = (jj + 1) % ny
        y_s = jj - 1 if jj > 0 else ny - 1
        for ii in range(nx):
            x_e = (ii + 1) % nx
            x_w = ii - 1 if ii > 0 else nx - 1

            s0 = f_in[0, jj, ii]     # rest
            s1 = f_in[1, jj, x_w]    # east
            s2 = f_in[2, y_s, ii]    # north
            s3 = f_in[3, jj, x_e]    # west
            s4 = f_in[4, y_n, ii]    # south
            s5 = f_in[5, y_s, x_w]   # north-east
            s6 = f_in[6, y_s, x_e]   # north-west
            s7 = f_in[7, y_n, x_e]   # south-west
            s8 = f_in[8, y_n, x_w]   # south-east

            if solid_mask[jj, ii]:
                f_out[0, jj, ii] = s0
                f_out[1, jj, ii] = s3
                f_out[2, jj, ii] = s4
                f_out[3, jj, ii] = s1
                f_out[4, jj, ii] = s2
                f_out[5, jj, ii] = s7
                f_out[6, jj, ii] = s8
                f_out[7, jj, ii] = s5
                f_out[8, jj, ii] = s6
                continue

            local_density = s0 + s1 + s2 + s3 + s4 + s5 + s6 + s7 + s8

            if local_density > density_floor:
                u_x = (s1 + s5 + s8 - (s3 + s6 + s7)) / local_density
                u_y = (s2 + s5 + s6 - (s4 + s7 + s8)) / local_density
            else:
                u_x = 0.0
                u_y = 0.0

            u_sq = u_x * u_x + u_y * u_y
            iso = 1.0 - 1.5 * u_sq

            d0 = W0 * local_density * iso
            d1 = W1 * local_density * (iso + 3.0 * u_x + 4.5 * u_x * u_x)
            d2 = W1 * local_density * (iso + 3.0 * u_y + 4.5 * u_y * u_y)
            d3 = W1 * local_density * (iso - 3.0 * u_x + 4.5 * u_x * u_x)
            d4 = W1 * local_density * (iso - 3.0 * u_y + 4.5 * u_y * u_y)
            u5 = u_x + u_y
            u6 = -u_x + u_y
            d5 = W2 * local_density * (iso + 3.0 * u5 + 4.5 * u5 * u5)
            d6 = W2 * local_density * (iso + 3.0 * u6 + 4.5 * u6 * u6)
            d7 = W2 * local_density * (iso - 3.0 * u5 + 4.5 * u5 * u5)
            d8 = W2 * local_density * (iso - 3.0 * u6 + 4.5 * u6 * u6)

            f_out[0, jj, ii] = s0 + omega * (d0 - s0)
            f_out[1, jj, ii] = s1 + omega * (d1 - s1)
            f_out[2, jj, ii] = s2 + omega * (d2 - s2)
            f_out[3, jj, ii] = s3 + omega * (d3 - s3)
            f_out[4, jj, ii] = s4 + omega * (d4 - s4)
            f_out[5, jj, ii] = s5 + omega * (d5 - s5)
            f_out[6, jj, ii] = s6 + omega * (d6 - s6)
            f_out[7, jj, ii] = s7 + omega * (d7 - s7)
            f_out[8, jj, ii] = s8 + omega * (d8 - s8)

            tot_u += math.sqrt(u_sq)
            tot_cells += 1

    return tot_u, tot_cells


def stream_collide_fast(f_in, f_out, solid_mask, omega):
    """Numba version of stream_collide; same arguments and return value."""
    tot_u, tot_cells = stream_collide_numba(
        f_in, f_out, solid_mask, float(omega), DENSITY_FLOOR
    )
    if tot_cells == 0:
        return 0.0
    return tot_u / tot_cells
