"""
Result Files

final_state.dat   one line per cell (y outer, x inner):
                  x y u_x u_y |u| pressure obstacle
av_vels.dat       one line per timestep:  iteration:<TAB>mean velocity
"""

import numpy as np

from .errors import OutputError
from .observables import final_state_fields

FINAL_STATE_FILE = "final_state.dat"
AV_VELS_FILE = "av_vels.dat"

FINAL_STATE_FORMAT = "%d %d %.12E %.12E %.12E %.12E %d"
AV_VELS_FORMAT = "%d:\t%.12E"


def final_state_table(field, mask, params):
    """
    Rows of the final state file as an (nx*ny, 7) array.

    Columns are x, y, u_x, u_y, |u|, pressure and the obstacle flag.
    """
    ux, uy, speed, pressure = final_state_fields(field.speeds, mask.solid, params.density)
    Y, X = np.mgrid[0:field.ny, 0:field.nx]

    columns = (X, Y, ux, uy, speed, pressure, mask.solid.astype(np.int64))
    return np.column_stack([np.ravel(c).astype(np.float64) for c in columns])


def _savetxt(path, table, fmt):
    try:
        np.savetxt(path, table, fmt=fmt)
    except OSError as exc:
        raise OutputError(f"could not write output file {path}: {exc.strerror}") from exc


def write_final_state(path, field, mask, params, table=None):
    """
    Write per-cell velocity, pressure and obstacle flag of ``field``.

    ``table`` may hold rows already produced by final_state_table.
    """
    if table is None:
        table = final_state_table(field, mask, params)
    _savetxt(path, table, FINAL_STATE_FORMAT)


def write_av_vels(path, av_vels):
    """Write the mean velocity of every timestep."""
    av_vels = np.asarray(av_vels, dtype=np.float64)
    table = np.column_stack((np.arange(av_vels.size), av_vels))
    _savetxt(path, table.reshape(-1, 2), AV_VELS_FORMAT)
