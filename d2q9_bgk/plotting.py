"""
Field Visualization

Plots of a final state: velocity magnitude with obstacles shaded, and
vorticity.
"""

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from .errors import OutputError
from .observables import compute_vorticity, final_state_fields


def _savefig(fig, path):
    try:
        fig.savefig(path, dpi=150, bbox_inches="tight")
    except OSError as exc:
        raise OutputError(f"could not write figure {path}: {exc.strerror}") from exc
    finally:
        plt.close(fig)


def plot_final_state(field, mask, params, save_path=None, title=None):
    """
    Plot speed and vorticity of ``field`` side by side.

    Parameters
    ----------
    field : LatticeField
    mask : ObstacleMask
    params : ParameterSet
    save_path : str, optional
        Path to save figure
    title : str, optional
        Figure title

    Returns
    -------
    fig : matplotlib.figure.Figure
    """
    ux, uy, speed, _ = final_state_fields(field.speeds, mask.solid, params.density)
    vorticity = np.where(mask.solid, np.nan, compute_vorticity(ux, uy))
    solid = np.ma.masked_where(~mask.solid, mask.solid)

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(12, 5))

    im1 = ax1.imshow(speed, origin="lower", cmap="viridis")
    ax1.imshow(solid, origin="lower", cmap="gray_r", vmin=0, vmax=1)
    ax1.set_title("Velocity magnitude")
    fig.colorbar(im1, ax=ax1, shrink=0.8)

    limit = float(np.nanmax(np.abs(vorticity))) if np.any(np.isfinite(vorticity)) else 0.0
    limit = limit or 1.0
    im2 = ax2.imshow(vorticity, origin="lower", cmap="RdBu_r",
                     vmin=-limit, vmax=limit)
    ax2.set_title("Vorticity")
    fig.colorbar(im2, ax=ax2, shrink=0.8)

    for ax in (ax1, ax2):
        ax.set_xlabel("x")
        ax.set_ylabel("y")

    if title:
        fig.suptitle(title)
    fig.tight_layout()

    if save_path:
        _savefig(fig, save_path)

    return fig


def plot_av_vels(av_vels, save_path=None):
    """Plot mean velocity against timestep."""
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(np.arange(len(av_vels)), av_vels, "b-", linewidth=1.5)
    ax.set_xlabel("Timestep")
    ax.set_ylabel("Average velocity")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()

    if save_path:
        _savefig(fig, save_path)

    return fig
