"""Plotting of simulated wave fields."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from wfs_toolbox.geometry.secondary_sources import SecondarySources

# Marker size of a loudspeaker with window weight 1
_MARKER_SIZE = 60.0


def plot_wavefield(
    x: NDArray[np.floating],
    y: NDArray[np.floating],
    p: NDArray[np.floating],
    x0: SecondarySources | None = None,
    win: NDArray[np.floating] | None = None,
    ax=None,
    usedb: bool = False,
):
    """Draw a wave field snapshot and the loudspeakers that produced it.

    Args:
        x: x axis in meters
        y: y axis in meters
        p: (len(y), len(x)) sound pressure
        x0: Active secondary sources (drawn as markers)
        win: Tapering window; scales the loudspeaker markers
        ax: Axes to draw into (default: new figure)
        usedb: Plot 20*log10(|p|) instead of the linear pressure

    Returns:
        Tuple of (figure, axes)
    """
    import matplotlib.pyplot as plt

    if ax is None:
        fig, ax = plt.subplots(figsize=(7, 6))
    else:
        fig = ax.figure

    p = np.asarray(p, dtype=np.float64)
    extent = [x[0], x[-1], y[0], y[-1]]
    if usedb:
        with np.errstate(divide="ignore"):
            data = 20 * np.log10(np.abs(p))
        im = ax.imshow(
            data, extent=extent, origin="lower", cmap="viridis", vmin=-45, vmax=0
        )
        fig.colorbar(im, ax=ax, label="amplitude / dB")
    else:
        im = ax.imshow(
            p, extent=extent, origin="lower", cmap="RdBu_r", vmin=-1, vmax=1
        )
        fig.colorbar(im, ax=ax, label="amplitude")

    if x0 is not None and len(x0):
        sizes = _MARKER_SIZE * (np.ones(len(x0)) if win is None else np.asarray(win))
        ax.scatter(
            x0.positions[:, 0],
            x0.positions[:, 1],
            s=sizes,
            c="k",
            marker="s",
            zorder=3,
        )
        ax.quiver(
            x0.positions[:, 0],
            x0.positions[:, 1],
            x0.directions[:, 0],
            x0.directions[:, 1],
            color="k",
            scale=25,
            width=0.003,
            zorder=3,
        )

    ax.set_xlabel("x / m")
    ax.set_ylabel("y / m")
    ax.set_xlim(x[0], x[-1])
    ax.set_ylim(y[0], y[-1])
    ax.set_aspect("equal")
    return fig, ax
