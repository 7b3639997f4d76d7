"""Impulse response wave field of a WFS system.

Functions:
    wave_field_imp_wfs_25d: Field of a 2.5D WFS array at one time instant

Example:
    >>> from wfs_toolbox import WFSConfig, wave_field_imp_wfs_25d
    >>> conf = WFSConfig(resolution=100)
    >>> x, y, p, x0, win = wave_field_imp_wfs_25d(
    ...     [-2, 2], [-3, 0.15], (0, 1, 0), "ps", t=300, L=3.0, conf=conf
    ... )
    >>> p.shape
    (100, 100)

To plot the result:
    >>> from wfs_toolbox.analysis import plot_wavefield
    >>> fig, ax = plot_wavefield(x, y, p, x0, win)
"""

from __future__ import annotations

from typing import Any, NamedTuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

from wfs_toolbox.config import WFSConfig
from wfs_toolbox.core.driving import driving_function_imp_wfs_25d
from wfs_toolbox.core.field import axis_limits, wave_field_imp
from wfs_toolbox.dsp.delay import filter_latency
from wfs_toolbox.errors import InvalidArgumentError
from wfs_toolbox.geometry.secondary_sources import (
    SecondarySources,
    secondary_source_positions,
)
from wfs_toolbox.geometry.selection import secondary_source_selection, tapering_window
from wfs_toolbox.sources import virtual_source


class WaveField(NamedTuple):
    """Simulated wave field and the array that produced it.

    Attributes:
        x: x axis in meters
        y: y axis in meters
        p: (len(y), len(x)) sound pressure
        x0: Active secondary sources
        win: Tapering window applied to the active secondary sources
    """

    x: NDArray[np.float64]
    y: NDArray[np.float64]
    p: NDArray[np.float64]
    x0: SecondarySources
    win: NDArray[np.float64]


def wave_field_imp_wfs_25d(
    X: ArrayLike,
    Y: ArrayLike,
    xs: ArrayLike | None,
    src: Any,
    t: float,
    L: float,
    conf: WFSConfig | None = None,
    workers: int | None = None,
) -> WaveField:
    """Wave field of a 2.5D WFS impulse at time t.

    The array is built from conf.secondary_sources and the length L, reduced
    to the loudspeakers that are active for the virtual source and tapered at
    its edges. Time t = 0 is the moment the first active loudspeaker emits.

    Args:
        X: Length of the x axis or [xmin, xmax] in meters
        Y: Length of the y axis or [ymin, ymax] in meters
        xs: Virtual source position (direction for plane waves)
        src: 'pw', 'ps', 'fs', a SourceType or a virtual source instance
        t: Time instant in samples
        L: Array length (diameter/edge length for circle/box arrays) in meters
        conf: Configuration (default: WFSConfig())
        workers: Threads for the driving signal computation

    Returns:
        WaveField(x, y, p, x0, win)

    Raises:
        InvalidArgumentError: On invalid extents, time or array length, or if
            no loudspeaker is active for the virtual source
        InvalidSourceTypeError: If src is not a known source type
    """
    conf = conf or WFSConfig()
    axis_limits(X, "X")
    axis_limits(Y, "Y")
    if not np.isscalar(t) or not np.isfinite(t):
        raise InvalidArgumentError(f"t must be a finite scalar, got {t}")
    source = virtual_source(xs, src)

    x0 = secondary_source_positions(L, conf)
    x0 = secondary_source_selection(x0, source)
    if len(x0) == 0:
        raise InvalidArgumentError(
            f"No secondary source is active for {source}; check the array "
            f"geometry and the source position"
        )
    win = tapering_window(x0, conf)

    d, _, delays = driving_function_imp_wfs_25d(x0, None, source, conf, workers=workers)
    d = d * win[np.newaxis, :]

    # t = 0 is the first active loudspeaker
    t = t - np.max((delays.max() - delays) * conf.fs) - filter_latency(conf)

    x, y, p = wave_field_imp(X, Y, x0, d, t, conf)
    return WaveField(x=x, y=y, p=p, x0=x0, win=win)
