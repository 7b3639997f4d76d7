"""2.5D WFS driving functions in the time domain.

The driving signal of every loudspeaker is a delayed and weighted copy of a
common prototype (a dirac, optionally pre-equalized). This module computes
the per-loudspeaker delays and weights for a virtual source and assembles the
driving signal matrix.

Functions:
    driving_parameters: Delays and weights of the 2.5D driving function
    driving_function_imp_wfs_25d: Driving signals for all loudspeakers

Example:
    >>> from wfs_toolbox import WFSConfig, secondary_source_positions
    >>> from wfs_toolbox.core.driving import driving_function_imp_wfs_25d
    >>> conf = WFSConfig()
    >>> x0 = secondary_source_positions(2.0, conf)
    >>> d, weights, delays = driving_function_imp_wfs_25d(x0, (0, 1, 0), "ps", conf)
    >>> d.shape[1] == len(x0)
    True
"""

from __future__ import annotations

import warnings
from concurrent.futures import ThreadPoolExecutor
from typing import Any, NamedTuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

from wfs_toolbox.config import WFSConfig
from wfs_toolbox.dsp.delay import delayline, filter_latency
from wfs_toolbox.dsp.prefilter import wfs_prefilter
from wfs_toolbox.errors import InvalidArgumentError, InvalidSourceTypeError
from wfs_toolbox.geometry.secondary_sources import SecondarySources
from wfs_toolbox.sources import VirtualSource, is_virtual_source, virtual_source


class DrivingSignals(NamedTuple):
    """Driving signals of a loudspeaker array.

    Attributes:
        d: (samples, N) driving signal matrix, one column per loudspeaker
        weights: (N,) amplitude weights
        delays: (N,) delays in seconds
    """

    d: NDArray[np.float64]
    weights: NDArray[np.float64]
    delays: NDArray[np.float64]


def driving_parameters(
    x0: SecondarySources, source: VirtualSource, conf: WFSConfig | None = None
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Weights and delays of the 2.5D WFS driving function.

    With g0 = sqrt(2*pi*|xref - x0|) and r = |x0 - xs|:

    - Plane wave:     delay = <n_pw, x0> / c,  weight = 2 * g0 * <n_pw, n0>
    - Point source:   delay = r / c,  weight = g0/(2*pi) * <x0 - xs, n0> * r^(-3/2)
    - Focused source: delay = -r / c, weight as for the point source

    Args:
        x0: Secondary sources
        source: PlaneWave, PointSource or FocusedSource
        conf: Configuration (uses c and xref)

    Returns:
        Tuple of (weights, delays), both of length len(x0)

    Raises:
        InvalidSourceTypeError: If source is not a virtual source variant
        NumericDegeneracyError: If a point/focused source coincides with a
            loudspeaker
    """
    conf = conf or WFSConfig()
    if not is_virtual_source(source):
        raise InvalidSourceTypeError(source)

    g0 = np.sqrt(2 * np.pi * np.linalg.norm(np.asarray(conf.xref) - x0.positions, axis=1))
    delays, weights = source.driving_parameters(x0.positions, x0.directions, g0, conf.c)
    weights.setflags(write=False)
    delays.setflags(write=False)
    return weights, delays


def _prototype(conf: WFSConfig, spread: float) -> NDArray[np.float64]:
    """Driving function prototype with room for the largest relative shift."""
    hpre = wfs_prefilter(conf) if conf.usehpre else np.ones(1)

    needed = int(np.ceil(spread))
    if conf.fracdelay_method != "integer":
        # Covers the filter taps and filter_latency(conf)
        needed += conf.fracdelay_order
    needed += 1

    if conf.zero_padding is None:
        padding = needed
    else:
        padding = conf.zero_padding
        if padding < needed:
            warnings.warn(
                f"zero_padding of {padding} samples is shorter than the delay "
                f"spread of the array ({needed} samples); driving signals of the "
                f"latest loudspeakers will be truncated",
                UserWarning,
                stacklevel=3,
            )
    return np.concatenate([hpre, np.zeros(padding)])


def driving_function_imp_wfs_25d(
    x0: SecondarySources,
    xs: ArrayLike | None,
    src: Any,
    conf: WFSConfig | None = None,
    workers: int | None = None,
) -> DrivingSignals:
    """Time-domain 2.5D WFS driving signals.

    Each column is the prototype delayed by (max(delays) - delays[i]) * fs
    samples and scaled by weights[i]. Fractional delay methods delay every
    column by filter_latency(conf) more samples, so that no column loses the
    leading taps of its interpolation filter. A shorter delay in the driving signal
    means a longer propagation time in the sound field, hence the reversed
    sign; subtracting from the maximum removes the common propagation time so
    that the latest-delayed loudspeaker starts without extra shift.

    Args:
        x0: Secondary sources
        xs: Virtual source position (direction for plane waves)
        src: 'pw', 'ps', 'fs', a SourceType or a virtual source instance
        conf: Configuration (default: WFSConfig())
        workers: Number of threads for the per-loudspeaker delay lines
            (None or 1 computes them sequentially)

    Returns:
        DrivingSignals(d, weights, delays)

    Raises:
        InvalidSourceTypeError: If src is not a known source type
        NumericDegeneracyError: If a point/focused source coincides with a
            loudspeaker
        InvalidArgumentError: If the array is empty or workers < 1
    """
    conf = conf or WFSConfig()
    source = virtual_source(xs, src)
    if len(x0) == 0:
        raise InvalidArgumentError("Cannot compute driving signals for an empty array")
    if workers is not None and workers < 1:
        raise InvalidArgumentError(f"workers must be at least 1, got {workers}")

    weights, delays = driving_parameters(x0, source, conf)
    shifts = (delays.max() - delays) * conf.fs
    latency = filter_latency(conf)
    proto = _prototype(conf, shifts.max())

    def column(i: int) -> NDArray[np.float64]:
        return delayline(proto, shifts[i] + latency, weights[i], conf)

    d = np.zeros((len(proto), len(x0)))
    if workers is None or workers == 1:
        for i in range(len(x0)):
            d[:, i] = column(i)
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            for i, col in enumerate(pool.map(column, range(len(x0)))):
                d[:, i] = col
    return DrivingSignals(d=d, weights=weights, delays=delays)
