"""Delay line for WFS driving signals.

This module shifts and weights a sampled signal by a possibly fractional
number of samples. Integer delays are exact sample shifts; the fractional
part is realized by a short FIR interpolation filter.

Functions:
    delayline: Weighted, delayed copy of a signal
    fractional_delay_filter: FIR taps for a fractional delay
    filter_latency: Common delay a fractional delay line adds to every signal

Example:
    >>> import numpy as np
    >>> from wfs_toolbox import WFSConfig
    >>> from wfs_toolbox.dsp import delayline
    >>> delayline(np.array([1.0, 0, 0, 0]), 2, weight=0.5)
    array([0. , 0. , 0.5, 0. ])
    >>> conf = WFSConfig(fracdelay_method="lagrange", fracdelay_order=4)
    >>> d = delayline(np.r_[1.0, np.zeros(15)], 3.5, conf=conf)
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import signal as sig

from wfs_toolbox.config import FRACDELAY_METHODS, WFSConfig
from wfs_toolbox.errors import InvalidArgumentError

# Kaiser window shape for the windowed-sinc interpolator
_KAISER_BETA = 5.0


def _lagrange_taps(delay: float, order: int) -> NDArray[np.float64]:
    """Lagrange interpolation taps h[k] = prod_{i != k} (D - i) / (k - i)."""
    k = np.arange(order + 1)
    taps = np.ones(order + 1)
    for i in range(order + 1):
        mask = k != i
        taps[mask] *= (delay - i) / (k[mask] - i)
    return taps


def _sinc_taps(delay: float, order: int) -> NDArray[np.float64]:
    """Kaiser-windowed sinc taps normalized to unit DC gain."""
    k = np.arange(order + 1)
    taps = np.sinc(k - delay) * sig.windows.kaiser(order + 1, _KAISER_BETA)
    return taps / taps.sum()


def _filter_offset(order: int) -> int:
    return (order - 1) // 2 if order % 2 else order // 2


def filter_latency(conf: WFSConfig) -> int:
    """Integer latency of the fractional delay filter of conf, in samples.

    A fractional delay filter is centred at this many samples, so a delay
    smaller than the latency would need non-causal taps and gets truncated by
    delayline. Callers that delay many signals by small shifts add the
    latency to every shift and remove it again when evaluating the result.
    The integer method has no latency.
    """
    if conf.fracdelay_method == "integer":
        return 0
    return _filter_offset(conf.fracdelay_order)


def fractional_delay_filter(
    fraction: float, order: int, method: str = "lagrange"
) -> tuple[NDArray[np.float64], int]:
    """Design an FIR filter that delays by a fraction of a sample.

    The filter delay is placed near the centre of the taps, where both
    interpolators are most accurate. The returned offset is the integer part
    of that centre, i.e. the filter delays by offset + fraction samples.

    Args:
        fraction: Fractional delay in [0, 1)
        order: Filter order (number of taps - 1)
        method: 'lagrange' or 'sinc'

    Returns:
        Tuple of (taps, offset)

    Raises:
        InvalidArgumentError: If method is unknown or fraction out of range
    """
    if not 0.0 <= fraction < 1.0:
        raise InvalidArgumentError(f"fraction must lie in [0, 1), got {fraction}")
    offset = _filter_offset(order)
    if method == "lagrange":
        return _lagrange_taps(offset + fraction, order), offset
    elif method == "sinc":
        return _sinc_taps(offset + fraction, order), offset
    else:
        raise InvalidArgumentError(
            f"Unknown fractional delay method: {method!r}. "
            f"Valid options: 'lagrange', 'sinc'"
        )


def _shift(samples: NDArray[np.float64], shift: int) -> NDArray[np.float64]:
    """Shift by an integer number of samples, keeping the length."""
    n = len(samples)
    shifted = np.zeros(n)
    if abs(shift) >= n:
        return shifted
    if shift >= 0:
        shifted[shift:] = samples[: n - shift]
    else:
        shifted[: n + shift] = samples[-shift:]
    return shifted


def delayline(
    signal: ArrayLike,
    delay: float,
    weight: float = 1.0,
    conf: WFSConfig | None = None,
) -> NDArray[np.float64]:
    """Delay and weight a signal.

    Returns weight * signal shifted by delay samples. The output has the
    length of the input; samples shifted past either end are dropped, so the
    caller has to provide enough zero padding for the largest delay.

    The interpolation is chosen by conf.fracdelay_method:
    - 'integer': delay rounded to the nearest sample, halves rounded up
    - 'lagrange': Lagrange interpolator of order conf.fracdelay_order
    - 'sinc': Kaiser-windowed sinc with conf.fracdelay_order + 1 taps

    A delay without fractional part is always an exact shift.
    A signal that starts at sample 0 loses leading filter taps when the
    fractional delay is below filter_latency(conf).

    Args:
        signal: 1D input signal
        delay: Delay in samples (fractional and negative values allowed)
        weight: Amplitude factor
        conf: Configuration (default: WFSConfig())

    Returns:
        Delayed and weighted copy of the signal

    Raises:
        InvalidArgumentError: If the signal is not 1D or delay is not finite
    """
    conf = conf or WFSConfig()
    samples = np.asarray(signal, dtype=np.float64)
    if samples.ndim != 1:
        raise InvalidArgumentError(
            f"delayline expects a 1D signal, got shape {samples.shape}"
        )
    if not np.isscalar(delay) or not np.isfinite(delay):
        raise InvalidArgumentError(f"delay must be a finite scalar, got {delay}")
    method = conf.fracdelay_method
    if method not in FRACDELAY_METHODS:
        raise InvalidArgumentError(f"Unknown fractional delay method: {method!r}")

    if method == "integer":
        return weight * _shift(samples, int(np.floor(delay + 0.5)))

    integer = int(np.floor(delay))
    fraction = float(delay - integer)
    if fraction == 0.0:
        return weight * _shift(samples, integer)

    taps, offset = fractional_delay_filter(fraction, conf.fracdelay_order, method)
    filtered = sig.lfilter(taps, 1.0, samples)
    return weight * _shift(filtered, integer - offset)
