"""Single-sided amplitude and phase spectra.

Typical usage:
    >>> amplitude, phase, f = spectrum_from_signal(d, conf, axis=0)
    >>> recovered = signal_from_spectrum(amplitude, phase, d.shape[0], axis=0)
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from wfs_toolbox.config import WFSConfig
from wfs_toolbox.errors import InvalidArgumentError


def _resolve_axis(shape: tuple[int, ...], axis: int | None) -> int:
    """Validate axis; None selects the first non-singleton axis."""
    if axis is None:
        non_singleton = [i for i, size in enumerate(shape) if size != 1]
        return non_singleton[0] if non_singleton else 0
    if not -len(shape) <= axis < len(shape):
        raise InvalidArgumentError(
            f"axis {axis} is out of range for a signal of shape {shape}"
        )
    return axis % len(shape)


def _move_axis_to_front(
    data: NDArray[Any], axis: int
) -> tuple[NDArray[Any], tuple[int, ...]]:
    """Move axis to the front and flatten the remaining axes.

    Returns:
        Tuple of (2D array, shape of the flattened trailing axes)
    """
    moved = np.moveaxis(data, axis, 0)
    return moved.reshape(moved.shape[0], -1), moved.shape[1:]


def _restore_axis(
    data: NDArray[Any], trailing: tuple[int, ...], axis: int
) -> NDArray[Any]:
    """Inverse of _move_axis_to_front with a possibly different leading length."""
    return np.moveaxis(data.reshape((data.shape[0],) + trailing), 0, axis)


def _doubled_bins(n: int) -> slice:
    """Bins that carry mirrored energy: all but DC, and Nyquist for even n."""
    return slice(1, None) if n % 2 else slice(1, -1)


def spectrum_from_signal(
    signal: ArrayLike,
    conf: WFSConfig | None = None,
    axis: int | None = None,
    plot: bool = False,
) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    """Single-sided amplitude and phase spectra of a (multichannel) signal.

    For N samples the spectrum covers the bins 0..(N-1)/2 (odd N) or
    0..N/2 (even N, Nyquist included). Amplitudes are normalized by N and
    doubled for every bin that has a mirrored counterpart, i.e. all but DC
    and Nyquist.

    Args:
        signal: Time signal of any rank
        conf: Configuration (uses fs and useplot)
        axis: Time axis (default: first non-singleton axis)
        plot: Draw the log-magnitude and unwrapped phase

    Returns:
        Tuple of (amplitude, phase, f). amplitude and phase have the shape of
        the signal with the time axis replaced by the frequency axis; f holds
        the frequencies in Hz.

    Raises:
        InvalidArgumentError: If the signal is empty or axis is out of range
    """
    conf = conf or WFSConfig()
    data = np.asarray(signal, dtype=np.float64)
    if data.ndim == 0 or data.size == 0:
        raise InvalidArgumentError(
            f"spectrum_from_signal needs a non-empty signal, got shape {data.shape}"
        )
    axis = _resolve_axis(data.shape, axis)
    flat, trailing = _move_axis_to_front(data, axis)

    bins = flat.shape[0]
    compspec = np.fft.fft(flat, axis=0)
    n_freqs = bins // 2 + 1
    f = conf.fs / bins * np.arange(n_freqs)

    amplitude = np.abs(compspec[:n_freqs])
    phase = np.angle(compspec[:n_freqs])
    amplitude[_doubled_bins(bins)] *= 2
    amplitude /= bins

    if plot or conf.useplot:
        plot_spectrum(f, amplitude, phase, conf.fs)

    return (
        _restore_axis(amplitude, trailing, axis),
        _restore_axis(phase, trailing, axis),
        f,
    )


def signal_from_spectrum(
    amplitude: ArrayLike,
    phase: ArrayLike,
    n: int,
    axis: int = 0,
) -> NDArray[np.float64]:
    """Rebuild a real time signal from its single-sided spectrum.

    Inverse of spectrum_from_signal.

    Args:
        amplitude: Single-sided amplitude spectrum
        phase: Single-sided phase spectrum in rad
        n: Length of the time signal
        axis: Frequency axis

    Returns:
        Time signal with n samples along axis

    Raises:
        InvalidArgumentError: If the number of bins does not match n
    """
    amplitude = np.asarray(amplitude, dtype=np.float64)
    phase = np.asarray(phase, dtype=np.float64)
    if amplitude.shape != phase.shape:
        raise InvalidArgumentError(
            f"amplitude {amplitude.shape} and phase {phase.shape} differ in shape"
        )
    axis = _resolve_axis(amplitude.shape, axis)
    if amplitude.shape[axis] != n // 2 + 1:
        raise InvalidArgumentError(
            f"{amplitude.shape[axis]} frequency bins do not belong to a signal "
            f"of {n} samples"
        )
    flat_amplitude, trailing = _move_axis_to_front(amplitude, axis)
    flat_phase, _ = _move_axis_to_front(phase, axis)

    scaled = flat_amplitude * n
    scaled[_doubled_bins(n)] /= 2
    spectrum = scaled * np.exp(1j * flat_phase)
    signal = np.fft.irfft(spectrum, n=n, axis=0)
    return _restore_axis(signal, trailing, axis)


def plot_spectrum(
    f: NDArray[np.floating],
    amplitude: NDArray[np.floating],
    phase: NDArray[np.floating],
    fs: float,
):
    """Plot magnitude in dB and unwrapped phase over a logarithmic frequency axis.

    Args:
        f: Frequencies in Hz
        amplitude: (len(f), channels) amplitude spectrum
        phase: (len(f), channels) phase spectrum in rad
        fs: Sampling rate in Hz

    Returns:
        The matplotlib Figure
    """
    import matplotlib.pyplot as plt

    fig, axes = plt.subplots(2, 1, figsize=(8, 6), sharex=True)
    fig.suptitle("Spectrum")

    with np.errstate(divide="ignore"):
        magnitude_db = 20 * np.log10(np.abs(amplitude))
    axes[0].semilogx(f, magnitude_db)
    axes[0].set_ylabel("amplitude / dB")
    axes[0].grid(True)

    axes[1].semilogx(f, np.unwrap(phase, axis=0))
    axes[1].set_xlabel("frequency / Hz")
    axes[1].set_ylabel("phase / rad")
    axes[1].grid(True)
    axes[1].set_xlim(1, fs / 2)

    fig.tight_layout()
    return fig
