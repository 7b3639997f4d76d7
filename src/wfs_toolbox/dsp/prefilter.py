"""WFS pre-equalization filter.

The 2.5D WFS driving function contains a sqrt(j*omega/c) high-pass term.
It is applied in the time domain as a linear-phase FIR filter that follows
the sqrt(f) slope between two corner frequencies and is flat outside,
normalized to 0 dB at the upper corner.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy import signal as sig

from wfs_toolbox.config import WFSConfig

# Frequency grid density for the filter design (points per Hz)
_GRID_DENSITY = 0.1


def prefilter_response(
    frequencies: NDArray[np.floating], conf: WFSConfig
) -> NDArray[np.float64]:
    """Desired magnitude of the pre-equalization filter.

    Args:
        frequencies: Frequencies in Hz
        conf: Configuration (uses c and hpre)

    Returns:
        Magnitude at each frequency, 1 at and above hpre.fhigh
    """
    flow, fhigh = conf.hpre.flow, conf.hpre.fhigh
    clipped = np.clip(frequencies, flow, fhigh)
    return np.sqrt(2 * np.pi * clipped / conf.c) / np.sqrt(2 * np.pi * fhigh / conf.c)


def wfs_prefilter(conf: WFSConfig | None = None) -> NDArray[np.float64]:
    """Design the WFS pre-equalization FIR filter.

    Args:
        conf: Configuration (default: WFSConfig())

    Returns:
        Filter taps (conf.hpre.order + 1 values, symmetric)

    Raises:
        InvalidArgumentError: If hpre.fhigh is not below the Nyquist frequency
    """
    conf = conf or WFSConfig()
    conf.hpre.check_sampling_rate(conf.fs)
    nyquist = conf.fs / 2
    num = max(int(nyquist * _GRID_DENSITY), 64)
    freqs = np.linspace(0, nyquist, num)
    # Corner frequencies on the grid keep the kinks of the response
    freqs = np.union1d(freqs, [conf.hpre.flow, conf.hpre.fhigh])
    gains = prefilter_response(freqs, conf)
    return sig.firwin2(conf.hpre.order + 1, freqs, gains, fs=conf.fs)
