"""DSP building blocks for WFS driving signals.

Functions:
    delayline: Weighted, (fractionally) delayed copy of a signal
    fractional_delay_filter: FIR taps for a fractional sample delay
    filter_latency: Common latency of the fractional delay filters
    wfs_prefilter: WFS pre-equalization FIR filter
    prefilter_response: Desired magnitude of the pre-equalization filter

Example:
    >>> import numpy as np
    >>> from wfs_toolbox import WFSConfig
    >>> from wfs_toolbox.dsp import delayline, wfs_prefilter
    >>> conf = WFSConfig(usehpre=True)
    >>> hpre = wfs_prefilter(conf)
    >>> proto = np.r_[hpre, np.zeros(200)]
    >>> d = delayline(proto, 12.0, weight=0.8, conf=conf)
"""

from wfs_toolbox.dsp.delay import delayline, filter_latency, fractional_delay_filter
from wfs_toolbox.dsp.prefilter import prefilter_response, wfs_prefilter

__all__ = [
    # Delay line
    "delayline",
    "fractional_delay_filter",
    "filter_latency",
    # Pre-equalization
    "wfs_prefilter",
    "prefilter_response",
]
