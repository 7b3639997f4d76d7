"""Spectral analysis and plotting of driving signals and wave fields."""

from wfs_toolbox.analysis.plot import plot_wavefield
from wfs_toolbox.analysis.spectrum import (
    plot_spectrum,
    signal_from_spectrum,
    spectrum_from_signal,
)

__all__ = [
    # Spectrum
    "spectrum_from_signal",
    "signal_from_spectrum",
    "plot_spectrum",
    # Wave field
    "plot_wavefield",
]
