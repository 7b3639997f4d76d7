"""
WFS Toolbox - 2.5D Wave Field Synthesis in the time domain.

Main exports:
- WFSConfig: Immutable configuration passed to every call
- secondary_source_positions: Linear, circular and box loudspeaker arrays
- PlaneWave, PointSource, FocusedSource: Virtual sources
- driving_function_imp_wfs_25d: Time-domain driving signals
- wave_field_imp_wfs_25d: Impulse response wave field at one time instant
- delayline: Weighted (fractional) delay line
- spectrum_from_signal: Single-sided amplitude/phase spectra
"""

from wfs_toolbox.config import PrefilterConfig, SecondarySourceConfig, WFSConfig
from wfs_toolbox.errors import (
    InvalidArgumentError,
    InvalidSourceTypeError,
    NumericDegeneracyError,
    WFSError,
)
from wfs_toolbox.sources import (
    FocusedSource,
    PlaneWave,
    PointSource,
    SourceType,
    VirtualSource,
    virtual_source,
)

# Re-export the numerical core for convenience
from wfs_toolbox.geometry import (
    SecondarySources,
    secondary_source_positions,
    secondary_source_selection,
    tapering_window,
)
from wfs_toolbox.dsp import delayline, wfs_prefilter
from wfs_toolbox.core import (
    DrivingSignals,
    WaveField,
    driving_function_imp_wfs_25d,
    driving_parameters,
    wave_field_imp,
    wave_field_imp_wfs_25d,
)
from wfs_toolbox.analysis import (
    plot_wavefield,
    signal_from_spectrum,
    spectrum_from_signal,
)

# Submodules for more specific imports
from . import analysis, core, dsp, geometry

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "WFSConfig",
    "PrefilterConfig",
    "SecondarySourceConfig",
    # Errors
    "WFSError",
    "InvalidArgumentError",
    "InvalidSourceTypeError",
    "NumericDegeneracyError",
    # Virtual sources
    "SourceType",
    "PlaneWave",
    "PointSource",
    "FocusedSource",
    "VirtualSource",
    "virtual_source",
    # Geometry
    "SecondarySources",
    "secondary_source_positions",
    "secondary_source_selection",
    "tapering_window",
    # DSP
    "delayline",
    "wfs_prefilter",
    # Driving functions and wave fields
    "DrivingSignals",
    "driving_parameters",
    "driving_function_imp_wfs_25d",
    "WaveField",
    "wave_field_imp",
    "wave_field_imp_wfs_25d",
    # Analysis
    "spectrum_from_signal",
    "signal_from_spectrum",
    "plot_wavefield",
    # Submodules
    "geometry",
    "dsp",
    "core",
    "analysis",
]
