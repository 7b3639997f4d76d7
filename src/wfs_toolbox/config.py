"""Configuration values for WFS simulations.

Every computation in the toolbox takes an explicit, immutable configuration
instead of reading global state. Only the fields actually consumed by the
toolbox are defined here.

Classes:
    PrefilterConfig: Design parameters of the WFS pre-equalization filter
    SecondarySourceConfig: Loudspeaker array geometry
    WFSConfig: Complete configuration passed to every call

Example:
    >>> from wfs_toolbox.config import SecondarySourceConfig, WFSConfig
    >>> conf = WFSConfig(fs=48000, usehpre=True)
    >>> conf.hpre.fhigh
    1200.0
    >>> circle = conf.replace(
    ...     secondary_sources=SecondarySourceConfig(geometry="circle", dx0=0.1),
    ...     xref=(0.0, 0.0, 0.0),
    ... )
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Literal

import numpy as np

from wfs_toolbox.errors import InvalidArgumentError

Geometry = Literal["linear", "circle", "box"]
FracDelayMethod = Literal["integer", "lagrange", "sinc"]

GEOMETRIES = ("linear", "circle", "box")
FRACDELAY_METHODS = ("integer", "lagrange", "sinc")


def as_point(value: Any, name: str) -> tuple[float, float, float]:
    """Convert a 2D or 3D coordinate to a float 3-tuple (z defaults to 0)."""
    arr = np.asarray(value, dtype=np.float64)
    if arr.ndim != 1 or arr.shape[0] not in (2, 3):
        raise InvalidArgumentError(
            f"{name} must be a 2D or 3D coordinate, got shape {arr.shape}"
        )
    if not np.all(np.isfinite(arr)):
        raise InvalidArgumentError(f"{name} must be finite, got {value}")
    if arr.shape[0] == 2:
        arr = np.append(arr, 0.0)
    return (float(arr[0]), float(arr[1]), float(arr[2]))


def _positive(value: float, name: str) -> None:
    if not np.isfinite(value) or value <= 0:
        raise InvalidArgumentError(f"{name} must be positive, got {value}")


def _integer(value: Any, name: str, minimum: int) -> int:
    """Return value as an int, rejecting fractional values and values < minimum."""
    if isinstance(value, bool) or not np.isscalar(value):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
    try:
        as_int = int(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}") from e
    if as_int != value or as_int < minimum:
        raise InvalidArgumentError(
            f"{name} must be an integer >= {minimum}, got {value!r}"
        )
    return as_int


@dataclass(frozen=True)
class PrefilterConfig:
    """Design parameters of the WFS pre-equalization filter.

    Args:
        flow: Lower corner frequency in Hz (flat response below)
        fhigh: Upper corner frequency in Hz (flat response above)
        order: FIR order (even; the filter has order + 1 taps)
    """

    flow: float = 50.0
    fhigh: float = 1200.0
    order: int = 128

    def __post_init__(self) -> None:
        object.__setattr__(self, "flow", float(self.flow))
        object.__setattr__(self, "fhigh", float(self.fhigh))
        _positive(self.flow, "hpre.flow")
        if self.fhigh <= self.flow:
            raise InvalidArgumentError(
                f"hpre.fhigh ({self.fhigh}) must be greater than "
                f"hpre.flow ({self.flow})"
            )
        object.__setattr__(self, "order", _integer(self.order, "hpre.order", 2))
        if self.order % 2:
            raise InvalidArgumentError(
                f"hpre.order must be a positive even integer, got {self.order}"
            )

    def check_sampling_rate(self, fs: float) -> None:
        """Raise if the upper corner frequency is not below fs / 2."""
        if self.fhigh >= fs / 2:
            raise InvalidArgumentError(
                f"hpre.fhigh ({self.fhigh} Hz) exceeds Nyquist frequency {fs / 2} Hz"
            )


@dataclass(frozen=True)
class SecondarySourceConfig:
    """Loudspeaker array geometry.

    Args:
        geometry: 'linear', 'circle' or 'box'
        center: Array center in meters
        dx0: Distance between neighbouring loudspeakers in meters
    """

    geometry: Geometry = "linear"
    center: tuple[float, float, float] = (0.0, 0.0, 0.0)
    dx0: float = 0.15

    def __post_init__(self) -> None:
        if self.geometry not in GEOMETRIES:
            raise InvalidArgumentError(
                f"Unknown array geometry: {self.geometry!r}. "
                f"Valid options: {', '.join(repr(g) for g in GEOMETRIES)}"
            )
        object.__setattr__(self, "center", as_point(self.center, "center"))
        object.__setattr__(self, "dx0", float(self.dx0))
        _positive(self.dx0, "dx0")


@dataclass(frozen=True)
class WFSConfig:
    """Configuration for driving-function synthesis and field simulation.

    Args:
        fs: Sampling rate in Hz
        c: Speed of sound in m/s
        xref: Reference point for the 2.5D amplitude correction (m)
        usehpre: Apply the WFS pre-equalization filter to the driving signals
        hpre: Pre-equalization filter design
        fracdelay_method: Delay line interpolation ('integer', 'lagrange', 'sinc')
        fracdelay_order: Order of the fractional delay filter
        zero_padding: Fixed zero padding of the driving function prototype in
            samples. None derives it from the delay spread of the array.
        secondary_sources: Loudspeaker array geometry
        usetapwin: Apply a tapering window to the array edges
        tapwinlen: Tapered fraction of the array (0 = none, 1 = Hann)
        resolution: Number of grid points along each axis of the wave field
        usenormalisation: Normalize the simulated field to a maximum of 1
        useplot: Draw diagnostic plots where supported
    """

    fs: int = 44100
    c: float = 343.0
    xref: tuple[float, float, float] = (0.0, -2.0, 0.0)
    usehpre: bool = False
    hpre: PrefilterConfig = field(default_factory=PrefilterConfig)
    fracdelay_method: FracDelayMethod = "integer"
    fracdelay_order: int = 8
    zero_padding: int | None = None
    secondary_sources: SecondarySourceConfig = field(
        default_factory=SecondarySourceConfig
    )
    usetapwin: bool = True
    tapwinlen: float = 0.3
    resolution: int = 300
    usenormalisation: bool = True
    useplot: bool = False

    def __post_init__(self) -> None:
        _positive(self.fs, "fs")
        _positive(self.c, "c")
        object.__setattr__(self, "xref", as_point(self.xref, "xref"))

        # The prefilter is only designed when enabled
        if self.usehpre:
            self.hpre.check_sampling_rate(self.fs)
        if self.fracdelay_method not in FRACDELAY_METHODS:
            raise InvalidArgumentError(
                f"Unknown fractional delay method: {self.fracdelay_method!r}. "
                f"Valid options: {', '.join(repr(m) for m in FRACDELAY_METHODS)}"
            )
        object.__setattr__(
            self, "fracdelay_order", _integer(self.fracdelay_order, "fracdelay_order", 1)
        )
        if self.zero_padding is not None:
            object.__setattr__(
                self, "zero_padding", _integer(self.zero_padding, "zero_padding", 0)
            )
        if not 0.0 <= self.tapwinlen <= 1.0:
            raise InvalidArgumentError(
                f"tapwinlen must lie in [0, 1], got {self.tapwinlen}"
            )
        object.__setattr__(
            self, "resolution", _integer(self.resolution, "resolution", 2)
        )

    def replace(self, **changes: Any) -> WFSConfig:
        """Return a copy with the given fields replaced (and re-validated)."""
        return dataclasses.replace(self, **changes)
