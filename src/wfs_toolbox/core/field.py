"""Sound field of a loudspeaker array in the time domain.

Every loudspeaker is modelled as a 3D monopole, g(x, t) = delta(t - r/c) / (4*pi*r).
The field at a point is the sum of all driving signals, each read at the
retarded time t - r/c and attenuated by 1/(4*pi*r).

Functions:
    xy_grid: Axes of the evaluation grid
    wave_field_imp: Field of driven loudspeakers at one time instant
"""

from __future__ import annotations

from typing import NamedTuple

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.interpolate import make_interp_spline

from wfs_toolbox.config import WFSConfig
from wfs_toolbox.errors import InvalidArgumentError
from wfs_toolbox.geometry.secondary_sources import SecondarySources


class FieldSnapshot(NamedTuple):
    """Sound pressure on a grid in the z = 0 plane.

    Attributes:
        x: x axis in meters
        y: y axis in meters
        p: (len(y), len(x)) sound pressure
    """

    x: NDArray[np.float64]
    y: NDArray[np.float64]
    p: NDArray[np.float64]


def axis_limits(value: ArrayLike, name: str) -> tuple[float, float]:
    """Axis limits from a length (centered at 0) or a [min, max] pair."""
    arr = np.asarray(value, dtype=np.float64)
    if arr.ndim == 0:
        if not np.isfinite(arr) or arr <= 0:
            raise InvalidArgumentError(f"{name} length must be positive, got {value}")
        return -float(arr) / 2, float(arr) / 2
    if arr.shape != (2,) or not np.all(np.isfinite(arr)) or arr[0] >= arr[1]:
        raise InvalidArgumentError(
            f"{name} must be a length or an increasing [min, max] pair, got {value}"
        )
    return float(arr[0]), float(arr[1])


def xy_grid(
    X: ArrayLike, Y: ArrayLike, conf: WFSConfig | None = None
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Axes of the evaluation grid.

    Args:
        X: Length of the x axis (centered at 0) or [xmin, xmax] in meters
        Y: Length of the y axis (centered at 0) or [ymin, ymax] in meters
        conf: Configuration (uses resolution)

    Returns:
        Tuple of (x, y) axes with conf.resolution points each
    """
    conf = conf or WFSConfig()
    x = np.linspace(*axis_limits(X, "X"), conf.resolution)
    y = np.linspace(*axis_limits(Y, "Y"), conf.resolution)
    return x, y


def wave_field_imp(
    X: ArrayLike,
    Y: ArrayLike,
    x0: SecondarySources,
    d: ArrayLike,
    t: float,
    conf: WFSConfig | None = None,
) -> FieldSnapshot:
    """Sound field of driven loudspeakers at time t.

    The driving signal of loudspeaker i is read at the fractional sample
    t - r/c*fs by cubic spline interpolation and is zero outside its length.
    Grid points that coincide with a loudspeaker are singular (non-finite).

    Args:
        X: Length of the x axis or [xmin, xmax] in meters
        Y: Length of the y axis or [ymin, ymax] in meters
        x0: Secondary sources
        d: (samples, N) driving signals, column i belongs to x0[i]
        t: Time instant in samples
        conf: Configuration (default: WFSConfig())

    Returns:
        FieldSnapshot(x, y, p); p is normalized to max |p| = 1 if
        conf.usenormalisation is set and the field is not zero

    Raises:
        InvalidArgumentError: If d does not have one column per loudspeaker
    """
    conf = conf or WFSConfig()
    d = np.asarray(d, dtype=np.float64)
    if d.ndim != 2 or d.shape[1] != len(x0):
        raise InvalidArgumentError(
            f"Driving signals of shape {d.shape} do not match {len(x0)} "
            f"secondary sources"
        )
    if not np.isscalar(t) or not np.isfinite(t):
        raise InvalidArgumentError(f"t must be a finite scalar, got {t}")

    x, y = xy_grid(X, Y, conf)
    xx, yy = np.meshgrid(x, y)
    samples = np.arange(d.shape[0])
    p = np.zeros_like(xx)

    with np.errstate(divide="ignore", invalid="ignore"):
        for position, signal in zip(x0.positions, d.T):
            if not np.any(signal):
                continue
            r = np.sqrt((xx - position[0]) ** 2 + (yy - position[1]) ** 2 + position[2] ** 2)
            index = t - r / conf.c * conf.fs
            inside = (index >= 0) & (index <= samples[-1])
            if not np.any(inside):
                continue
            if len(samples) >= 4:
                spline = make_interp_spline(samples, signal, k=3)
                ds = spline(index[inside])
            else:
                ds = np.interp(index[inside], samples, signal)
            p[inside] += ds / (4 * np.pi * r[inside])

    if conf.usenormalisation:
        peak = np.max(np.abs(p[np.isfinite(p)]), initial=0.0)
        if peak > 0:
            p = p / peak
    return FieldSnapshot(x=x, y=y, p=p)
