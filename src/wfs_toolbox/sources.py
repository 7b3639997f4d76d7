"""Virtual source models for 2.5D WFS.

The virtual source is a closed set of variants. Each variant carries its
geometric payload and knows its own delay/weight law and which loudspeakers
are active for it.

Classes:
    SourceType: Tag of a virtual source ('pw', 'ps', 'fs')
    PlaneWave: Plane wave travelling along a direction
    PointSource: Point source behind the array
    FocusedSource: Source focused in front of the array

Functions:
    virtual_source: Build a variant from a position and a tag string

Example:
    >>> from wfs_toolbox.sources import virtual_source
    >>> virtual_source((0, 2.5, 0), "ps")
    PointSource(position=(0.0, 2.5, 0.0))
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray

from wfs_toolbox.config import as_point
from wfs_toolbox.errors import (
    InvalidArgumentError,
    InvalidSourceTypeError,
    NumericDegeneracyError,
)

# Distance (m) below which a virtual source counts as coincident with a loudspeaker
COINCIDENCE_TOLERANCE = 1e-12


class SourceType(str, Enum):
    """Virtual source tags as used on the command line and in the toolbox API."""

    PLANE_WAVE = "pw"
    POINT_SOURCE = "ps"
    FOCUSED_SOURCE = "fs"


@dataclass(frozen=True)
class PlaneWave:
    """Plane wave virtual source.

    Args:
        direction: Propagation direction; normalized on construction
    """

    direction: tuple[float, float, float]

    kind: ClassVar[SourceType] = SourceType.PLANE_WAVE

    def __post_init__(self) -> None:
        direction = np.asarray(as_point(self.direction, "direction"))
        norm = np.linalg.norm(direction)
        if norm == 0:
            raise InvalidArgumentError("Plane wave direction must not be zero")
        object.__setattr__(self, "direction", tuple(float(v) for v in direction / norm))

    def driving_parameters(
        self,
        positions: NDArray[np.float64],
        directions: NDArray[np.float64],
        g0: NDArray[np.float64],
        c: float,
    ) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Return (delays, weights); <n_pw, n0> is the cosine between both."""
        npw = np.asarray(self.direction)
        delays = positions @ npw / c
        weights = 2 * g0 * (directions @ npw)
        return delays, weights

    def active(
        self, positions: NDArray[np.float64], directions: NDArray[np.float64]
    ) -> NDArray[np.bool_]:
        return directions @ np.asarray(self.direction) > 0


def _point_geometry(
    xs: tuple[float, float, float], positions: NDArray[np.float64]
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Return (x0 - xs, |x0 - xs|), refusing coincident positions."""
    diff = positions - np.asarray(xs)
    r = np.linalg.norm(diff, axis=1)
    coincident = np.flatnonzero(r <= COINCIDENCE_TOLERANCE)
    if coincident.size:
        idx = int(coincident[0])
        raise NumericDegeneracyError(
            f"Virtual source at {xs} coincides with secondary source {idx}; "
            f"the driving function is singular for r = 0",
            index=idx,
        )
    return diff, r


def _point_weights(
    diff: NDArray[np.float64],
    r: NDArray[np.float64],
    directions: NDArray[np.float64],
    g0: NDArray[np.float64],
) -> NDArray[np.float64]:
    projection = np.einsum("ij,ij->i", diff, directions)
    return g0 / (2 * np.pi) * projection * r ** (-1.5)


@dataclass(frozen=True)
class PointSource:
    """Point source virtual source.

    Args:
        position: Source position in meters
    """

    position: tuple[float, float, float]

    kind: ClassVar[SourceType] = SourceType.POINT_SOURCE

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", as_point(self.position, "position"))

    def driving_parameters(
        self,
        positions: NDArray[np.float64],
        directions: NDArray[np.float64],
        g0: NDArray[np.float64],
        c: float,
    ) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        diff, r = _point_geometry(self.position, positions)
        return r / c, _point_weights(diff, r, directions, g0)

    def active(
        self, positions: NDArray[np.float64], directions: NDArray[np.float64]
    ) -> NDArray[np.bool_]:
        diff = positions - np.asarray(self.position)
        return np.einsum("ij,ij->i", diff, directions) > 0


@dataclass(frozen=True)
class FocusedSource:
    """Focused virtual source in front of the array.

    Shares the weight law of PointSource; the delay is negated since the
    loudspeakers fire so that the wavefronts converge at the focus.

    Args:
        position: Focus position in meters
    """

    position: tuple[float, float, float]

    kind: ClassVar[SourceType] = SourceType.FOCUSED_SOURCE

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", as_point(self.position, "position"))

    def driving_parameters(
        self,
        positions: NDArray[np.float64],
        directions: NDArray[np.float64],
        g0: NDArray[np.float64],
        c: float,
    ) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        diff, r = _point_geometry(self.position, positions)
        return -r / c, _point_weights(diff, r, directions, g0)

    def active(
        self, positions: NDArray[np.float64], directions: NDArray[np.float64]
    ) -> NDArray[np.bool_]:
        diff = np.asarray(self.position) - positions
        return np.einsum("ij,ij->i", diff, directions) > 0


VirtualSource = Union[PlaneWave, PointSource, FocusedSource]

_VARIANTS: dict[SourceType, type] = {
    SourceType.PLANE_WAVE: PlaneWave,
    SourceType.POINT_SOURCE: PointSource,
    SourceType.FOCUSED_SOURCE: FocusedSource,
}


def is_virtual_source(obj: Any) -> bool:
    """True if obj is one of the virtual source variants."""
    return isinstance(obj, (PlaneWave, PointSource, FocusedSource))


def virtual_source(xs: ArrayLike | None, src: Any) -> VirtualSource:
    """Build a virtual source from a position/direction and a source tag.

    Args:
        xs: Source position, or the propagation direction for plane waves.
            Ignored when src already is a virtual source.
        src: 'pw', 'ps', 'fs', a SourceType, or a virtual source instance

    Returns:
        The matching PlaneWave, PointSource or FocusedSource

    Raises:
        InvalidSourceTypeError: If src is not a known source type
        InvalidArgumentError: If xs is not a valid coordinate
    """
    if is_virtual_source(src):
        return src
    try:
        kind = SourceType(src)
    except ValueError:
        raise InvalidSourceTypeError(src) from None
    if xs is None:
        raise InvalidArgumentError(f"Source type {kind.value!r} needs a position")
    return _VARIANTS[kind](xs)
