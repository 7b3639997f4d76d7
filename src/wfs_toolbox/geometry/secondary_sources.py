"""Secondary source (loudspeaker) array geometry.

Classes:
    SecondarySources: Ordered loudspeaker positions and unit normals

Functions:
    secondary_source_positions: Build a linear, circular or box-shaped array

Example:
    >>> from wfs_toolbox import WFSConfig, secondary_source_positions
    >>> x0 = secondary_source_positions(1.5, WFSConfig())
    >>> len(x0)
    11
    >>> x0.directions[0]
    array([ 0., -1.,  0.])
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from wfs_toolbox.config import WFSConfig
from wfs_toolbox.errors import InvalidArgumentError


def _as_rows(value: ArrayLike, name: str) -> NDArray[np.float64]:
    """Convert to an (N, 3) float array, padding 2D coordinates with z = 0."""
    arr = np.array(value, dtype=np.float64, ndmin=2)
    if arr.ndim != 2 or arr.shape[1] not in (2, 3):
        raise InvalidArgumentError(
            f"{name} must have shape (N, 3) or (N, 2), got {np.shape(value)}"
        )
    if arr.shape[1] == 2:
        arr = np.column_stack([arr, np.zeros(len(arr))])
    if not np.all(np.isfinite(arr)):
        raise InvalidArgumentError(f"{name} must be finite")
    return arr


@dataclass(frozen=True, eq=False)
class SecondarySources:
    """Ordered set of secondary sources.

    Index i of the positions/directions corresponds to column i of every
    delay, weight and driving-signal array computed for this array.

    Args:
        positions: (N, 3) loudspeaker positions in meters
        directions: (N, 3) loudspeaker normals; normalized on construction

    Raises:
        InvalidArgumentError: On shape mismatch or a zero-length normal
    """

    positions: NDArray[np.float64]
    directions: NDArray[np.float64]

    def __post_init__(self) -> None:
        positions = _as_rows(self.positions, "positions")
        directions = _as_rows(self.directions, "directions")
        if positions.shape != directions.shape:
            raise InvalidArgumentError(
                f"positions {positions.shape} and directions "
                f"{directions.shape} must have the same shape"
            )
        norms = np.linalg.norm(directions, axis=1)
        if np.any(norms == 0):
            idx = int(np.flatnonzero(norms == 0)[0])
            raise InvalidArgumentError(
                f"Secondary source {idx} has a zero-length direction vector"
            )
        directions = directions / norms[:, np.newaxis]

        positions.setflags(write=False)
        directions.setflags(write=False)
        object.__setattr__(self, "positions", positions)
        object.__setattr__(self, "directions", directions)

    @classmethod
    def from_array(cls, x0: ArrayLike) -> SecondarySources:
        """Create from the toolbox's (N, 6) [x y z nx ny nz] layout."""
        arr = np.array(x0, dtype=np.float64, ndmin=2)
        if arr.ndim != 2 or arr.shape[1] != 6:
            raise InvalidArgumentError(
                f"Secondary source array must have shape (N, 6), got {np.shape(x0)}"
            )
        return cls(positions=arr[:, :3], directions=arr[:, 3:])

    def as_array(self) -> NDArray[np.float64]:
        """Return the (N, 6) [x y z nx ny nz] layout."""
        return np.hstack([self.positions, self.directions])

    def __len__(self) -> int:
        return len(self.positions)

    def __getitem__(self, index: Any) -> SecondarySources:
        """Order-preserving subset (integer array, slice or boolean mask)."""
        if np.isscalar(index):
            index = [index]
        return SecondarySources(
            positions=self.positions[index], directions=self.directions[index]
        )

    def __repr__(self) -> str:
        return f"SecondarySources(n={len(self)})"


def _linear(length: float, dx0: float) -> tuple[NDArray, NDArray]:
    # round() guards against floor(1.4 / 0.2) == 6
    n = int(np.floor(np.round(length / dx0, 9))) + 1
    positions = np.zeros((n, 3))
    if n > 1:
        positions[:, 0] = np.linspace(-length / 2, length / 2, n)
    # else a single loudspeaker sits at the centre
    directions = np.tile([0.0, -1.0, 0.0], (n, 1))
    return positions, directions


def _circle(diameter: float, dx0: float) -> tuple[NDArray, NDArray]:
    n = max(3, int(round(np.pi * diameter / dx0)))
    phi = np.linspace(0, 2 * np.pi, n, endpoint=False)
    unit = np.column_stack([np.cos(phi), np.sin(phi), np.zeros(n)])
    return diameter / 2 * unit, -unit


def _box(edge: float, dx0: float) -> tuple[NDArray, NDArray]:
    n = max(1, int(round(edge / dx0)))
    spacing = edge / n
    # Sources sit half a spacing away from each corner
    offsets = -edge / 2 + spacing * (np.arange(n) + 0.5)
    half = np.full(n, edge / 2)
    zeros = np.zeros(n)

    sides = [
        # (x, y, normal), counter-clockwise starting at the bottom side
        (offsets, -half, (0.0, 1.0, 0.0)),
        (half, offsets, (-1.0, 0.0, 0.0)),
        (-offsets, half, (0.0, -1.0, 0.0)),
        (-half, -offsets, (1.0, 0.0, 0.0)),
    ]
    positions = np.vstack([np.column_stack([x, y, zeros]) for x, y, _ in sides])
    directions = np.vstack([np.tile(normal, (n, 1)) for _, _, normal in sides])
    return positions, directions


_BUILDERS = {
    "linear": _linear,
    "circle": _circle,
    "box": _box,
}


def secondary_source_positions(
    length: float, conf: WFSConfig | None = None
) -> SecondarySources:
    """Generate the loudspeaker positions and normals of an array.

    Geometries (conf.secondary_sources.geometry):
    - 'linear': sources on the x axis from -L/2 to L/2, normals (0, -1, 0)
    - 'circle': circle of diameter L, normals pointing to the center
    - 'box': square of edge L, normals pointing inward

    Args:
        length: Array length, diameter or edge length in meters
        conf: Configuration (default: WFSConfig())

    Returns:
        SecondarySources shifted to conf.secondary_sources.center

    Raises:
        InvalidArgumentError: If length is not a positive finite number
    """
    conf = conf or WFSConfig()
    if not np.isscalar(length) or not np.isfinite(length) or length <= 0:
        raise InvalidArgumentError(f"Array length must be positive, got {length}")

    array_conf = conf.secondary_sources
    positions, directions = _BUILDERS[array_conf.geometry](
        float(length), array_conf.dx0
    )
    positions = positions + np.asarray(array_conf.center)
    return SecondarySources(positions=positions, directions=directions)
