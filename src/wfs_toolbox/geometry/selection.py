"""Active loudspeaker selection and tapering.

Functions:
    secondary_source_selection: Loudspeakers that contribute to a virtual source
    tapering_window: Edge tapering weights for the selected loudspeakers
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy import signal as sig

from wfs_toolbox.config import WFSConfig
from wfs_toolbox.errors import InvalidSourceTypeError
from wfs_toolbox.geometry.secondary_sources import SecondarySources
from wfs_toolbox.sources import VirtualSource, is_virtual_source

# Neighbours further apart than this many dx0 belong to different segments
_GAP_FACTOR = 1.5


def secondary_source_selection(
    x0: SecondarySources, source: VirtualSource
) -> SecondarySources:
    """Select the loudspeakers that are active for a virtual source.

    - Plane wave: <n_pw, n0> > 0
    - Point source: <x0 - xs, n0> > 0 (source behind the loudspeaker)
    - Focused source: <xs - x0, n0> > 0 (focus in front of the loudspeaker)

    Args:
        x0: Secondary sources
        source: Virtual source

    Returns:
        Order-preserving subset of x0 (possibly empty)
    """
    if not is_virtual_source(source):
        raise InvalidSourceTypeError(source)
    return x0[source.active(x0.positions, x0.directions)]


def _segments(x0: SecondarySources, dx0: float) -> list[NDArray[np.intp]] | None:
    """Split source indices into contiguous segments.

    Returns None for a closed array without any gap.
    """
    steps = np.linalg.norm(np.diff(x0.positions, axis=0), axis=1)
    gaps = np.flatnonzero(steps > _GAP_FACTOR * dx0) + 1
    closed = np.linalg.norm(x0.positions[0] - x0.positions[-1]) <= _GAP_FACTOR * dx0

    if closed and gaps.size == 0:
        return None
    segments = np.split(np.arange(len(x0)), gaps)
    if closed:
        # The last segment continues into the first one
        segments = [np.concatenate([segments[-1], segments[0]])] + segments[1:-1]
    return segments


def tapering_window(
    x0: SecondarySources, conf: WFSConfig | None = None
) -> NDArray[np.float64]:
    """Tapering window for the active loudspeakers.

    Reduces truncation artifacts at the ends of a finite array by fading the
    outer loudspeakers of each contiguous array segment with a Tukey window
    of taper fraction conf.tapwinlen. Closed arrays whose loudspeakers are
    all active are not tapered.

    Args:
        x0: Selected secondary sources
        conf: Configuration (default: WFSConfig())

    Returns:
        One weight per loudspeaker, in x0 order
    """
    conf = conf or WFSConfig()
    n = len(x0)
    win = np.ones(n)
    if not conf.usetapwin or n < 3:
        return win

    segments = _segments(x0, conf.secondary_sources.dx0)
    if segments is None:
        return win
    for segment in segments:
        # Drop the zero end points so the outermost loudspeakers still radiate
        taper = sig.windows.tukey(len(segment) + 2, alpha=conf.tapwinlen)
        win[segment] = taper[1:-1]
    return win
