"""Loudspeaker array geometry, selection and tapering."""

from wfs_toolbox.geometry.secondary_sources import (
    SecondarySources,
    secondary_source_positions,
)
from wfs_toolbox.geometry.selection import (
    secondary_source_selection,
    tapering_window,
)

__all__ = [
    "SecondarySources",
    "secondary_source_positions",
    "secondary_source_selection",
    "tapering_window",
]
