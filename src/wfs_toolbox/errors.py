"""Exception hierarchy for WFS computations.

All errors derive from WFSError so callers can catch everything raised by the
toolbox at once. The subclasses also derive from the matching builtin
(ValueError, ArithmeticError) so generic handlers keep working.
"""

from __future__ import annotations

from typing import Any


class WFSError(Exception):
    """Base class for all toolbox errors."""

    pass


class InvalidArgumentError(WFSError, ValueError):
    """Raised for malformed geometry, non-positive scalars or wrong array rank."""

    pass


class InvalidSourceTypeError(InvalidArgumentError):
    """Raised when a virtual source tag is not one of 'pw', 'ps', 'fs'."""

    def __init__(self, source_type: Any):
        self.source_type = source_type
        super().__init__(
            f"{source_type!r} is not a known source type. "
            f"Valid options: 'pw' (plane wave), 'ps' (point source), "
            f"'fs' (focused source)"
        )


class NumericDegeneracyError(WFSError, ArithmeticError):
    """Raised when a virtual source coincides with a secondary source."""

    def __init__(self, message: str, index: int | None = None):
        self.index = index
        super().__init__(message)
