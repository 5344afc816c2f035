"""
Exceptions raised by the highlighter.

Every failure that leaves ``HighlightService`` is one of these, so callers
only need to catch ``HighlighterError``.
"""
from __future__ import annotations


class HighlighterError(Exception):
    """Base class for all highlighter failures."""
    pass


class DecodeError(HighlighterError):
    """Input image bytes are malformed, or the source type is unsupported."""
    pass


class ShapeError(HighlighterError, ValueError):
    """Region records or pixel buffers don't have the expected shape."""

    def __init__(self, message: str, index: int | None = None):
        super().__init__(message)
        self.index = index


class InvalidOptionsError(HighlighterError, ValueError):
    """A highlight option is out of range (e.g. alpha outside [0, 1])."""
    pass


class InternalComputeError(HighlighterError):
    """Catch-all for tensor backend or arithmetic failures."""
    pass
