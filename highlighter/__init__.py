"""
Semi-transparent rectangle highlights for RGB images.

    >>> import numpy as np
    >>> from highlighter import highlight
    >>> pixels = np.full((100, 100, 3), 255, dtype=np.uint8)
    >>> out = highlight(pixels, [{"x": 10, "y": 10, "w": 10, "h": 10, "color": [255, 0, 0]}])
    >>> out.shape
    (100, 100, 3)

Same-color regions on one row band are merged before blending, and all
regions are blended in one batched torch pass.
"""
from __future__ import annotations
import threading

from .exceptions import (
    DecodeError,
    HighlighterError,
    InternalComputeError,
    InvalidOptionsError,
    ShapeError,
)
from .models.execution_context import ExecutionContext
from .models.highlight_options import HighlightOptions
from .models.image import Image
from .models.region import Region
from .services.blend_service import BlendService
from .services.highlight_service import HighlightService
from .services.region_merge_service import RegionMergeService

__version__ = "0.1.0"

_service: HighlightService | None = None
_lock = threading.RLock()


def _default_service() -> HighlightService:
    global _service
    with _lock:
        if _service is None:
            _service = HighlightService()
        return _service


def _options(alpha):
    return None if alpha is None else HighlightOptions(alpha=alpha)


def highlight(source, regions, alpha: float = None):
    """Highlight *source* (bytes, PIL image, Image, ndarray or tensor); same type back."""
    return _default_service().highlight(source, regions, _options(alpha))


def highlight_pixels(pixels, regions, alpha: float = None):
    """Highlight a raw (H, W, 3) uint8 RGB array."""
    return _default_service().highlight_pixels(pixels, regions, _options(alpha))


__all__ = [
    "BlendService",
    "DecodeError",
    "ExecutionContext",
    "HighlightOptions",
    "HighlightService",
    "HighlighterError",
    "Image",
    "InternalComputeError",
    "InvalidOptionsError",
    "Region",
    "RegionMergeService",
    "ShapeError",
    "highlight",
    "highlight_pixels",
]
