from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Union
import os
import logging

import numpy as np
import torch
from dotenv import load_dotenv
from PIL import Image as PILImage

from ..exceptions import DecodeError, HighlighterError, InternalComputeError, ShapeError
from ..models.execution_context import ExecutionContext
from ..models.highlight_options import HighlightOptions
from ..models.image import Image
from ..models.region import Region
from ..repositories.image_repository import ImageRepository
from .blend_service import BlendService
from .region_merge_service import RegionMergeService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

RegionLike = Union[Region, Mapping[str, Any]]
OptionsLike = Union[HighlightOptions, Mapping[str, Any], None]
ImageSource = Union[bytes, bytearray, PILImage.Image, Image, np.ndarray, torch.Tensor]


class HighlightService:
    """
    Entry point: merge regions, blend them, and hand the result back in the
    same representation the caller gave us.

    Every failure leaves as a HighlighterError subclass; anything unexpected
    from lower layers is wrapped into InternalComputeError.
    """

    def __init__(
            self,
            merge_service: RegionMergeService = None,
            blend_service: BlendService = None,
            context: ExecutionContext = None,
            output_ext: str = None,
    ):
        self.merge_service = merge_service or RegionMergeService()
        self.blend_service = blend_service or BlendService(context=context)
        self.image_repository = ImageRepository()
        self.output_ext = output_ext or os.getenv("HIGHLIGHT_OUTPUT_FORMAT", ".png")

        logger.info(
            f"HighlightService initialized (merge gap={self.merge_service.gap}, "
            f"device={self.blend_service.context.device}, output={self.output_ext})"
        )

    # ─── Public API ────────────────────────────────────────────────
    def highlight_pixels(
            self,
            pixels: np.ndarray,
            regions: Iterable[RegionLike],
            options: OptionsLike = None,
    ) -> np.ndarray:
        """
        Highlight a raw (H, W, 3) uint8 RGB buffer. No codec round-trips.
        """
        try:
            opts = HighlightOptions.coerce(options)
            parsed = self.parse_regions(regions)
            optimized = self.merge_service.optimize(parsed)
            return self.blend_service.blend(pixels, optimized, opts.alpha)
        except HighlighterError:
            raise
        except Exception as err:
            raise InternalComputeError(f"Highlighting failed: {err}") from err

    def highlight(
            self,
            source: ImageSource,
            regions: Iterable[RegionLike],
            options: OptionsLike = None,
    ):
        """
        Highlight *source* and return the result in the same family:

        * bytes / bytearray (PNG, JPEG, ...) → encoded bytes (``output_ext``)
        * PIL.Image.Image                      → PIL.Image.Image
        * models.image.Image                   → new Image, path stem + "_highlighted"
        * np.ndarray                           → np.ndarray
        * torch.Tensor                         → torch.Tensor on the same device
        """
        try:
            pixels = self._to_pixels(source)
            result = self.highlight_pixels(pixels, regions, options)
            return self._from_pixels(result, source)
        except HighlighterError:
            raise
        except Exception as err:
            raise InternalComputeError(f"Highlighting failed: {err}") from err

    @staticmethod
    def parse_regions(regions: Iterable[RegionLike]) -> List[Region]:
        """Coerce and validate region records, reporting the offending index."""
        if regions is None:
            raise ShapeError("Region list is required (use [] for none)")
        if isinstance(regions, Mapping):
            raise ShapeError("Expected a list of region records, got a single mapping")

        parsed = []
        for i, record in enumerate(regions):
            region = Region.from_mapping(record, index=i)
            region.validate(index=i)
            parsed.append(region)
        return parsed

    # ─── Internal helpers ──────────────────────────────────────────
    def _to_pixels(self, source: ImageSource) -> np.ndarray:
        if isinstance(source, (bytes, bytearray, memoryview)):
            return self.image_repository.decode(source)
        if isinstance(source, PILImage.Image):
            return self.image_repository.from_pil(source)
        if isinstance(source, Image):
            return source.pixels
        if isinstance(source, torch.Tensor):
            return self.image_repository.from_tensor(source)
        if isinstance(source, np.ndarray):
            return source
        raise DecodeError(f"Unsupported image source: {type(source).__name__}")

    def _from_pixels(self, pixels: np.ndarray, source: ImageSource):
        if isinstance(source, (bytes, bytearray, memoryview)):
            return self.image_repository.encode(pixels, self.output_ext)
        if isinstance(source, PILImage.Image):
            return self.image_repository.to_pil(pixels)
        if isinstance(source, Image):
            highlighted = self.image_repository.create_image(pixels, source.derived_path("_highlighted"))
            highlighted.original_pixels = source.unmodified_pixels
            return highlighted
        if isinstance(source, torch.Tensor):
            return self.image_repository.to_tensor(pixels, like=source)
        return pixels
