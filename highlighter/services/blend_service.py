from __future__ import annotations

from typing import List, Sequence
import logging

import numpy as np
import torch

from ..exceptions import InternalComputeError, ShapeError
from ..models.execution_context import ExecutionContext
from ..models.highlight_options import HighlightOptions
from ..models.region import Region
from ..models.region_batch import RegionBatch

logger = logging.getLogger(__name__)


class BlendService:
    """
    Batched alpha-blend of solid-color rectangles onto an RGB buffer.

    *   Works on raw (H, W, 3) uint8 numpy arrays only; no codecs here.
    *   All regions share one (maxH, maxW) patch shape, so masks, patches and
        blends are computed as single stacked tensor ops.
    *   Patches are always read from the untouched base, never from the
        canvas, so overlapping highlights don't accumulate.
    *   Writes happen in list order and replace the whole (maxH, maxW)
        footprint, so a later region can restore base pixels over an
        earlier highlight outside its own rectangle.
    """

    def __init__(self, context: ExecutionContext = None):
        self.context = context or ExecutionContext.from_env()
        logger.info(f"BlendService initialized on device: {self.context.device}")

    # ─── Public API ────────────────────────────────────────────────
    def blend(
            self,
            pixels: np.ndarray,
            regions: Sequence[Region],
            alpha: float,
            context: ExecutionContext = None,
    ) -> np.ndarray:
        """
        Args:
            pixels: (H, W, 3) uint8 RGB buffer. Never modified.
            regions: already-optimized regions; their order decides overlaps.
            alpha: blending strength in [0, 1].
            context: overrides the service's execution context for this call.

        Returns:
            np.ndarray: a new (H, W, 3) uint8 buffer, or *pixels* itself when
            there is nothing to blend.
        """
        self._check_pixels(pixels)
        alpha = HighlightOptions(alpha=alpha).alpha
        if not regions:
            return pixels

        for i, region in enumerate(regions):
            region.validate(index=i)

        ctx = context or self.context
        try:
            out = self._blend_batch(pixels, list(regions), alpha, ctx)
        except RuntimeError as err:
            raise InternalComputeError(f"Blend failed on {ctx.device}: {err}") from err
        return out

    # ─── Internal helpers ──────────────────────────────────────────
    @staticmethod
    def _check_pixels(pixels: np.ndarray) -> None:
        if not isinstance(pixels, np.ndarray):
            raise ShapeError(f"Expected a numpy array, got {type(pixels).__name__}")
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise ShapeError(f"Expected an (H, W, 3) buffer, got shape {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise ShapeError(f"Expected uint8 pixels, got {pixels.dtype}")

    @staticmethod
    def _pad(base: torch.Tensor, max_h: int, max_w: int) -> torch.Tensor:
        """Zero rows below and zero columns to the right; top-left untouched."""
        height, width, channels = base.shape
        padded = torch.zeros(
            (height + max_h, width + max_w, channels), dtype=base.dtype, device=base.device
        )
        padded[:height, :width] = base
        return padded

    @staticmethod
    def _gather_patches(padded: torch.Tensor, batch: RegionBatch) -> torch.Tensor:
        """(N, maxH, maxW, 3) slices of *padded*, one per region start."""
        device = padded.device
        rows = batch.starts[:, 0:1] + torch.arange(batch.max_h, device=device)  # (N, maxH)
        cols = batch.starts[:, 1:2] + torch.arange(batch.max_w, device=device)  # (N, maxW)
        return padded[rows[:, :, None], cols[:, None, :]]

    @staticmethod
    def _blend_patches(
            patches: torch.Tensor,
            batch: RegionBatch,
            alpha: float,
            dtype: torch.dtype,
    ) -> torch.Tensor:
        """
        out = base + (color - base) * mask * alpha, for every region at once.

        The float -> uint8 cast truncates toward zero (no rounding).
        """
        base = patches.to(dtype)
        color = batch.colors.to(dtype)[:, None, None, :]   # (N, 1, 1, 3)
        mask = batch.masks.to(dtype)[..., None]            # (N, maxH, maxW, 1)
        blended = base + (color - base) * mask * alpha
        return blended.to(torch.uint8)

    def _blend_batch(
            self,
            pixels: np.ndarray,
            regions: List[Region],
            alpha: float,
            ctx: ExecutionContext,
    ) -> np.ndarray:
        device = ctx.torch_device
        height, width = pixels.shape[:2]

        batch = RegionBatch.from_regions(regions, device=device)
        # Starts past the bottom/right edge are pulled back onto the padding,
        # where their writes get cropped away.
        batch.starts = torch.minimum(
            batch.starts, torch.tensor([height, width], dtype=torch.int64, device=device)
        )
        logger.debug(
            f"Blending {len(batch)} regions with patch shape ({batch.max_h}, {batch.max_w})"
        )

        base = torch.from_numpy(np.ascontiguousarray(pixels)).to(device)
        original = self._pad(base, batch.max_h, batch.max_w)
        canvas = original.clone()

        blended = self._blend_patches(
            self._gather_patches(original, batch), batch, alpha, ctx.compute_dtype
        )

        # Serial writes in list order: each one replaces its whole (maxH, maxW)
        # footprint, unmasked cells included.
        for i, (y, x) in enumerate(batch.starts.tolist()):
            canvas[y:y + batch.max_h, x:x + batch.max_w] = blended[i]

        return canvas[:height, :width].contiguous().cpu().numpy()
