# models/region_batch.py
"""
Shape-uniform tensors for a list of regions.

Every region gets a (maxH, maxW) mask padded with zeros, so the blend
kernel can treat all regions as one (N, maxH, maxW) stack.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence

import torch

from .region import Region


@dataclass
class RegionBatch:
    starts: torch.Tensor   # (N, 2) int64, (y, x) per region
    masks: torch.Tensor    # (N, maxH, maxW) bool, True inside [0:h, 0:w]
    colors: torch.Tensor   # (N, 3) uint8
    max_h: int
    max_w: int

    def __len__(self) -> int:
        return self.starts.shape[0]

    @classmethod
    def from_regions(cls, regions: Sequence[Region], device: torch.device | str = "cpu") -> RegionBatch:
        if not regions:
            raise ValueError("Cannot build a batch from an empty region list")

        starts = torch.tensor([[r.y, r.x] for r in regions], dtype=torch.int64, device=device)
        sizes = torch.tensor([[r.h, r.w] for r in regions], dtype=torch.int64, device=device)
        colors = torch.tensor([list(r.color) for r in regions], dtype=torch.uint8, device=device)

        max_h = int(sizes[:, 0].max())
        max_w = int(sizes[:, 1].max())

        # All masks at once: row i < h_n and col j < w_n
        rows = torch.arange(max_h, device=device).view(1, max_h, 1)
        cols = torch.arange(max_w, device=device).view(1, 1, max_w)
        masks = (rows < sizes[:, 0].view(-1, 1, 1)) & (cols < sizes[:, 1].view(-1, 1, 1))

        return cls(starts=starts, masks=masks, colors=colors, max_h=max_h, max_w=max_w)
