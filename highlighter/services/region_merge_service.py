from __future__ import annotations

from typing import Dict, Iterable, List
import os
import logging

from dotenv import load_dotenv

from ..models.region import Color, Region

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_MERGE_GAP = 10


class RegionMergeService:
    """
    Shrinks a region list before blending.

    Same-color regions sitting on the same row band (equal y and h) are
    fused when the horizontal gap between them is at most ``gap`` pixels.
    No vertical merging, no validation: malformed regions pass through.
    """

    def __init__(self, gap: int = None):
        self.gap = gap if gap is not None else int(os.getenv("HIGHLIGHT_MERGE_GAP", str(DEFAULT_MERGE_GAP)))

    # ─── Public API ────────────────────────────────────────────────
    def optimize(self, regions: Iterable[Region]) -> List[Region]:
        """
        Args:
            regions: Regions in any order, possibly duplicated.

        Returns:
            List[Region]: merged regions, grouped by color in order of each
            color's first appearance in *regions*, each group sorted by (y, x).
        """
        regions = list(regions)
        optimized: List[Region] = []
        for group in self._group_by_color(regions).values():
            optimized.extend(self._merge_horizontal(group))

        logger.debug(f"Merged {len(regions)} regions into {len(optimized)}")
        return optimized

    def can_merge(self, prev: Region, region: Region) -> bool:
        same_band = prev.y == region.y and prev.h == region.h
        near = region.x <= prev.x + prev.w + self.gap
        return same_band and near

    # ─── Internal helpers ──────────────────────────────────────────
    @staticmethod
    def _group_by_color(regions: List[Region]) -> Dict[Color, List[Region]]:
        # dicts keep insertion order, so groups come out in first-appearance order
        groups: Dict[Color, List[Region]] = {}
        for region in regions:
            groups.setdefault(tuple(region.color), []).append(region)
        return groups

    def _merge_horizontal(self, group: List[Region]) -> List[Region]:
        merged: List[Region] = []
        for region in sorted(group, key=lambda r: (r.y, r.x)):
            if merged and self.can_merge(merged[-1], region):
                prev = merged[-1]
                merged[-1] = prev.widened_to(max(prev.right, region.right))
            else:
                merged.append(region)
        return merged
