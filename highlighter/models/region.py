from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Mapping, Tuple

from ..exceptions import ShapeError

Color = Tuple[int, int, int]

_FIELDS = ("x", "y", "w", "h", "color")


@dataclass(frozen=True)
class Region:
    """
    Value-object for one highlight request: a rectangle plus a solid RGB color.

    Immutable; merging produces new Region objects instead of editing these.
    """
    x: int
    y: int
    w: int
    h: int
    color: Color

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h

    def widened_to(self, right: int) -> Region:
        """Copy of this region stretched (or kept) so it ends at *right*."""
        return replace(self, w=right - self.x)

    @classmethod
    def from_mapping(cls, record: Region | Mapping[str, Any], index: int | None = None) -> Region:
        """
        Build a Region from a ``{x, y, w, h, color}`` record.

        Ranges are not checked here, only the record's shape.
        """
        if isinstance(record, Region):
            return record
        if not isinstance(record, Mapping):
            raise ShapeError(f"Region record must be a mapping, got {type(record).__name__}", index)

        missing = [k for k in _FIELDS if k not in record]
        if missing:
            raise ShapeError(f"Region record is missing {', '.join(missing)}", index)

        color = record["color"]
        try:
            color = tuple(int(c) for c in color)
            x, y, w, h = (int(record[k]) for k in ("x", "y", "w", "h"))
        except (TypeError, ValueError) as err:
            raise ShapeError(f"Region record has non-integer fields: {err}", index) from err
        if len(color) != 3:
            raise ShapeError(f"Region color must have 3 channels, got {len(color)}", index)

        return cls(x=x, y=y, w=w, h=h, color=color)

    def validate(self, index: int | None = None) -> None:
        """Reject rectangles and colors the blend kernel can't honour."""
        if self.w <= 0 or self.h <= 0:
            raise ShapeError(f"Region size must be positive, got {self.w}x{self.h}", index)
        if self.x < 0 or self.y < 0:
            raise ShapeError(f"Region origin must be non-negative, got ({self.x}, {self.y})", index)
        if any(not 0 <= c <= 255 for c in self.color):
            raise ShapeError(f"Region color channels must be in 0..255, got {self.color}", index)
