from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import numpy as np


@dataclass
class Image:
    """
    RGB pixels plus the bookkeeping the gallery pipeline needs.
    Codec logic stays in ImageRepository.
    """
    pixels: np.ndarray # (H, W, 3) uint8, RGB order.
    path: Path | None = None # Where it was loaded from / will be saved to.
    original_pixels: np.ndarray | None = None # Pixels before any highlighting

    def derived_path(self, stem_suffix: str) -> Path | None:
        """``photo.png`` → ``photo<stem_suffix>.png``; None when there's no path."""
        if self.path is None:
            return None
        path = Path(self.path)
        return path.with_name(f"{path.stem}{stem_suffix}{path.suffix}")

    @property
    def unmodified_pixels(self) -> np.ndarray:
        return self.original_pixels if self.original_pixels is not None else self.pixels
