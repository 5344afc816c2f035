from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Mapping
import os

from dotenv import load_dotenv

from ..exceptions import InvalidOptionsError

# Load environment variables
load_dotenv()

DEFAULT_ALPHA = 0.4


@dataclass(frozen=True)
class HighlightOptions:
    """
    Per-call options. ``alpha`` is the blending strength applied uniformly
    to every region; 0.0 leaves the image untouched, 1.0 paints solid color.
    """
    alpha: float = DEFAULT_ALPHA

    def __post_init__(self):
        try:
            alpha = float(self.alpha)
        except (TypeError, ValueError) as err:
            raise InvalidOptionsError(f"alpha must be a number, got {self.alpha!r}") from err
        if not 0.0 <= alpha <= 1.0:
            raise InvalidOptionsError(f"alpha must be within [0, 1], got {alpha}")
        object.__setattr__(self, "alpha", alpha)

    @classmethod
    def from_env(cls) -> HighlightOptions:
        return cls(alpha=os.getenv("HIGHLIGHT_ALPHA", DEFAULT_ALPHA))

    @classmethod
    def coerce(cls, options: HighlightOptions | Mapping[str, Any] | None) -> HighlightOptions:
        """Accept an options object, an ``{"alpha": ...}`` mapping, or None (env default)."""
        if options is None:
            return cls.from_env()
        if isinstance(options, cls):
            return options
        if isinstance(options, Mapping):
            unknown = set(options) - {"alpha"}
            if unknown:
                raise InvalidOptionsError(f"Unknown highlight options: {', '.join(sorted(unknown))}")
            if "alpha" not in options:
                return cls.from_env()
            return cls(alpha=options["alpha"])
        raise InvalidOptionsError(f"Unsupported options type: {type(options).__name__}")
