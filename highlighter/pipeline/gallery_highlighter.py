# pipeline/gallery_highlighter.py
from pathlib import Path
from typing import Iterable, List, Union
import os
import logging

from dotenv import load_dotenv
from tqdm import tqdm

from ..models.image import Image
from ..models.highlight_options import HighlightOptions
from ..repositories.image_repository import ImageRepository
from ..services.highlight_service import HighlightService, RegionLike

# ------------------------------------------------------------------
# env‑vars
load_dotenv()
OUTPUT_DIR = os.getenv("HIGHLIGHT_OUTPUT_DIR")

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
def highlight_gallery(
    gallery: Iterable[Image],
    regions: List[RegionLike],
    *,
    highlight_service: HighlightService = None,
    alpha: float = None,
    output_dir: Union[str, Path, None] = OUTPUT_DIR,
) -> List[Image]:
    """
    For every Image in *gallery*:
        • apply the same highlight regions
        • keep the pre-highlight pixels in ``original_pixels``
        • re-point the path into *output_dir* when one is given
    Returns new Image objects; the inputs are left untouched.
    """
    highlight_service = highlight_service or HighlightService()
    options = HighlightOptions(alpha=alpha) if alpha is not None else None
    # parse once; the same regions go onto every image
    parsed = highlight_service.parse_regions(regions)

    highlighted = []
    for img in tqdm(gallery, desc="highlight", ncols=70, disable=None):
        new_img = highlight_service.highlight(img, parsed, options)
        if output_dir is not None and new_img.path is not None:
            new_img.path = Path(output_dir) / new_img.path.name
        highlighted.append(new_img)

    logger.info(f"Highlighted {len(highlighted)} images")
    return highlighted


def save_gallery(gallery: Iterable[Image], image_repository: ImageRepository = None) -> None:
    """Write every Image to its path, creating parent folders as needed."""
    image_repository = image_repository or ImageRepository()
    for img in gallery:
        if img.path is None:
            raise ValueError("Image has no path to save to")
        Path(img.path).parent.mkdir(parents=True, exist_ok=True)
        image_repository.save(img)
