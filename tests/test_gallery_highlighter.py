"""
Tests for the gallery pipeline
"""
import numpy as np
import pytest

from highlighter.models.image import Image
from highlighter.pipeline.gallery_highlighter import highlight_gallery, save_gallery
from highlighter.repositories.image_repository import ImageRepository

REGIONS = [{"x": 0, "y": 0, "w": 4, "h": 4, "color": [255, 0, 0]}]


def _gallery(tmp_path, n=3):
    return [
        Image(pixels=np.full((10, 10, 3), 255, dtype=np.uint8), path=tmp_path / f"img_{i}.png")
        for i in range(n)
    ]


class TestHighlightGallery:

    def test_highlights_every_image(self, service, tmp_path):
        gallery = _gallery(tmp_path)
        out = highlight_gallery(gallery, REGIONS, highlight_service=service, output_dir=None)
        assert len(out) == 3
        for img in out:
            assert img.pixels[1, 1].tolist() == [255, 153, 153]
            assert img.pixels[8, 8].tolist() == [255, 255, 255]
            assert (img.original_pixels == 255).all()

    def test_inputs_untouched(self, service, tmp_path):
        gallery = _gallery(tmp_path, n=1)
        highlight_gallery(gallery, REGIONS, highlight_service=service, output_dir=None)
        assert (gallery[0].pixels == 255).all()

    def test_alpha_override(self, service, tmp_path):
        out = highlight_gallery(_gallery(tmp_path, 1), REGIONS, highlight_service=service,
                                alpha=1.0, output_dir=None)
        assert out[0].pixels[0, 0].tolist() == [255, 0, 0]

    def test_output_dir_and_save(self, service, tmp_path):
        out_dir = tmp_path / "highlighted"
        out = highlight_gallery(_gallery(tmp_path, 2), REGIONS, highlight_service=service, output_dir=out_dir)
        assert [img.path for img in out] == [out_dir / "img_0_highlighted.png", out_dir / "img_1_highlighted.png"]

        save_gallery(out)
        loaded = ImageRepository.load(out_dir / "img_1_highlighted.png")
        assert np.array_equal(loaded.pixels, out[1].pixels)

    def test_accepts_a_generator(self, service, tmp_path):
        out = highlight_gallery((img for img in _gallery(tmp_path, 2)), REGIONS,
                                highlight_service=service, output_dir=None)
        assert len(out) == 2

    def test_save_rejects_image_without_path(self):
        pathless = Image(pixels=np.zeros((2, 2, 3), dtype=np.uint8))
        with pytest.raises(ValueError, match="no path"):
            save_gallery([pathless])
