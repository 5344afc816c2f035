"""
Shared fixtures for the highlighter tests.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Adds the project root to the path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from highlighter.models.execution_context import ExecutionContext
from highlighter.repositories.image_repository import ImageRepository
from highlighter.services.blend_service import BlendService
from highlighter.services.highlight_service import HighlightService
from highlighter.services.region_merge_service import RegionMergeService

@pytest.fixture(autouse=True)
def _cpu_only(monkeypatch):
    """Keep every test on the CPU with the default tuning, whatever .env says."""
    monkeypatch.setenv("HIGHLIGHT_DEVICE", "cpu")
    monkeypatch.setenv("HIGHLIGHT_ALPHA", "0.4")
    monkeypatch.setenv("HIGHLIGHT_MERGE_GAP", "10")
    monkeypatch.setenv("HIGHLIGHT_OUTPUT_FORMAT", ".png")


@pytest.fixture
def white_pixels():
    """100×100 white RGB buffer."""
    return np.full((100, 100, 3), 255, dtype=np.uint8)


@pytest.fixture
def png_bytes(white_pixels):
    return ImageRepository.encode(white_pixels, ".png")


@pytest.fixture
def cpu_context():
    return ExecutionContext(device="cpu")


@pytest.fixture
def merger():
    return RegionMergeService(gap=10)


@pytest.fixture
def blender(cpu_context):
    return BlendService(context=cpu_context)


@pytest.fixture
def service(merger, blender):
    return HighlightService(merge_service=merger, blend_service=blender)

