from pathlib import Path

import numpy as np
import pytest
from PIL import Image as PILImage

from edge_filter.models.image import Image


def rgb_image(pixels) -> Image:
    return Image(pixels=np.asarray(pixels, dtype=np.uint8))


def write_png(path: Path, pixels) -> Path:
    PILImage.fromarray(np.asarray(pixels, dtype=np.uint8)).save(path)
    return path


@pytest.fixture
def uniform_pixels():
    """5x5, every pixel RGB (50, 50, 50)."""
    return np.full((5, 5, 3), 50, dtype=np.uint8)


@pytest.fixture
def vertical_edge_pixels():
    """5x5, two black columns on the left, three white columns on the right."""
    pixels = np.zeros((5, 5, 3), dtype=np.uint8)
    pixels[:, 2:, :] = 255
    return pixels


@pytest.fixture
def random_pixels():
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(17, 23, 3), dtype=np.uint8)
