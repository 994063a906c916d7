from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import numpy as np


@dataclass
class Image:
    """
    Simple data object: pixels (+ optional path for bookkeeping).
    No OpenCV logic outside the repository layer.

    Source images hold RGB pixels, shape (H, W, 3).
    Edge maps hold single-channel pixels, shape (H, W).
    """
    pixels: np.ndarray # dtype uint8
    path: Path | None = None # Source of the image, or destination of an edge map.

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])
