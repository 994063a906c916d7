from __future__ import annotations
from dataclasses import dataclass
import numpy as np


@dataclass(frozen=True)
class Gradients:
    """
    Value-object holding the horizontal and vertical Sobel responses.
    Both arrays share the same (H-2, W-2) shape and a signed integer dtype.
    """
    x: np.ndarray
    y: np.ndarray

    @property
    def shape(self) -> tuple[int, int]:
        return self.x.shape
