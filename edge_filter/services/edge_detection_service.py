from __future__ import annotations

from pathlib import Path
import logging

import numpy as np

from ..models.errors import InvalidImageSize
from ..models.gradients import Gradients
from ..models.image import Image
from ..repositories.convolution_repository import ConvolutionRepository

logger = logging.getLogger(__name__)

# Output levels
BLACK = 0
GREY = 100
WHITE = 255

# Magnitude cut-offs: [0, 120) black, [120, 200) grey, [200, ∞) white
GREY_THRESHOLD = 120
WHITE_THRESHOLD = 200

MIN_SIZE = 3


class EdgeDetectionService:
    """
    The four pixel stages of the Sobel edge filter.
    *   Every method is a pure function of its inputs and returns a new array.
    *   No I/O here—works only with Image objects and numpy buffers.
    """

    def __init__(self, convolution_repository: ConvolutionRepository | None = None):
        self.convolution_repository = convolution_repository or ConvolutionRepository()

    @staticmethod
    def validate_size(width: int, height: int, path: str | Path | None = None) -> None:
        """
        Raises:
            InvalidImageSize: if either side is below 3 pixels.
        """
        if width < MIN_SIZE or height < MIN_SIZE:
            raise InvalidImageSize(width=width, height=height, path=path)

    @staticmethod
    def to_intensity(img: Image) -> np.ndarray:
        """
        Average the RGB channels of every pixel, truncating.

        Args:
            img (Image): RGB image, pixels shape (H, W, 3).

        Returns:
            (np.ndarray): integer intensity buffer, shape (H, W), values 0-255.
        """
        rgb = img.pixels[..., :3].astype(np.int32)
        return rgb.sum(axis=2) // 3

    def compute_gradients(self, intensity: np.ndarray) -> Gradients:
        """
        Apply both Sobel kernels over the same 3x3 windows (valid mode).

        Returns:
            Gradients with x / y arrays of shape (H-2, W-2), int64.
        """
        height, width = intensity.shape
        self.validate_size(width, height)
        gx, gy = self.convolution_repository.sobel(intensity)
        return Gradients(x=gx, y=gy)

    @staticmethod
    def combine_magnitude(gradients: Gradients) -> np.ndarray:
        """
        floor(sqrt(gx² + gy²)) per cell, computed in float64 and truncated.
        Not clamped: values above 255 are kept.
        """
        gx = gradients.x.astype(np.float64)
        gy = gradients.y.astype(np.float64)
        return np.floor(np.sqrt(gx * gx + gy * gy)).astype(np.int64)

    @staticmethod
    def quantize(magnitude: np.ndarray) -> np.ndarray:
        """
        Map every magnitude to black / grey / white (uint8).
        """
        return np.select(
            [magnitude < GREY_THRESHOLD, magnitude < WHITE_THRESHOLD],
            [BLACK, GREY],
            default=WHITE,
        ).astype(np.uint8)

    def plot(self, magnitude: np.ndarray, path: str | Path | None = None) -> Image:
        """
        Build the single-channel edge map for a magnitude buffer.
        Nothing is written to disk.
        """
        levels = self.quantize(magnitude)
        return Image(pixels=levels, path=Path(path) if path is not None else None)
