# repositories/convolution_repository.py
import numpy as np
from ..models.errors import InvalidImageSize

# Sobel kernels, applied as-is (cross-correlation, no flipping)
SOBEL_X = np.array([[-1, 0, 1],
                    [-2, 0, 2],
                    [-1, 0, 1]], dtype=np.int64)

SOBEL_Y = np.array([[-1, -2, -1],
                    [ 0,  0,  0],
                    [ 1,  2,  1]], dtype=np.int64)


class ConvolutionRepository:
    """
    Integer "valid" convolution over 2-D buffers.

    • No padding: an output cell exists only where the whole kernel fits.
    • Output shape is (H - kh + 1, W - kw + 1).
    """

    # ---------- public API ----------
    @staticmethod
    def convolve_valid(buffer: np.ndarray, kernel: np.ndarray) -> np.ndarray:
        """
        Weighted sum of every kernel-sized window, anchored top-left.
        Accumulates in int64 so negative and large sums are kept exactly.
        """
        buffer = np.asarray(buffer, dtype=np.int64)
        kernel = np.asarray(kernel, dtype=np.int64)
        kh, kw = kernel.shape
        h, w = buffer.shape
        if h < kh or w < kw:
            raise InvalidImageSize(width=w, height=h)

        out_h, out_w = h - kh + 1, w - kw + 1
        out = np.zeros((out_h, out_w), dtype=np.int64)
        for ky in range(kh):
            for kx in range(kw):
                weight = kernel[ky, kx]
                if weight == 0:
                    continue
                out += weight * buffer[ky:ky + out_h, kx:kx + out_w]
        return out

    def sobel(self, intensity: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Both Sobel responses over the same windows: (gx, gy)."""
        return (self.convolve_valid(intensity, SOBEL_X),
                self.convolve_valid(intensity, SOBEL_Y))
