from pathlib import Path
from typing import Union, Iterable, Iterator
import logging
import os
import numpy as np
import cv2
from PIL import Image as PILImage
from dotenv import load_dotenv
from ..models.image import Image
from ..models.errors import DecodeError, EncodeError

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

_JPEG_EXTS = {".jpg", ".jpeg"}


class ImageRepository:
    """
    Handles file I/O for Image entities.
    Decoding goes through OpenCV, encoding through Pillow.
    """
    def __init__(self):
        self.VALID_EXTS = {
            ext.strip().lower()
            for ext in os.getenv("VALID_IMAGE_EXTENSIONS", ".jpg,.jpeg,.png,.bmp,.tif,.tiff,.webp").split(",")
            if ext.strip()
        }
        self.JPEG_QUALITY = int(os.getenv("JPEG_QUALITY", "95"))

    @staticmethod
    def load(path: Union[str, Path]) -> Image:
        """
        Decode a file into an RGB Image, shape (H, W, 3) uint8.

        Raises:
            DecodeError: path missing, not a file, or not decodable.
        """
        path = Path(path)
        if not path.is_file():
            raise DecodeError(path, "no such file")

        arr_bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
        if arr_bgr is None:
            raise DecodeError(path, "unsupported format or corrupt data")

        arr = np.ascontiguousarray(arr_bgr[:, :, ::-1])
        return Image(pixels=arr, path=path)

    def save(self, image: Image) -> Path:
        """
        Encode an Image to `image.path`; the format follows the extension.

        Raises:
            EncodeError: no destination, unknown format, or unwritable path.
        """
        if image.path is None:
            raise EncodeError(None, "no destination path")

        path = Path(image.path)
        params = {}
        if path.suffix.lower() in _JPEG_EXTS:
            params["quality"] = self.JPEG_QUALITY

        try:
            PILImage.fromarray(image.pixels).save(path, **params)
        except (OSError, ValueError, KeyError) as err:
            raise EncodeError(path, str(err)) from err
        return path

    def iter_paths(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[Path]:
        """
        Yield image file paths in *folder*, sorted, filtered by extension.
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise NotADirectoryError(folder)

        allowed = {e.lower() for e in (exts or self.VALID_EXTS)}
        pattern = "**/*" if recursive else "*"

        for p in sorted(folder.glob(pattern)):
            if p.suffix.lower() not in allowed:
                logger.debug(f"Skipping due to extension: {p}")
                continue
            if not p.is_file():
                logger.debug(f"Skipping because not file: {p}")
                continue
            yield p
