from pathlib import Path
from typing import Iterable, Union, Iterator
import os
from dotenv import load_dotenv
from ..models.image import Image
from ..repositories.image_repository import ImageRepository

# Load environment variables
load_dotenv()


class ImageService:
    """I/O helpers.  No edge-detection logic here."""
    def __init__(self):
        self.OUTPUT_DIR = Path(os.getenv("EDGE_OUTPUT_DIR", "data/edges"))
        self.OUTPUT_EXT = os.getenv("OUTPUT_IMG_EXT") or ".jpg"
        self.OUTPUT_SUFFIX = os.getenv("EDGE_OUTPUT_SUFFIX", "_edges")
        self.image_repository = ImageRepository()

    def load(self, path: str | Path) -> Image:
        """Load a single image from disk into an Image object."""
        return self.image_repository.load(path)

    def save(self, image: Image) -> Path:
        """
        Business-level method to save the image to its own path.
        """
        return self.image_repository.save(image)

    def stream_paths(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[Path]:
        """
        Yield image paths lazily; decoding is left to the caller.
        """
        return self.image_repository.iter_paths(folder,
                                                recursive=recursive,
                                                exts=exts)

    def output_path_for(
        self,
        source: str | Path,
        output_dir: str | Path | None = None,
        ext: str | None = None,
    ) -> Path:
        """
        Derive '<output_dir>/<stem><suffix><ext>' for an input path.
        """
        source = Path(source)
        ext = ext or self.OUTPUT_EXT
        if not ext.startswith("."):
            ext = f".{ext}"
        folder = Path(output_dir) if output_dir is not None else self.OUTPUT_DIR
        return folder / f"{source.stem}{self.OUTPUT_SUFFIX}{ext}"