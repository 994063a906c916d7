"""
Command-line entry point: Sobel edge filter for a single image or a folder.

    edge-filter photo.png edges.png
    edge-filter photos/ --output-dir edges/ --workers 4
"""
import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from ..models.errors import EdgeFilterError
from ..pipeline.batch_filter import filter_gallery, OUTPUT_DIR, WORKERS
from ..pipeline.sobel_filter import filter_image
from ..services.image_service import ImageService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="edge-filter",
        description="Detect edges with a Sobel filter and save a black/grey/white image.")
    ap.add_argument("input",
                    help="image file, or a folder of images for batch mode")
    ap.add_argument("output", nargs="?", default=None,
                    help="output image file (single-image mode); format follows the extension")
    ap.add_argument("--output-dir", default=OUTPUT_DIR,
                    help="where batch results, or derived single outputs, are written")
    ap.add_argument("--ext", default=None,
                    help="extension for derived output names, e.g. .png")
    ap.add_argument("--input-ext", action="append", default=None, metavar="EXT",
                    help="only pick up input files with this extension in batch mode (repeatable)")
    ap.add_argument("--recursive", action="store_true",
                    help="descend into sub-folders in batch mode")
    ap.add_argument("--workers", type=int, default=WORKERS,
                    help="worker threads in batch mode")
    ap.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "INFO"),
                    choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return ap


def _normalise_exts(values):
    if not values:
        return None
    exts = set()
    for value in values:
        for ext in value.split(","):
            ext = ext.strip().lower()
            if ext:
                exts.add(ext if ext.startswith(".") else f".{ext}")
    return exts or None


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

    source = Path(args.input)
    if source.is_dir():
        if args.output is not None:
            logger.error("OUTPUT is only accepted for a single image; use --output-dir")
            return 2
        results = filter_gallery(source, args.output_dir,
                                 recursive=args.recursive,
                                 exts=_normalise_exts(args.input_ext),
                                 ext=args.ext,
                                 workers=args.workers)
        return 0 if all(r.ok for r in results) else 1

    # Used only when OUTPUT is omitted
    image_service = ImageService()
    image_service.OUTPUT_DIR = Path(args.output_dir)
    if args.ext:
        image_service.OUTPUT_EXT = args.ext

    try:
        filter_image(source, args.output, image_service=image_service)
    except EdgeFilterError as err:
        logger.error(str(err))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
