# pipeline/batch_filter.py
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterable, List
import logging
import os

from dotenv import load_dotenv
from tqdm import tqdm

from ..models.errors import EdgeFilterError, EncodeError
from ..models.filter_result import FilterResult
from ..services.edge_detection_service import EdgeDetectionService
from ..services.image_service import ImageService
from .sobel_filter import filter_image

# ------------------------------------------------------------------
# env‑vars
load_dotenv()
OUTPUT_DIR = os.getenv("EDGE_OUTPUT_DIR", "data/edges")
WORKERS    = int(os.getenv("EDGE_WORKERS", "1"))

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
def _filter_one(
    source: Path,
    destination: Path,
    edge_service: EdgeDetectionService,
    image_service: ImageService,
) -> FilterResult:
    try:
        written = filter_image(source, destination,
                               edge_service=edge_service,
                               image_service=image_service)
    except EdgeFilterError as err:
        logger.error(f"Failed to filter {source}: {err}")
        return FilterResult(source=source, error=err)
    return FilterResult(source=source, output=written)


def _plan_destinations(
    sources: List[Path],
    folder: Path,
    output_dir: Path,
    ext: str | None,
    image_service: ImageService,
) -> tuple[dict[Path, Path], dict[Path, FilterResult]]:
    """
    Map each source to '<output_dir>/<sub-folder>/<stem><suffix><ext>'.
    Sub-folders mirror the input tree; a source whose destination is
    already taken (same stem, different extension) is rejected.
    """
    planned: dict[Path, Path] = {}
    rejected: dict[Path, FilterResult] = {}
    claimed: dict[Path, Path] = {}
    for src in sources:
        destination = image_service.output_path_for(
            src, output_dir / src.relative_to(folder).parent, ext)
        if destination in claimed:
            err = EncodeError(destination, f"output already claimed by {claimed[destination]}")
            logger.error(f"Failed to filter {src}: {err}")
            rejected[src] = FilterResult(source=src, error=err)
            continue
        claimed[destination] = src
        destination.parent.mkdir(parents=True, exist_ok=True)
        planned[src] = destination
    return planned, rejected


def filter_gallery(
    folder: str | Path,
    output_dir: str | Path = OUTPUT_DIR,
    *,
    recursive: bool = False,
    exts: Iterable[str] | None = None,
    ext: str | None = None,
    workers: int = WORKERS,
    progress: bool = True,
    edge_service: EdgeDetectionService = EdgeDetectionService(),
    image_service: ImageService = ImageService(),
) -> List[FilterResult]:
    """
    Filter every image in *folder* into *output_dir*.

    *exts* restricts which input files are picked up; *ext* sets the
    extension of the written edge maps.
    Images are independent, so they are spread over *workers* threads.
    A failing image is recorded in its FilterResult and never stops the rest.
    Results come back in input order.
    """
    folder = Path(folder)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    sources = list(image_service.stream_paths(folder, recursive=recursive, exts=exts))
    logger.info(f"Filtering {len(sources)} images from {folder} into {output_dir} "
                f"with {workers} worker(s)")

    planned, results = _plan_destinations(sources, folder, output_dir, ext, image_service)
    with ThreadPoolExecutor(max_workers=max(1, workers)) as pool:
        futures = {
            pool.submit(_filter_one, src, dst, edge_service, image_service): src
            for src, dst in planned.items()
        }
        for future in tqdm(as_completed(futures), total=len(futures),
                           desc="Edge filtering", disable=not progress):
            results[futures[future]] = future.result()

    ordered = [results[src] for src in sources]
    failed = sum(1 for r in ordered if not r.ok)
    logger.info(f"Batch complete: {len(ordered) - failed} succeeded, {failed} failed")
    return ordered
