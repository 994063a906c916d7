# pipeline/sobel_filter.py
from __future__ import annotations

from pathlib import Path
import logging

from ..models.image import Image
from ..services.edge_detection_service import EdgeDetectionService
from ..services.image_service import ImageService

logger = logging.getLogger(__name__)


def detect_edges(
    img: Image,
    *,
    edge_service: EdgeDetectionService = EdgeDetectionService(),
    output_path: str | Path | None = None,
) -> Image:
    """
    Run the four pixel stages on an RGB Image:
        • reduce to intensity
        • convolve with both Sobel kernels
        • combine into a gradient magnitude
        • quantize into black / grey / white
    Returns a new single-channel Image, two pixels smaller on each axis.
    """
    edge_service.validate_size(img.width, img.height, img.path)

    logger.info("Retrieving each pixel from the image...")
    logger.info(f"Image to process width: {img.width}")
    logger.info(f"Image to process height: {img.height}")
    intensity = edge_service.to_intensity(img)
    logger.info("All pixels retrieved")

    logger.info("Running filters horizontally and vertically...")
    gradients = edge_service.compute_gradients(intensity)
    magnitude = edge_service.combine_magnitude(gradients)
    logger.info("Filters have combined")

    logger.info("Plotting the new image...")
    edges = edge_service.plot(magnitude, output_path)
    logger.info(f"New image height: {edges.height}")
    logger.info(f"New image width: {edges.width}")
    return edges


def filter_image(
    input_path: str | Path,
    output_path: str | Path | None = None,
    *,
    edge_service: EdgeDetectionService = EdgeDetectionService(),
    image_service: ImageService = ImageService(),
) -> Path:
    """
    Load → detect edges → save.  Returns the path that was written.

    When *output_path* is None the name is derived from the input
    (see ImageService.output_path_for).

    Raises:
        DecodeError, InvalidImageSize, EncodeError
    """
    img = image_service.load(input_path)
    logger.info(f"Image has been loaded: {img.path}")

    if output_path is None:
        output_path = image_service.output_path_for(input_path)
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

    edges = detect_edges(img, edge_service=edge_service, output_path=output_path)
    saved = image_service.save(edges)
    logger.info(f"Image has been saved as {saved}")
    return saved
