# pipeline/warp_image.py
from __future__ import annotations
from pathlib import Path
from typing import Tuple
import logging

from ..models.raster_buffer import RasterBuffer
from ..models.triangle import Triangle
from ..models.warp_options import WarpOptions
from ..services.preview_service import PreviewService
from ..services.raster_service import RasterService
from ..services.triangle_mapping_service import TriangleMappingService

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
def warp_image(
    source_path: str | Path,
    source_triangle: Triangle,
    destination_triangle: Triangle,
    output_path: str | Path,
    *,
    size: Tuple[int, int] | None = None,
    options: WarpOptions | None = None,
    preview_path: str | Path | None = None,
    raster_service: RasterService | None = None,
    mapping_service: TriangleMappingService | None = None,
) -> RasterBuffer:
    """
    File-to-file warp:
        • load the source (RGBA)
        • map source_triangle onto destination_triangle of a (width, height) canvas
          (defaults to the source size)
        • save the result, plus the source viewport preview if asked
    Returns the warped RasterBuffer.
    """
    raster_service = raster_service or RasterService()
    options = options or WarpOptions.from_env()
    mapping_service = mapping_service or TriangleMappingService(options)

    source = raster_service.load(source_path)
    width, height = size or (source.width, source.height)
    logger.info(f"Loaded {source_path} ({source.width}x{source.height}), output {width}x{height}")

    destination = raster_service.create_buffer(width, height, source.channels)
    mapping_service.map_triangle(source, source_triangle, destination, destination_triangle, options)

    saved = raster_service.save(destination, output_path)
    logger.info(f"Saved warped image to {saved}")

    if preview_path is not None:
        preview = PreviewService().render(source, source_triangle)
        saved_preview = raster_service.save(preview, preview_path)
        logger.info(f"Saved viewport preview to {saved_preview}")

    return destination
