from __future__ import annotations
import logging
import uuid

from ..models.errors import SourceNotLoadedError
from ..models.raster_buffer import RasterBuffer
from ..models.triangle import Triangle
from ..models.warp_options import WarpOptions
from ..services.triangle_mapping_service import TriangleMappingService

logger = logging.getLogger(__name__)


class WarpSession:
    """
    Control state for an interactive warp.

    The caller (a UI, the HTTP server) owns the event loop; every time a
    destination corner moves it calls ``recompute`` with the new triangle
    and gets back a freshly rendered destination raster.
    """

    def __init__(
        self,
        source: RasterBuffer | None,
        source_triangle: Triangle,
        width: int | None = None,
        height: int | None = None,
        options: WarpOptions | None = None,
        mapping_service: TriangleMappingService | None = None,
        session_id: str | None = None,
    ):
        self.session_id = session_id or str(uuid.uuid4())
        self.source = source
        self.source_triangle = source_triangle
        self.width = width or (source.width if source is not None else None)
        self.height = height or (source.height if source is not None else None)
        self.options = options or WarpOptions.from_env()
        self.mapping_service = mapping_service or TriangleMappingService(self.options)
        self.destination_triangle: Triangle | None = None
        self.last_result: RasterBuffer | None = None

    def update_source(self, source: RasterBuffer) -> None:
        """Swap in new source pixels, e.g. after the source image was moved."""
        self.source = source
        if self.width is None or self.height is None:
            self.width, self.height = source.width, source.height

    def update_source_triangle(self, triangle: Triangle) -> None:
        self.source_triangle = triangle

    def recompute(self, destination_triangle: Triangle) -> RasterBuffer:
        """
        Run a full synchronous warp pass for *destination_triangle*.

        A failing pass raises and leaves ``last_result`` as it was.
        """
        if self.source is None:
            raise SourceNotLoadedError(f"Session {self.session_id} has no source raster yet")

        destination = RasterBuffer.blank(self.width, self.height, self.source.channels)
        self.mapping_service.map_triangle(
            self.source,
            self.source_triangle,
            destination,
            destination_triangle,
            self.options,
        )

        self.destination_triangle = destination_triangle
        self.last_result = destination
        logger.debug(f"Session {self.session_id} recomputed for {destination_triangle.as_array().tolist()}")
        return destination

    def clear(self):
        """Drop rasters from memory."""
        self.source = None
        self.last_result = None
        self.destination_triangle = None
