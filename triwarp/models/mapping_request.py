from __future__ import annotations
from dataclasses import dataclass

from .raster_buffer import RasterBuffer
from .triangle import Triangle


@dataclass
class MappingRequest:
    """
    One triangle-to-triangle resampling job.
    Each triangle lives in its own buffer's pixel space.
    """
    source: RasterBuffer
    source_triangle: Triangle
    destination: RasterBuffer  # Mutated in place by the mapper.
    destination_triangle: Triangle
