from __future__ import annotations
from dataclasses import dataclass

from .errors import WarpError
from .raster_buffer import RasterBuffer


@dataclass
class MappingResult:
    """
    Outcome of a warp call for callers that prefer a value over an exception.
    """
    destination: RasterBuffer
    error: WarpError | None = None
    inside_pixels: int = 0  # Destination pixels covered by the triangle.

    @property
    def ok(self) -> bool:
        return self.error is None
