from __future__ import annotations
import cv2
import numpy as np

from ..models.errors import DimensionMismatchError
from ..models.raster_buffer import RasterBuffer
from ..models.triangle import Triangle
from .barycentric_service import BarycentricService
from .raster_service import RasterService

OUTLINE_RGB = (255, 0, 0)
LABEL_FILL_RGB = (255, 255, 255)
DIM_OPACITY = 0.7
OUTLINE_THICKNESS = 2
CORNER_RADIUS = 10


class PreviewService:
    """
    Renders the source-side viewport: the area outside the triangle is
    washed toward white, the triangle gets a red outline and its corners
    are labelled A, B, C in the order the mapper pairs them.
    """

    def __init__(self, dim_opacity: float = DIM_OPACITY):
        self.dim_opacity = dim_opacity
        self.barycentric_service = BarycentricService()
        self.raster_service = RasterService()

    @staticmethod
    def _color(rgb, channels: int):
        # cv2 wants a plain tuple with one entry per channel
        return tuple(rgb) + (255,) * (channels - 3)

    def dim_outside(self, buffer: RasterBuffer, triangle: Triangle) -> np.ndarray:
        """Pixels with the colour of those outside *triangle* blended toward white; alpha is kept."""
        xs, ys = np.meshgrid(np.arange(buffer.width, dtype=np.float64),
                             np.arange(buffer.height, dtype=np.float64))
        _, _, inside = self.barycentric_service.grid_to_barycentric(triangle, xs, ys)

        pixels = buffer.pixels.astype(np.float64)
        colour = pixels[..., :3]
        washed = colour * (1 - self.dim_opacity) + 255 * self.dim_opacity
        colour[~inside] = washed[~inside]
        return np.rint(pixels).astype(np.uint8)

    def render(self, buffer: RasterBuffer, triangle: Triangle) -> RasterBuffer:
        """
        Args:
            buffer (RasterBuffer): 3- or 4-channel raster, left untouched.
            triangle (Triangle): Viewport in *buffer*'s pixel space.
        Returns:
            (RasterBuffer): A new raster holding the preview.
        """
        if buffer.channels not in (3, 4):
            raise DimensionMismatchError(f"Preview needs an RGB(A) raster, got {buffer.channels} channels")

        preview = buffer.copy()
        canvas = np.ascontiguousarray(self.dim_outside(buffer, triangle))

        corners = np.rint(triangle.as_array()).astype(np.int32)
        outline = self._color(OUTLINE_RGB, buffer.channels)
        cv2.polylines(canvas, [corners.reshape(-1, 1, 2)], isClosed=True,
                      color=outline, thickness=OUTLINE_THICKNESS, lineType=cv2.LINE_AA)

        for idx, (x, y) in enumerate(corners):
            letter = chr(ord("A") + idx)
            center = (int(x), int(y))
            cv2.circle(canvas, center, CORNER_RADIUS, self._color(LABEL_FILL_RGB, buffer.channels), -1)
            cv2.circle(canvas, center, CORNER_RADIUS, outline, OUTLINE_THICKNESS)
            cv2.putText(canvas, letter, (center[0] - 5, center[1] + 5),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.45, outline, 1, cv2.LINE_AA)

        self.raster_service.update_pixels(preview, canvas)
        return preview
