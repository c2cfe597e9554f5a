import numpy as np

from ..models.raster_buffer import RasterBuffer
from ..models.warp_options import SamplingMode

# Absorbs round-off of the barycentric round trip (10 * (3 / 10) and the
# like) so that integral source coordinates do not floor one pixel short.
SNAP_EPS = 1e-7


class SamplingService:
    """
    Reads source colours at real-valued coordinates.

    Coordinates outside the source extent are clamped to the nearest edge
    pixel: x into [0, width - 1], y into [0, height - 1].
    """

    @staticmethod
    def clamp_coordinates(source: RasterBuffer, xs: np.ndarray, ys: np.ndarray):
        """Clamp integer pixel coordinates onto the source grid."""
        return np.clip(xs, 0, source.width - 1), np.clip(ys, 0, source.height - 1)

    def sample_nearest(self, source: RasterBuffer, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """
        Truncate both coordinates and read that pixel verbatim.

        Returns:
            (np.ndarray): uint8 array shaped ``xs.shape + (channels,)``.
        """
        ix = np.floor(xs + SNAP_EPS).astype(np.int64)
        iy = np.floor(ys + SNAP_EPS).astype(np.int64)
        ix, iy = self.clamp_coordinates(source, ix, iy)
        return source.pixels[iy, ix]

    def sample_bilinear(self, source: RasterBuffer, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Blend the 4 pixels around each coordinate, pixel (x, y) sitting at integer (x, y)."""
        x0 = np.floor(xs).astype(np.int64)
        y0 = np.floor(ys).astype(np.int64)

        # Fractional part for interpolation weights
        fx = np.clip(xs - x0, 0.0, 1.0)[..., np.newaxis]
        fy = np.clip(ys - y0, 0.0, 1.0)[..., np.newaxis]

        x0c, y0c = self.clamp_coordinates(source, x0, y0)
        x1c, y1c = self.clamp_coordinates(source, x0 + 1, y0 + 1)

        pixels = source.pixels
        p00 = pixels[y0c, x0c].astype(np.float64)
        p10 = pixels[y0c, x1c].astype(np.float64)
        p01 = pixels[y1c, x0c].astype(np.float64)
        p11 = pixels[y1c, x1c].astype(np.float64)

        result = (
            p00 * (1 - fx) * (1 - fy)
            + p10 * fx * (1 - fy)
            + p01 * (1 - fx) * fy
            + p11 * fx * fy
        )
        return np.clip(np.rint(result), 0, 255).astype(np.uint8)

    def sample(self, source: RasterBuffer, xs: np.ndarray, ys: np.ndarray,
               mode: SamplingMode = SamplingMode.NEAREST) -> np.ndarray:
        if mode is SamplingMode.BILINEAR:
            return self.sample_bilinear(source, xs, ys)
        return self.sample_nearest(source, xs, ys)
