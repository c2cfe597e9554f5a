import numpy as np

from triwarp.models.raster_buffer import RasterBuffer

WHITE = (255, 255, 255, 255)


def gradient_buffer(width: int, height: int) -> RasterBuffer:
    """RGBA raster whose red/green channels encode x/y, blue their sum."""
    ys, xs = np.mgrid[0:height, 0:width]
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[..., 0] = (xs * 20) % 256
    pixels[..., 1] = (ys * 20) % 256
    pixels[..., 2] = (xs + ys) % 256
    pixels[..., 3] = 255
    return RasterBuffer.from_array(pixels)
