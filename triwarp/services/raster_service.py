from __future__ import annotations
from pathlib import Path
from typing import Sequence, Union
import base64
import os
import numpy as np
from dotenv import load_dotenv

from ..models.raster_buffer import RasterBuffer
from ..repositories.raster_repository import RasterRepository

# Load environment variables
load_dotenv()


class RasterService:
    """I/O helpers over RasterRepository.  No warp logic."""
    def __init__(self):
        self.OUTPUT_EXT = os.getenv("OUTPUT_IMG_EXT", ".png")
        self.raster_repository = RasterRepository()

    def create_buffer(self, width: int, height: int, channels: int = 4,
                      fill: Sequence[int] | None = None) -> RasterBuffer:
        return self.raster_repository.create_buffer(width, height, channels, fill)

    def load(self, path: Union[str, Path]) -> RasterBuffer:
        """Load a single image from disk into an RGBA RasterBuffer."""
        return self.raster_repository.load(path)

    def decode(self, payload: bytes) -> RasterBuffer:
        return self.raster_repository.decode(payload)

    def save(self, buffer: RasterBuffer, path: Union[str, Path]) -> Path:
        """
        Save *buffer* to *path*; a path without suffix gets OUTPUT_IMG_EXT.
        """
        path = Path(path)
        if not path.suffix:
            path = path.with_suffix(self.OUTPUT_EXT)
        self.raster_repository.save(buffer, path)
        return path

    def to_png_bytes(self, buffer: RasterBuffer) -> bytes:
        return self.raster_repository.encode_png(buffer)

    def to_data_url(self, buffer: RasterBuffer) -> str:
        """PNG data URL for JSON responses."""
        encoded = base64.b64encode(self.to_png_bytes(buffer)).decode("utf-8")
        return f"data:image/png;base64,{encoded}"

    def update_pixels(self, buffer: RasterBuffer, new_pixels: np.ndarray) -> None:
        """
        Business-level method to replace the current raster pixels.
        """
        self.raster_repository.set_pixels(buffer, new_pixels)
