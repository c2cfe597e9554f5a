from __future__ import annotations
from io import BytesIO
from pathlib import Path
from typing import Sequence, Union
import cv2
import numpy as np
from PIL import Image as PILImage

from ..models.raster_buffer import RasterBuffer

# OpenCV channel order → RGBA
_TO_RGBA = {
    1: cv2.COLOR_GRAY2RGBA,
    3: cv2.COLOR_BGR2RGBA,
    4: cv2.COLOR_BGRA2RGBA,
}


class RasterRepository:
    """
    Handles file I/O and pixel access for RasterBuffer entities.
    Everything loaded comes back as 4-channel RGBA.
    """

    @staticmethod
    def create_buffer(width: int, height: int, channels: int = 4,
                      fill: Sequence[int] | None = None) -> RasterBuffer:
        return RasterBuffer.blank(width, height, channels, fill)

    @staticmethod
    def _to_rgba(arr: np.ndarray) -> RasterBuffer:
        channels = 1 if arr.ndim == 2 else arr.shape[2]
        if arr.dtype != np.uint8:
            # 16-bit PNG/TIFF → 8 bit
            arr = (arr / 257).astype(np.uint8)
        rgba = cv2.cvtColor(arr, _TO_RGBA[channels])
        return RasterBuffer.from_array(rgba)

    @staticmethod
    def load(path: Union[str, Path]) -> RasterBuffer:
        path = Path(path)
        arr = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        if arr is None:
            raise FileNotFoundError(f"Image not found or unreadable: {path}")
        return RasterRepository._to_rgba(arr)

    @staticmethod
    def decode(payload: bytes) -> RasterBuffer:
        """Decode an encoded image (PNG, JPEG, ...) held in memory."""
        arr = cv2.imdecode(np.frombuffer(payload, dtype=np.uint8), cv2.IMREAD_UNCHANGED)
        if arr is None:
            raise ValueError("Payload is not a decodable image")
        return RasterRepository._to_rgba(arr)

    @staticmethod
    def to_pil(buffer: RasterBuffer) -> PILImage.Image:
        pixels = buffer.pixels
        if buffer.channels == 1:
            pixels = pixels[:, :, 0]
        elif buffer.channels == 2:
            raise ValueError(f"Cannot encode a {buffer.channels}-channel raster")
        return PILImage.fromarray(np.ascontiguousarray(pixels))

    @staticmethod
    def save(buffer: RasterBuffer, path: Union[str, Path]) -> None:
        path = Path(path)
        pil_obj = RasterRepository.to_pil(buffer)
        if path.suffix.lower() in {".jpg", ".jpeg"} and pil_obj.mode == "RGBA":
            pil_obj = pil_obj.convert("RGB")  # JPEG has no alpha
        path.parent.mkdir(parents=True, exist_ok=True)
        pil_obj.save(path)

    @staticmethod
    def encode_png(buffer: RasterBuffer) -> bytes:
        out = BytesIO()
        RasterRepository.to_pil(buffer).save(out, format="PNG")
        return out.getvalue()

    @staticmethod
    def set_pixels(buffer: RasterBuffer, new_pixels: np.ndarray) -> None:
        if new_pixels.shape != buffer.shape:
            raise ValueError(f"Expected pixels of shape {buffer.shape}, got {new_pixels.shape}")
        buffer.pixels[...] = new_pixels
