from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence
import numpy as np

from .errors import DimensionMismatchError, OutOfBoundsError

MAX_CHANNELS = 4


@dataclass(eq=False)
class RasterBuffer:
    """
    Row-major pixel grid over a flat uint8 backing store.

    Pixel (x, y) starts at ``channels * (x + y * width)`` in ``data``.
    Dimensions are validated once at construction; every accessor below is
    bounds-checked.
    """
    width: int
    height: int
    channels: int
    data: np.ndarray  # Shape (width * height * channels,), dtype uint8.

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise DimensionMismatchError(f"Raster size must be positive, got {self.width}x{self.height}")
        if not 1 <= self.channels <= MAX_CHANNELS:
            raise DimensionMismatchError(f"Unsupported channel count: {self.channels}")
        if not isinstance(self.data, np.ndarray) or self.data.dtype != np.uint8:
            raise DimensionMismatchError("Raster backing store must be a uint8 numpy array")
        if self.data.ndim != 1:
            raise DimensionMismatchError(f"Raster backing store must be flat, got shape {self.data.shape}")
        expected = self.width * self.height * self.channels
        if self.data.size != expected:
            raise DimensionMismatchError(
                f"Backing store holds {self.data.size} values, "
                f"{self.width}x{self.height}x{self.channels} needs {expected}"
            )
        if not self.data.flags['C_CONTIGUOUS']:
            self.data = np.ascontiguousarray(self.data)

    # ── Factories ────────────────────────────────────────────────────
    @classmethod
    def blank(cls, width: int, height: int, channels: int = 4, fill: Sequence[int] | None = None) -> RasterBuffer:
        """New buffer with every pixel set to *fill* (zeros if omitted)."""
        data = np.zeros(max(width, 0) * max(height, 0) * max(channels, 0), dtype=np.uint8)
        buffer = cls(width, height, channels, data)
        if fill is not None:
            buffer.fill(fill)
        return buffer

    @classmethod
    def from_array(cls, pixels: np.ndarray) -> RasterBuffer:
        """Wrap an (H, W) or (H, W, C) uint8 array, copying it into flat storage."""
        if pixels.ndim == 2:
            pixels = pixels[:, :, np.newaxis]
        if pixels.ndim != 3:
            raise DimensionMismatchError(f"Expected (H, W) or (H, W, C) pixels, got shape {pixels.shape}")
        height, width, channels = pixels.shape
        data = np.ascontiguousarray(pixels, dtype=np.uint8).reshape(-1).copy()
        return cls(width, height, channels, data)

    # ── Views ────────────────────────────────────────────────────────
    @property
    def pixels(self) -> np.ndarray:
        """(height, width, channels) view sharing storage with ``data``."""
        return self.data.reshape(self.height, self.width, self.channels)

    @property
    def shape(self):
        return (self.height, self.width, self.channels)

    def copy(self) -> RasterBuffer:
        return RasterBuffer(self.width, self.height, self.channels, self.data.copy())

    # ── Bounds-checked access ────────────────────────────────────────
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def offset(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} raster")
        return self.channels * (x + y * self.width)

    def get_pixel(self, x: int, y: int) -> tuple:
        start = self.offset(x, y)
        return tuple(int(v) for v in self.data[start:start + self.channels])

    def set_pixel(self, x: int, y: int, value: Sequence[int]) -> None:
        start = self.offset(x, y)
        self.data[start:start + self.channels] = self.check_pixel_value(value)

    def check_pixel_value(self, value: Sequence[int]) -> np.ndarray:
        """Validate a per-pixel channel tuple against this buffer's stride."""
        arr = np.asarray(value)
        if arr.shape != (self.channels,):
            raise DimensionMismatchError(
                f"Pixel value has {arr.size} channels, raster has {self.channels}"
            )
        if np.any(arr < 0) or np.any(arr > 255):
            raise DimensionMismatchError(f"Channel values must lie in [0, 255], got {tuple(value)}")
        return arr.astype(np.uint8)

    def fill(self, value: Sequence[int]) -> None:
        self.pixels[:, :] = self.check_pixel_value(value)
