from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from typing import List, Tuple
import logging
import time

import numpy as np

from ..models.errors import DimensionMismatchError, WarpError
from ..models.mapping_request import MappingRequest
from ..models.mapping_result import MappingResult
from ..models.raster_buffer import RasterBuffer
from ..models.triangle import Triangle
from ..models.warp_options import WarpOptions
from .barycentric_service import BarycentricService
from .sampling_service import SamplingService

logger = logging.getLogger(__name__)

# Rows per band. The partition depends only on the destination height.
BAND_ROWS = 64


class TriangleMappingService:
    """
    Barycentric texture mapping from a source triangle onto a destination triangle.

    For every destination pixel (x, y):
        • (u, v) relative to the destination triangle
        • outside → background fill
        • inside  → sample the source at the same (u, v) of the source triangle

    Pixels are independent, so the destination is cut into disjoint row bands
    which may run on a thread pool. The source is only ever read.
    """

    def __init__(self, options: WarpOptions | None = None):
        self.options = options or WarpOptions.from_env()
        self.barycentric_service = BarycentricService()
        self.sampling_service = SamplingService()

    # ---------- validation ----------
    def _validate(
        self,
        source: RasterBuffer,
        source_triangle: Triangle,
        destination: RasterBuffer,
        destination_triangle: Triangle,
        options: WarpOptions,
    ) -> np.ndarray:
        if source.channels != destination.channels:
            raise DimensionMismatchError(
                f"Source has {source.channels} channels, destination has {destination.channels}"
            )
        background = destination.check_pixel_value(options.background_for(destination.channels))

        # Both denominators are triangle-global, so this is the only place they can fail.
        self.barycentric_service.check_triangle(destination_triangle)
        self.barycentric_service.check_triangle(source_triangle)
        return background

    @staticmethod
    def _row_bands(height: int) -> List[Tuple[int, int]]:
        return [(lo, min(lo + BAND_ROWS, height)) for lo in range(0, height, BAND_ROWS)]

    # ---------- per-band kernel ----------
    def _map_band(
        self,
        rows: Tuple[int, int],
        source: RasterBuffer,
        source_triangle: Triangle,
        destination_triangle: Triangle,
        out: np.ndarray,
        background: np.ndarray,
        options: WarpOptions,
    ) -> int:
        """Fill out[y0:y1] and return the number of inside pixels written."""
        y0, y1 = rows
        width = out.shape[1]
        xs, ys = np.meshgrid(np.arange(width, dtype=np.float64),
                             np.arange(y0, y1, dtype=np.float64))

        u, v, inside = self.barycentric_service.grid_to_barycentric(destination_triangle, xs, ys)

        band = out[y0:y1]
        band[...] = background

        if inside.any():
            src_x, src_y = self.barycentric_service.grid_from_barycentric(
                source_triangle, u[inside], v[inside]
            )
            band[inside] = self.sampling_service.sample(source, src_x, src_y, options.sampling)

        return int(inside.sum())

    # ---------- public API ----------
    def map_triangle(
        self,
        source: RasterBuffer,
        source_triangle: Triangle,
        destination: RasterBuffer,
        destination_triangle: Triangle,
        options: WarpOptions | None = None,
    ) -> int:
        """
        Warp *source_triangle* of *source* onto *destination_triangle* of *destination*.

        The destination is written in a single step after every band has been
        computed, so a failing call leaves it untouched.

        Args:
            source (RasterBuffer): Read-only source raster.
            source_triangle (Triangle): Corners in source pixel space.
            destination (RasterBuffer): Preallocated raster, mutated in place.
            destination_triangle (Triangle): Corners in destination pixel space.
            options (WarpOptions): Overrides the service defaults.
        Returns:
            (int): Number of destination pixels inside the triangle.
        Raises:
            DimensionMismatchError: channel counts or background length disagree.
            DegenerateTriangleError: either triangle has zero area.
        """
        options = options or self.options
        background = self._validate(source, source_triangle, destination, destination_triangle, options)

        started = time.perf_counter()
        out = np.empty(destination.shape, dtype=np.uint8)
        bands = self._row_bands(destination.height)
        logger.debug(f"Mapping {destination.width}x{destination.height} in {len(bands)} band(s), "
                     f"{options.workers} worker(s), sampling={options.sampling.value}")

        def run(rows):
            return self._map_band(rows, source, source_triangle, destination_triangle,
                                  out, background, options)

        if options.workers == 1 or len(bands) == 1:
            inside_counts = [run(rows) for rows in bands]
        else:
            with ThreadPoolExecutor(max_workers=options.workers) as pool:
                inside_counts = list(pool.map(run, bands))

        destination.pixels[...] = out
        inside_pixels = sum(inside_counts)

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"Warped {inside_pixels}/{destination.width * destination.height} pixels "
                    f"in {elapsed_ms:.1f} ms")
        return inside_pixels

    def map_request(self, request: MappingRequest, options: WarpOptions | None = None) -> int:
        return self.map_triangle(
            request.source,
            request.source_triangle,
            request.destination,
            request.destination_triangle,
            options,
        )

    def try_map_triangle(
        self,
        source: RasterBuffer,
        source_triangle: Triangle,
        destination: RasterBuffer,
        destination_triangle: Triangle,
        options: WarpOptions | None = None,
    ) -> MappingResult:
        """Same as ``map_triangle`` but reports warp failures as a MappingResult."""
        try:
            inside = self.map_triangle(source, source_triangle, destination, destination_triangle, options)
        except WarpError as e:
            logger.warning(f"Warp rejected: {type(e).__name__}: {e}")
            return MappingResult(destination=destination, error=e)
        return MappingResult(destination=destination, inside_pixels=inside)
