"""Triangle-to-triangle image warping (barycentric texture mapping)."""

__version__ = "1.0.0"
