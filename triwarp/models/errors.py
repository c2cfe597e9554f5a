class WarpError(ValueError):
    """Base class for every failure of a warp call."""


class DegenerateTriangleError(WarpError):
    """Triangle corners are collinear (zero area); barycentric coordinates are undefined."""


class OutOfBoundsError(WarpError, IndexError):
    """Pixel coordinate outside the raster grid."""


class DimensionMismatchError(WarpError):
    """Buffer stride, channel count or backing store length do not agree."""


class UnknownOptionError(WarpError):
    """Unrecognised configuration field or value."""


class SourceNotLoadedError(WarpError):
    """A session was asked to recompute before a source raster was set."""


class TriangleParseError(WarpError):
    """Malformed textual triangle."""
