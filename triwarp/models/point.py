from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    """
    Immutable (x, y) pair in pixel space.
    Doubles as a 2D vector for the barycentric math.
    """
    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __iter__(self):
        yield self.x
        yield self.y

    def scale(self, k: float) -> Point:
        return Point(k * self.x, k * self.y)

    def dot(self, other: Point) -> float:
        return self.x * other.x + self.y * other.y

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    @classmethod
    def of(cls, xy) -> Point:
        """Build a Point from a Point, a (x, y) pair or a {"x": .., "y": ..} mapping."""
        if isinstance(xy, Point):
            return xy
        if isinstance(xy, dict):
            return cls(float(xy["x"]), float(xy["y"]))
        x, y = xy
        return cls(float(x), float(y))
