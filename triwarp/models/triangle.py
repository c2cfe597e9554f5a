from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Tuple
import numpy as np

from .point import Point


@dataclass(frozen=True)
class Triangle:
    """
    Ordered triple of corners (A, B, C).

    Order matters: corner i of a source triangle is mapped onto corner i of
    the destination triangle.
    """
    a: Point
    b: Point
    c: Point

    @property
    def corners(self) -> Tuple[Point, Point, Point]:
        return (self.a, self.b, self.c)

    @classmethod
    def from_coords(cls, coords: Iterable) -> Triangle:
        points = [Point.of(p) for p in coords]
        if len(points) != 3:
            raise ValueError(f"A triangle needs exactly 3 corners, got {len(points)}")
        return cls(*points)

    def as_array(self) -> np.ndarray:
        """(3, 2) float64 array of corners, in A, B, C order."""
        return np.array([p.as_tuple() for p in self.corners], dtype=np.float64)

    def signed_area(self) -> float:
        ab = self.b - self.a
        ac = self.c - self.a
        return 0.5 * (ab.x * ac.y - ab.y * ac.x)
