from typing import Tuple
import numpy as np

from ..models.errors import DegenerateTriangleError
from ..models.point import Point
from ..models.triangle import Triangle

# |denom| at or below this is treated as a collinear triangle.
DEGENERATE_EPS = 1e-9


class BarycentricService:
    """
    Cartesian <-> barycentric conversion relative to a triangle (A, B, C).

    Convention: u weights C - A, v weights B - A, so
        A -> (0, 0), B -> (0, 1), C -> (1, 0)
    and a point is inside the closed triangle iff u >= 0, v >= 0, u + v <= 1.
    """

    # ---------- scalar API ----------
    @staticmethod
    def _basis(triangle: Triangle):
        a, b, c = triangle.corners
        v0 = c - a
        v1 = b - a
        dot00 = v0.dot(v0)
        dot01 = v0.dot(v1)
        dot11 = v1.dot(v1)
        return a, v0, v1, dot00, dot01, dot11

    @staticmethod
    def denominator(triangle: Triangle) -> float:
        _, _, _, dot00, dot01, dot11 = BarycentricService._basis(triangle)
        return dot00 * dot11 - dot01 * dot01

    @staticmethod
    def check_triangle(triangle: Triangle) -> float:
        """
        Returns:
            (float): The shared denominator of the triangle.
        Raises:
            DegenerateTriangleError: if the corners are collinear.
        """
        denom = BarycentricService.denominator(triangle)
        if abs(denom) <= DEGENERATE_EPS:
            raise DegenerateTriangleError(f"Degenerate triangle {triangle.as_array().tolist()} (zero area)")
        return denom

    @staticmethod
    def to_barycentric(triangle: Triangle, point) -> Tuple[float, float]:
        point = Point.of(point)
        a, v0, v1, dot00, dot01, dot11 = BarycentricService._basis(triangle)
        denom = BarycentricService.check_triangle(triangle)
        v2 = point - a
        dot02 = v0.dot(v2)
        dot12 = v1.dot(v2)

        u = (dot11 * dot02 - dot01 * dot12) / denom
        v = (dot00 * dot12 - dot01 * dot02) / denom
        return u, v

    @staticmethod
    def from_barycentric(triangle: Triangle, uv: Tuple[float, float]) -> Point:
        u, v = uv
        a, b, c = triangle.corners
        return a + (c - a).scale(u) + (b - a).scale(v)

    @staticmethod
    def is_inside(uv: Tuple[float, float]) -> bool:
        u, v = uv
        return u >= 0 and v >= 0 and u + v <= 1

    @staticmethod
    def contains(triangle: Triangle, point) -> bool:
        return BarycentricService.is_inside(BarycentricService.to_barycentric(triangle, point))

    # ---------- vectorised API ----------
    @staticmethod
    def grid_to_barycentric(triangle: Triangle, xs: np.ndarray, ys: np.ndarray):
        """
        Barycentric coordinates of every (xs[i], ys[i]) at once.

        The inside mask is decided on the numerators against the denominator,
        which is the same closed rule as ``is_inside`` without the rounding
        introduced by the division.

        Returns:
            (u, v, inside): float64 arrays shaped like *xs* plus a bool mask.
        """
        a, v0, v1, dot00, dot01, dot11 = BarycentricService._basis(triangle)
        denom = BarycentricService.check_triangle(triangle)

        v2x = np.asarray(xs, dtype=np.float64) - a.x
        v2y = np.asarray(ys, dtype=np.float64) - a.y
        dot02 = v0.x * v2x + v0.y * v2y
        dot12 = v1.x * v2x + v1.y * v2y

        num_u = dot11 * dot02 - dot01 * dot12
        num_v = dot00 * dot12 - dot01 * dot02
        inside = (num_u >= 0) & (num_v >= 0) & (num_u + num_v <= denom)
        return num_u / denom, num_v / denom, inside

    @staticmethod
    def grid_from_barycentric(triangle: Triangle, u: np.ndarray, v: np.ndarray):
        a, b, c = triangle.corners
        ca = c - a
        ba = b - a
        xs = a.x + u * ca.x + v * ba.x
        ys = a.y + u * ca.y + v * ba.y
        return xs, ys
