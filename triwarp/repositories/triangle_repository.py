import json
from typing import List, Tuple

from ..models.errors import TriangleParseError
from ..models.point import Point
from ..models.triangle import Triangle


class TriangleRepository:
    """
    Simple access layer for Triangle corners plus text/JSON (de)serialisation.

    Text form : "x,y;x,y;x,y"
    JSON form : [[x, y], ...] or [{"x": .., "y": ..}, ...]
    """

    @staticmethod
    def retrieve_corners(triangle: Triangle) -> Tuple[Point, Point, Point]:
        return triangle.corners

    @staticmethod
    def retrieve_coords(triangle: Triangle) -> List[List[float]]:
        return [[p.x, p.y] for p in triangle.corners]

    @staticmethod
    def from_text(text: str) -> Triangle:
        text = (text or "").strip()
        if text.startswith("["):
            return TriangleRepository.from_json(text)
        try:
            pairs = [chunk.split(",") for chunk in text.split(";") if chunk.strip()]
            return Triangle.from_coords((float(x), float(y)) for x, y in pairs)
        except ValueError as e:
            raise TriangleParseError(f"Cannot parse triangle {text!r}: expected 'x,y;x,y;x,y'") from e

    @staticmethod
    def from_json(payload) -> Triangle:
        try:
            coords = json.loads(payload) if isinstance(payload, str) else payload
            return Triangle.from_coords(coords)
        except (ValueError, TypeError, KeyError) as e:
            raise TriangleParseError(f"Cannot parse triangle {payload!r}: {e}") from e

    @staticmethod
    def to_text(triangle: Triangle) -> str:
        return ";".join(f"{p.x:g},{p.y:g}" for p in triangle.corners)

    @staticmethod
    def to_json(triangle: Triangle) -> str:
        return json.dumps(TriangleRepository.retrieve_coords(triangle))
