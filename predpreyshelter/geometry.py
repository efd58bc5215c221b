"""
Coordinate math on the grid. Coordinates are 1-based, `x` grows to the right
and `y` grows downward, so the top neighbor of (x, y) is (x, y - 1).
"""
from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Optional
import math


class Direction(Enum):
    TOP = "top"
    TOP_RIGHT = "top_right"
    RIGHT = "right"
    BOTTOM_RIGHT = "bottom_right"
    BOTTOM = "bottom"
    BOTTOM_LEFT = "bottom_left"
    LEFT = "left"
    TOP_LEFT = "top_left"


class Coordinates(NamedTuple):
    x: int
    y: int

    @classmethod
    def from_cell_id(cls, size: int, cell_id: int) -> "Coordinates":
        """Converts a 1-based row-major cell id into coordinates."""
        x = cell_id % size or size
        y = (cell_id - 1) // size + 1
        return cls(x, y)

    def to_cell_id(self, size: int) -> int:
        return (self.y - 1) * size + self.x

    def __str__(self) -> str:
        return f"(x: {self.x}, y: {self.y})"


def squared_distance(a: Coordinates, b: Coordinates) -> int:
    return (a.x - b.x) ** 2 + (a.y - b.y) ** 2


def in_range(a: Coordinates, b: Coordinates, radius: int) -> bool:
    return squared_distance(a, b) <= radius * radius


def distance(a: Coordinates, b: Coordinates) -> float:
    return math.sqrt(squared_distance(a, b))


def direction_to(source: Coordinates, target: Coordinates) -> Optional[Direction]:
    """
    Classifies the vector source -> target into one of eight directions.

    The ratio of the minor to the major absolute displacement decides between
    an orthogonal label (ratio < 0.5) and a diagonal one (ratio >= 0.5).
    Returns None for a zero vector.
    """
    dx = target.x - source.x
    dy = target.y - source.y
    if dx == 0 and dy == 0:
        return None
    major = max(abs(dx), abs(dy))
    minor = min(abs(dx), abs(dy))
    ratio = minor / major

    if ratio < 0.5:
        if abs(dx) > abs(dy):
            return Direction.RIGHT if dx > 0 else Direction.LEFT
        return Direction.BOTTOM if dy > 0 else Direction.TOP

    if dx > 0 and dy > 0:
        return Direction.BOTTOM_RIGHT
    if dx > 0 and dy < 0:
        return Direction.TOP_RIGHT
    if dx < 0 and dy > 0:
        return Direction.BOTTOM_LEFT
    return Direction.TOP_LEFT


def reflect(pivot: Coordinates, point: Coordinates) -> Coordinates:
    """Reflects `point` through `pivot`; used to step directly away from a shelter."""
    return Coordinates(2 * pivot.x - point.x, 2 * pivot.y - point.y)
