"""Small grid geometry helpers shared by the generation stages."""

import math
from typing import List, Tuple

Point = Tuple[int, int]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return int(math.floor(value + 0.5))


def distance(x0: float, y0: float, x1: float, y1: float) -> float:
    """Euclidean distance."""
    return math.hypot(x1 - x0, y1 - y0)


def line_points(x0: int, y0: int, x1: int, y1: int) -> List[Point]:
    """
    Points on the straight line between two tiles, endpoints included.

    Walks ``max(|dx|, |dy|)`` steps of linear interpolation, rounding each
    point. When two consecutive points differ diagonally the horizontal
    corner is inserted so the path stays 4-connected.
    """
    dx = x1 - x0
    dy = y1 - y0
    steps = max(abs(dx), abs(dy))
    if steps == 0:
        return [(x0, y0)]

    points: List[Point] = [(x0, y0)]
    for i in range(1, steps + 1):
        t = i / steps
        px = round_half_up(x0 + dx * t)
        py = round_half_up(y0 + dy * t)
        prev_x, prev_y = points[-1]
        if px != prev_x and py != prev_y:
            points.append((px, prev_y))
        points.append((px, py))
    return points
