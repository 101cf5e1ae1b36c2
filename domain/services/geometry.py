from __future__ import annotations

import math

from domain.models import Point


def distance(p1: Point, p2: Point) -> float:
    return math.hypot(p2.x - p1.x, p2.y - p1.y)


def angle(p1: Point, p2: Point) -> float:
    """Direction from p1 to p2 in radians; 0 means p2 lies directly to the right."""
    return math.atan2(p2.y - p1.y, p2.x - p1.x)


def angle_degrees(p1: Point, p2: Point) -> float:
    return math.degrees(angle(p1, p2))


def midpoint(p1: Point, p2: Point) -> Point:
    return Point((p1.x + p2.x) / 2, (p1.y + p2.y) / 2)


def lerp(p1: Point, p2: Point, ratio: float) -> Point:
    return Point(p1.x + (p2.x - p1.x) * ratio, p1.y + (p2.y - p1.y) * ratio)


def offset(point: Point, dx: float, dy: float) -> Point:
    return Point(point.x + dx, point.y + dy)


def is_finite_point(point: Point | None) -> bool:
    return point is not None and math.isfinite(point.x) and math.isfinite(point.y)
