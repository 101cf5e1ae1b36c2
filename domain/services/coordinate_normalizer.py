from __future__ import annotations

from dataclasses import replace

from domain.models import ConnectionPoints, Point


def to_container_relative(
    points: ConnectionPoints,
    container_origin: Point | None,
) -> ConnectionPoints:
    """Shift both endpoints of a connector into container-local space.

    The pair is always moved together; a missing origin means the points are
    already in the space the caller wants and the pair is returned unchanged.
    """
    if container_origin is None:
        return points
    return replace(
        points,
        start=_shift(points.start, -container_origin.x, -container_origin.y),
        end=_shift(points.end, -container_origin.x, -container_origin.y),
    )


def to_absolute(
    points: ConnectionPoints,
    container_origin: Point | None,
) -> ConnectionPoints:
    if container_origin is None:
        return points
    return replace(
        points,
        start=_shift(points.start, container_origin.x, container_origin.y),
        end=_shift(points.end, container_origin.x, container_origin.y),
    )


def _shift(point: Point, dx: float, dy: float) -> Point:
    return Point(point.x + dx, point.y + dy)
