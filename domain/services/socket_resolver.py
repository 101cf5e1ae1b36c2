from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import replace

from domain.models import (
    SOCKET_AUTO,
    SOCKET_CENTER,
    SOCKET_POSITIONS,
    ConnectionPoints,
    ElementLayout,
    Point,
    SocketGravity,
    is_finite_number,
)
from domain.services.coordinate_normalizer import to_container_relative
from domain.services.geometry import is_finite_point

logger = logging.getLogger(__name__)

DIAGONAL_RATIO = 0.25

# (horizontal factor, vertical factor) applied to width / height from the top-left origin
_SOCKET_FACTORS: dict[str, tuple[float, float]] = {
    "auto": (0.5, 0.5),
    "center": (0.5, 0.5),
    "top": (0.5, 0.0),
    "bottom": (0.5, 1.0),
    "left": (0.0, 0.5),
    "right": (1.0, 0.5),
    "top_left": (0.0, 0.0),
    "top_right": (1.0, 0.0),
    "bottom_left": (0.0, 1.0),
    "bottom_right": (1.0, 1.0),
}


def normalize_socket(socket: object) -> str:
    name = str(socket or "").strip().lower()
    return name if name in SOCKET_POSITIONS else SOCKET_CENTER


def resolve_socket(layout: ElementLayout | None, socket: str) -> Point | None:
    if layout is None:
        return None
    factor_x, factor_y = _SOCKET_FACTORS[normalize_socket(socket)]
    width = _dimension(layout.width)
    height = _dimension(layout.height)
    return Point(layout.origin_x + width * factor_x, layout.origin_y + height * factor_y)


def all_socket_points(layout: ElementLayout | None) -> dict[str, Point]:
    if layout is None:
        return {}
    points: dict[str, Point] = {}
    for socket in SOCKET_POSITIONS:
        point = resolve_socket(layout, socket)
        if point is not None:
            points[socket] = point
    return points


def resolve_direction(
    dx: float,
    dy: float,
    *,
    fine: bool = False,
    diagonal_ratio: float = DIAGONAL_RATIO,
) -> str:
    """Pick the socket facing the (dx, dy) offset.

    Coarse mode returns one of the four edge sockets and breaks |dx| == |dy|
    ties toward the horizontal axis. Fine mode may return a corner, but only
    when both deltas are non-zero and within ``diagonal_ratio`` of each other.
    A zero offset has no direction and resolves to ``center``.
    """
    if not (math.isfinite(dx) and math.isfinite(dy)):
        return SOCKET_CENTER
    abs_dx = abs(dx)
    abs_dy = abs(dy)
    if abs_dx == 0 and abs_dy == 0:
        return SOCKET_CENTER
    if fine and abs_dx > 0 and abs_dy > 0:
        if abs(abs_dx - abs_dy) <= diagonal_ratio * max(abs_dx, abs_dy):
            vertical = "bottom" if dy > 0 else "top"
            horizontal = "right" if dx > 0 else "left"
            return f"{vertical}_{horizontal}"
    if abs_dx >= abs_dy:
        return "right" if dx > 0 else "left"
    return "bottom" if dy > 0 else "top"


def resolve_auto_socket(
    layout: ElementLayout | None,
    reference: Point,
    *,
    fine: bool = False,
    diagonal_ratio: float = DIAGONAL_RATIO,
) -> str | None:
    center = resolve_socket(layout, SOCKET_CENTER)
    if center is None:
        return None
    return resolve_direction(
        reference.x - center.x,
        reference.y - center.y,
        fine=fine,
        diagonal_ratio=diagonal_ratio,
    )


def resolve_socket_gravity(
    point: Point,
    layout: ElementLayout | None,
    gravity: SocketGravity | Sequence[float] | None,
) -> str | None:
    if layout is None:
        return None
    vector = gravity_vector(gravity)
    if vector is not None and (vector[0] or vector[1]):
        return resolve_direction(vector[0], vector[1])
    # "auto" and scalar strengths carry no direction of their own
    return resolve_auto_socket(layout, point)


def gravity_vector(gravity: object) -> tuple[float, float] | None:
    if isinstance(gravity, (str, bytes)) or not isinstance(gravity, Sequence):
        return None
    if len(gravity) != 2:
        return None
    gx, gy = gravity
    if not all(is_finite_number(value) for value in (gx, gy)):
        return None
    return float(gx), float(gy)


def resolve_connection_points(
    start_layout: ElementLayout | None,
    end_layout: ElementLayout | None,
    start_socket: str = SOCKET_CENTER,
    end_socket: str = SOCKET_CENTER,
    container_origin: Point | None = None,
    *,
    fine_auto: bool = False,
    diagonal_ratio: float = DIAGONAL_RATIO,
) -> ConnectionPoints | None:
    if start_layout is None or end_layout is None:
        logger.debug("Connection points not ready: layout missing")
        return None

    start_layout, start_finite = _finite_layout(start_layout)
    end_layout, end_finite = _finite_layout(end_layout)
    container_finite = container_origin is None or is_finite_point(container_origin)
    if not container_finite:
        logger.debug("Container origin is not finite, using absolute coordinates")
        container_origin = None
    effective_start = normalize_socket(start_socket)
    effective_end = normalize_socket(end_socket)
    start_center = resolve_socket(start_layout, SOCKET_CENTER)
    end_center = resolve_socket(end_layout, SOCKET_CENTER)
    if start_center is None or end_center is None:
        return None
    if effective_start == SOCKET_AUTO:
        effective_start = resolve_auto_socket(
            start_layout, end_center, fine=fine_auto, diagonal_ratio=diagonal_ratio
        ) or SOCKET_CENTER
    if effective_end == SOCKET_AUTO:
        effective_end = resolve_auto_socket(
            end_layout, start_center, fine=fine_auto, diagonal_ratio=diagonal_ratio
        ) or SOCKET_CENTER

    start = resolve_socket(start_layout, effective_start)
    end = resolve_socket(end_layout, effective_end)
    if start is None or end is None:
        return None

    reliable = (
        start_finite
        and end_finite
        and container_finite
        and start_layout.is_reliable
        and end_layout.is_reliable
    )
    if not reliable:
        logger.debug(
            "Connection points computed from degenerate layouts: start=%s end=%s",
            start_layout.size,
            end_layout.size,
        )
    return to_container_relative(
        ConnectionPoints(
            start=start,
            end=end,
            start_socket=effective_start,
            end_socket=effective_end,
            reliable=reliable,
        ),
        container_origin,
    )


def _finite_layout(layout: ElementLayout) -> tuple[ElementLayout, bool]:
    if math.isfinite(layout.origin_x) and math.isfinite(layout.origin_y):
        return layout, True
    logger.debug("Layout origin is not finite: (%s, %s)", layout.origin_x, layout.origin_y)
    return (
        replace(
            layout,
            origin_x=layout.origin_x if math.isfinite(layout.origin_x) else 0.0,
            origin_y=layout.origin_y if math.isfinite(layout.origin_y) else 0.0,
        ),
        False,
    )


def _dimension(value: float) -> float:
    if value is None or not math.isfinite(value):
        return 0.0
    return max(float(value), 0.0)
