from __future__ import annotations

import logging
import math
from collections.abc import Callable

from domain.models import (
    PLUG_BEHIND,
    PLUG_NONE,
    PathCommand,
    PathResult,
    PlugPlacement,
    Point,
    ShapeResult,
)
from domain.services.path_generator import end_tangent, start_tangent

logger = logging.getLogger(__name__)

# larger markers overflow native drawing buffers downstream
MAX_PLUG_SIZE = 100.0

ShapeBuilder = Callable[[float], tuple[tuple[PathCommand, ...], bool]]


def _polygon(*vertices: tuple[float, float]) -> tuple[PathCommand, ...]:
    first, *rest = vertices
    return (
        PathCommand("M", first),
        *(PathCommand("L", vertex) for vertex in rest),
        PathCommand("Z"),
    )


def _arrow1(size: float) -> tuple[tuple[PathCommand, ...], bool]:
    h = size / 2
    return _polygon((-h, -h), (h, 0.0), (-h, h)), True


def _chevron(notch_depth: float) -> ShapeBuilder:
    def build(size: float) -> tuple[tuple[PathCommand, ...], bool]:
        h = size / 2
        return _polygon((h, 0.0), (-h, -h), (-h + h * notch_depth, 0.0), (-h, h)), True

    return build


def _disc(size: float) -> tuple[tuple[PathCommand, ...], bool]:
    h = size / 2
    return (
        PathCommand("M", (-h, 0.0)),
        PathCommand("A", (h, h, 0.0, 1.0, 0.0, h, 0.0)),
        PathCommand("A", (h, h, 0.0, 1.0, 0.0, -h, 0.0)),
        PathCommand("Z"),
    ), True


def _square(size: float) -> tuple[tuple[PathCommand, ...], bool]:
    h = size / 2
    return _polygon((-h, -h), (h, -h), (h, h), (-h, h)), True


def _diamond(size: float) -> tuple[tuple[PathCommand, ...], bool]:
    h = size / 2
    return _polygon((0.0, -h), (h, 0.0), (0.0, h), (-h, 0.0)), True


def _hand(size: float) -> tuple[tuple[PathCommand, ...], bool]:
    h = size / 2
    return _polygon(
        (h, 0.0),
        (-0.6 * h, -h),
        (-h, -0.3 * h),
        (-0.8 * h, 0.0),
        (-h, 0.7 * h),
        (-0.6 * h, h),
    ), True


def _crosshair(size: float) -> tuple[tuple[PathCommand, ...], bool]:
    h = size / 2
    return (
        PathCommand("M", (0.0, -h)),
        PathCommand("L", (0.0, h)),
        PathCommand("M", (-h, 0.0)),
        PathCommand("L", (h, 0.0)),
    ), False


PLUG_SHAPE_BUILDERS: dict[str, ShapeBuilder] = {
    "arrow1": _arrow1,
    "arrow2": _chevron(0.2),
    "arrow3": _chevron(0.4),
    "disc": _disc,
    "square": _square,
    "diamond": _diamond,
    "hand": _hand,
    "crosshair": _crosshair,
}


def is_valid_plug_size(size: object) -> bool:
    if isinstance(size, bool) or not isinstance(size, (int, float)):
        return False
    return math.isfinite(size) and 0 < size <= MAX_PLUG_SIZE


def generate_plug_shape(kind: str, size: float) -> ShapeResult:
    """Marker geometry centered on the local origin, pointing along +x."""
    name = str(kind or "").strip().lower()
    if name in {PLUG_NONE, PLUG_BEHIND}:
        return ShapeResult(kind=name, size=_safe_size(size))
    builder = PLUG_SHAPE_BUILDERS.get(name)
    if builder is None or not is_valid_plug_size(size):
        logger.debug("Plug %r with size %r has no geometry", kind, size)
        return ShapeResult(kind=name, size=_safe_size(size))
    commands, closed = builder(float(size))
    return ShapeResult(kind=name, size=float(size), commands=commands, closed=closed)


def generate_behind_shape(size: float) -> ShapeResult:
    if not is_valid_plug_size(size):
        return ShapeResult(kind=PLUG_BEHIND, size=_safe_size(size))
    commands, closed = _square(float(size))
    return ShapeResult(kind=PLUG_BEHIND, size=float(size), commands=commands, closed=closed)


def place_plug(
    path: PathResult,
    kind: str,
    size: float,
    *,
    at_end: bool,
) -> PlugPlacement | None:
    shape = generate_plug_shape(kind, size)
    return _place(path, shape, at_end=at_end)


def place_behind_plug(path: PathResult, size: float, *, at_end: bool) -> PlugPlacement | None:
    return _place(path, generate_behind_shape(size), at_end=at_end)


def _place(path: PathResult, shape: ShapeResult, *, at_end: bool) -> PlugPlacement | None:
    points = path.points()
    if shape.is_empty or not points:
        return None
    if at_end:
        position = points[-1]
        rotation = math.degrees(end_tangent(path))
    else:
        position = points[0]
        # start plugs face away from the line, back toward where it came from
        rotation = math.degrees(start_tangent(path)) + 180.0
    return PlugPlacement(
        shape=shape,
        position=Point(position.x, position.y),
        rotation=_normalize_degrees(rotation),
    )


def _normalize_degrees(value: float) -> float:
    normalized = math.fmod(value, 360.0)
    if normalized > 180.0:
        normalized -= 360.0
    elif normalized <= -180.0:
        normalized += 360.0
    return normalized


def _safe_size(size: object) -> float:
    return float(size) if is_valid_plug_size(size) else 0.0
