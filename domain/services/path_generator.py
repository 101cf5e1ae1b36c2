from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass

from domain.models import (
    DEFAULT_CURVATURE,
    PATH_ARC,
    PATH_FLUID,
    PATH_GRID,
    PATH_KINDS,
    PATH_MAGNET,
    PATH_STRAIGHT,
    PathCommand,
    PathResult,
    Point,
    SocketGravity,
)
from domain.services.geometry import angle, distance, is_finite_point, lerp
from domain.services.socket_resolver import gravity_vector

logger = logging.getLogger(__name__)

_CUBIC_SAMPLES = 32
_TWO_PI = 2 * math.pi


def normalize_path_kind(kind: object) -> str:
    name = str(kind or "").strip().lower()
    if name in PATH_KINDS:
        return name
    logger.debug("Unknown path kind %r, falling back to straight", kind)
    return PATH_STRAIGHT


def generate_path(
    start: Point,
    end: Point,
    kind: str = PATH_STRAIGHT,
    curvature: float = DEFAULT_CURVATURE,
) -> PathResult:
    path_kind = normalize_path_kind(kind)
    if not (is_finite_point(start) and is_finite_point(end)):
        logger.debug("Path endpoints are not finite: %s -> %s", start, end)
        return PathResult(kind=path_kind)
    if path_kind in {PATH_ARC, PATH_FLUID} and not math.isfinite(curvature):
        logger.debug("Curvature %r is not finite, drawing a straight path", curvature)
        return _straight_path(start, end, path_kind)

    if path_kind == PATH_ARC:
        return _arc_path(start, end, curvature)
    if path_kind == PATH_FLUID:
        return _fluid_path(start, end, curvature)
    if path_kind == PATH_MAGNET:
        return _magnet_path(start, end)
    if path_kind == PATH_GRID:
        return _grid_path(start, end)
    return _straight_path(start, end, PATH_STRAIGHT)


def generate_gravity_path(
    start: Point,
    end: Point,
    kind: str = PATH_STRAIGHT,
    curvature: float = DEFAULT_CURVATURE,
    start_gravity: SocketGravity | None = None,
    end_gravity: SocketGravity | None = None,
) -> PathResult:
    """Path that honours per-endpoint gravity hints where it can.

    Only ``fluid`` paths with an explicit ``(x, y)`` gravity vector are bent by
    it: the matching control point moves to ``endpoint + vector``. Every other
    kind, and ``"auto"`` or scalar gravities, yield the base path unchanged.
    """
    base = generate_path(start, end, kind, curvature)
    if base.kind != PATH_FLUID or len(base.commands) != 2 or base.commands[1].command != "C":
        return base
    start_vector = gravity_vector(start_gravity)
    end_vector = gravity_vector(end_gravity)
    if start_vector is None and end_vector is None:
        return base

    cp1x, cp1y, cp2x, cp2y, end_x, end_y = base.commands[1].args
    if start_vector is not None:
        cp1x, cp1y = start.x + start_vector[0], start.y + start_vector[1]
    if end_vector is not None:
        cp2x, cp2y = end.x + end_vector[0], end.y + end_vector[1]
    return PathResult(
        kind=PATH_FLUID,
        commands=(base.commands[0], PathCommand("C", (cp1x, cp1y, cp2x, cp2y, end_x, end_y))),
    )


def start_tangent(path: PathResult) -> float:
    """Direction of travel where the path leaves its first point, in radians."""
    for segment in _segments(path):
        direction = _segment_tangent(segment, at_end=False)
        if direction is not None:
            return direction
    return 0.0


def end_tangent(path: PathResult) -> float:
    """Direction of travel where the path arrives at its last point, in radians."""
    for segment in reversed(list(_segments(path))):
        direction = _segment_tangent(segment, at_end=True)
        if direction is not None:
            return direction
    return 0.0


def path_length(path: PathResult) -> float:
    return sum(_segment_length(segment) for segment in _segments(path))


def point_at(path: PathResult, fraction: float) -> Point | None:
    points = path.points()
    if not points:
        return None
    if not math.isfinite(fraction):
        fraction = 0.5
    fraction = min(max(fraction, 0.0), 1.0)
    segments = list(_segments(path))
    lengths = [_segment_length(segment) for segment in segments]
    total = sum(lengths)
    if total == 0:
        return points[0]

    remaining = total * fraction
    for segment, length in zip(segments, lengths):
        if length == 0:
            continue
        if remaining <= length:
            return _segment_point(segment, remaining / length)
        remaining -= length
    return points[-1]


def _straight_path(start: Point, end: Point, kind: str) -> PathResult:
    return PathResult(
        kind=kind,
        commands=(PathCommand("M", (start.x, start.y)), PathCommand("L", (end.x, end.y))),
    )


def _arc_path(start: Point, end: Point, curvature: float) -> PathResult:
    chord = distance(start, end)
    if chord == 0 or curvature == 0:
        return _straight_path(start, end, PATH_ARC)
    radius = chord * abs(curvature)
    # sweep=1 bows to the left of travel on a y-down screen; negative curvature mirrors it
    sweep = 1.0 if curvature > 0 else 0.0
    return PathResult(
        kind=PATH_ARC,
        commands=(
            PathCommand("M", (start.x, start.y)),
            PathCommand("A", (radius, radius, 0.0, 0.0, sweep, end.x, end.y)),
        ),
    )


def _fluid_path(start: Point, end: Point, curvature: float) -> PathResult:
    dx = end.x - start.x
    dy = end.y - start.y
    chord = math.hypot(dx, dy)
    perp_x = perp_y = 0.0
    if chord > 0:
        control_distance = chord * curvature
        perp_x = dy / chord * control_distance
        perp_y = -dx / chord * control_distance

    cp1 = (start.x + dx * 0.25 + perp_x, start.y + dy * 0.25 + perp_y)
    cp2 = (start.x + dx * 0.75 + perp_x, start.y + dy * 0.75 + perp_y)
    return PathResult(
        kind=PATH_FLUID,
        commands=(
            PathCommand("M", (start.x, start.y)),
            PathCommand("C", (*cp1, *cp2, end.x, end.y)),
        ),
    )


def _magnet_path(start: Point, end: Point) -> PathResult:
    mid_x = (start.x + end.x) / 2
    mid_y = (start.y + end.y) / 2
    if abs(end.x - start.x) > abs(end.y - start.y):
        corners = ((mid_x, start.y), (mid_x, end.y))
    else:
        corners = ((start.x, mid_y), (end.x, mid_y))
    return _polyline(PATH_MAGNET, start, corners, end)


def _grid_path(start: Point, end: Point) -> PathResult:
    mid_x = start.x + (end.x - start.x) * 0.5
    return _polyline(PATH_GRID, start, ((mid_x, start.y), (mid_x, end.y)), end)


def _polyline(
    kind: str,
    start: Point,
    corners: tuple[tuple[float, float], ...],
    end: Point,
) -> PathResult:
    commands = [PathCommand("M", (start.x, start.y))]
    commands.extend(PathCommand("L", corner) for corner in corners)
    commands.append(PathCommand("L", (end.x, end.y)))
    return PathResult(kind=kind, commands=tuple(commands))


@dataclass(frozen=True)
class _Segment:
    kind: str  # line | cubic | arc
    start: Point
    end: Point
    controls: tuple[Point, ...] = ()
    radius: float = 0.0
    sweep: bool = True


@dataclass(frozen=True)
class _ArcGeometry:
    center: Point
    radius: float
    start_angle: float
    delta: float


def _segments(path: PathResult) -> Iterator[_Segment]:
    current: Point | None = None
    subpath_start: Point | None = None
    for command in path.commands:
        name = command.command.upper()
        if name == "Z":
            if current is not None and subpath_start is not None:
                yield _Segment("line", current, subpath_start)
                current = subpath_start
            continue
        target = command.end_point()
        if target is None:
            continue
        if name == "M" or current is None:
            current = subpath_start = target
            continue
        if name == "C":
            controls = (
                Point(command.args[0], command.args[1]),
                Point(command.args[2], command.args[3]),
            )
            yield _Segment("cubic", current, target, controls=controls)
        elif name == "A":
            yield _Segment(
                "arc", current, target, radius=abs(command.args[0]), sweep=command.args[4] > 0
            )
        else:
            yield _Segment("line", current, target)
        current = target


def _arc_geometry(segment: _Segment) -> _ArcGeometry | None:
    chord = distance(segment.start, segment.end)
    if chord == 0 or segment.radius == 0:
        return None
    half = chord / 2
    radius = max(segment.radius, half)
    height = math.sqrt(max(radius * radius - half * half, 0.0))
    ux = (segment.end.x - segment.start.x) / chord
    uy = (segment.end.y - segment.start.y) / chord
    left_x, left_y = uy, -ux
    side = -1.0 if segment.sweep else 1.0
    mid = lerp(segment.start, segment.end, 0.5)
    center = Point(mid.x + left_x * height * side, mid.y + left_y * height * side)

    start_angle = angle(center, segment.start)
    end_angle = angle(center, segment.end)
    if segment.sweep:
        delta = (end_angle - start_angle) % _TWO_PI
    else:
        delta = -((start_angle - end_angle) % _TWO_PI)
    return _ArcGeometry(center=center, radius=radius, start_angle=start_angle, delta=delta)


def _segment_tangent(segment: _Segment, at_end: bool) -> float | None:
    if segment.kind == "cubic":
        if at_end:
            candidates = (segment.controls[1], segment.controls[0], segment.start)
            anchor = next((p for p in candidates if p != segment.end), None)
            return None if anchor is None else angle(anchor, segment.end)
        candidates = (segment.controls[0], segment.controls[1], segment.end)
        anchor = next((p for p in candidates if p != segment.start), None)
        return None if anchor is None else angle(segment.start, anchor)
    if segment.kind == "arc":
        geometry = _arc_geometry(segment)
        if geometry is None:
            return _line_tangent(segment)
        theta = geometry.start_angle + (geometry.delta if at_end else 0.0)
        if geometry.delta >= 0:
            return math.atan2(math.cos(theta), -math.sin(theta))
        return math.atan2(-math.cos(theta), math.sin(theta))
    return _line_tangent(segment)


def _line_tangent(segment: _Segment) -> float | None:
    if segment.start == segment.end:
        return None
    return angle(segment.start, segment.end)


def _segment_length(segment: _Segment) -> float:
    if segment.kind == "arc":
        geometry = _arc_geometry(segment)
        if geometry is not None:
            return geometry.radius * abs(geometry.delta)
    if segment.kind == "cubic":
        total = 0.0
        previous = segment.start
        for step in range(1, _CUBIC_SAMPLES + 1):
            point = _cubic_point(segment, step / _CUBIC_SAMPLES)
            total += distance(previous, point)
            previous = point
        return total
    return distance(segment.start, segment.end)


def _segment_point(segment: _Segment, t: float) -> Point:
    if segment.kind == "arc":
        geometry = _arc_geometry(segment)
        if geometry is not None:
            theta = geometry.start_angle + geometry.delta * t
            return Point(
                geometry.center.x + geometry.radius * math.cos(theta),
                geometry.center.y + geometry.radius * math.sin(theta),
            )
    if segment.kind == "cubic":
        return _cubic_point(segment, t)
    return lerp(segment.start, segment.end, t)


def _cubic_point(segment: _Segment, t: float) -> Point:
    c1, c2 = segment.controls
    u = 1 - t
    a = u * u * u
    b = 3 * u * u * t
    c = 3 * u * t * t
    d = t * t * t
    return Point(
        a * segment.start.x + b * c1.x + c * c2.x + d * segment.end.x,
        a * segment.start.y + b * c1.y + c * c2.y + d * segment.end.y,
    )
