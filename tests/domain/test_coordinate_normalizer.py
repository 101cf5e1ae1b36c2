from __future__ import annotations

import pytest

from domain.models import ConnectionPoints, Point
from domain.services.coordinate_normalizer import to_absolute, to_container_relative


def test_both_endpoints_shift_together() -> None:
    points = ConnectionPoints(start=Point(110, 220), end=Point(300, 40))
    relative = to_container_relative(points, Point(100, 200))
    assert relative.start == Point(10, 20)
    assert relative.end == Point(200, -160)
    assert relative.start_socket == points.start_socket


def test_missing_container_returns_pair_unchanged() -> None:
    points = ConnectionPoints(start=Point(1, 2), end=Point(3, 4))
    assert to_container_relative(points, None) is points
    assert to_absolute(points, None) is points


@pytest.mark.parametrize("origin", [Point(0, 0), Point(13.7, -42.1), Point(-1e5, 3e4)])
def test_round_trip_restores_absolute_points(origin: Point) -> None:
    points = ConnectionPoints(start=Point(12.5, 99.25), end=Point(-7.75, 0.1))
    restored = to_absolute(to_container_relative(points, origin), origin)
    assert restored.start.x == pytest.approx(points.start.x)
    assert restored.start.y == pytest.approx(points.start.y)
    assert restored.end.x == pytest.approx(points.end.x)
    assert restored.end.y == pytest.approx(points.end.y)
