from __future__ import annotations

import math

import pytest

from domain.models import PLUG_KINDS, Point
from domain.services.path_generator import generate_path
from domain.services.plug_shapes import (
    MAX_PLUG_SIZE,
    PLUG_SHAPE_BUILDERS,
    generate_behind_shape,
    generate_plug_shape,
    is_valid_plug_size,
    place_behind_plug,
    place_plug,
)

DRAWN_KINDS = [kind for kind in PLUG_KINDS if kind not in {"none", "behind"}]


def test_square_is_a_closed_centered_square() -> None:
    shape = generate_plug_shape("square", 10)
    assert shape.closed
    assert shape.to_svg() == "M -5 -5 L 5 -5 L 5 5 L -5 5 Z"


def test_arrow1_points_along_positive_x() -> None:
    shape = generate_plug_shape("arrow1", 10)
    assert shape.to_svg() == "M -5 -5 L 5 0 L -5 5 Z"


def test_disc_is_two_opposing_arcs() -> None:
    shape = generate_plug_shape("disc", 10)
    assert shape.to_svg() == "M -5 0 A 5 5 0 1 0 5 0 A 5 5 0 1 0 -5 0 Z"


def test_crosshair_is_open() -> None:
    shape = generate_plug_shape("crosshair", 8)
    assert not shape.closed
    assert shape.to_svg() == "M 0 -4 L 0 4 M -4 0 L 4 0"


def test_chevrons_deepen_with_style() -> None:
    arrow2 = generate_plug_shape("arrow2", 10).commands
    arrow3 = generate_plug_shape("arrow3", 10).commands
    assert arrow2[2].args == pytest.approx((-4, 0))
    assert arrow3[2].args == pytest.approx((-3, 0))


@pytest.mark.parametrize("kind", DRAWN_KINDS)
@pytest.mark.parametrize("size", [0.5, 10, MAX_PLUG_SIZE])
def test_every_named_kind_has_finite_geometry(kind: str, size: float) -> None:
    shape = generate_plug_shape(kind, size)
    assert not shape.is_empty
    for command in shape.commands:
        assert all(math.isfinite(arg) for arg in command.args)
    assert "nan" not in shape.to_svg().lower()
    assert "inf" not in shape.to_svg().lower()


@pytest.mark.parametrize("size", [0, -1, 100.5, math.nan, math.inf, True])
def test_invalid_sizes_give_empty_geometry(size: float) -> None:
    assert not is_valid_plug_size(size)
    assert generate_plug_shape("arrow1", size).is_empty
    assert generate_plug_shape("arrow1", size).to_svg() == ""


@pytest.mark.parametrize("kind", ["", "none", "behind", "star", None])
def test_unknown_or_invisible_kinds_are_empty(kind: str) -> None:
    assert generate_plug_shape(kind, 10).is_empty


def test_builders_cover_every_drawn_kind() -> None:
    assert set(PLUG_SHAPE_BUILDERS) == set(DRAWN_KINDS)


def test_behind_shape_is_a_centered_square() -> None:
    shape = generate_behind_shape(6)
    assert shape.kind == "behind"
    assert shape.to_svg() == "M -3 -3 L 3 -3 L 3 3 L -3 3 Z"
    assert generate_behind_shape(0).is_empty


def test_end_plug_follows_the_end_tangent() -> None:
    path = generate_path(Point(0, 0), Point(0, 100), "straight")
    placement = place_plug(path, "arrow1", 10, at_end=True)
    assert placement is not None
    assert placement.position == Point(0, 100)
    assert placement.rotation == pytest.approx(90)
    assert placement.transform == "translate(0, 100) rotate(90)"


def test_start_plug_faces_back_along_the_line() -> None:
    horizontal = generate_path(Point(0, 0), Point(100, 0), "straight")
    start = place_plug(horizontal, "arrow1", 10, at_end=False)
    assert start is not None
    assert start.position == Point(0, 0)
    assert start.rotation == pytest.approx(180)

    downward = generate_path(Point(0, 0), Point(0, 100), "straight")
    start = place_plug(downward, "arrow1", 10, at_end=False)
    assert start is not None
    assert start.rotation == pytest.approx(-90)


def test_arc_end_plug_uses_the_local_tangent() -> None:
    path = generate_path(Point(0, 50), Point(100, 50), "arc", 0.25)
    placement = place_plug(path, "arrow2", 10, at_end=True)
    assert placement is not None
    assert placement.rotation == pytest.approx(90)


def test_no_placement_without_geometry() -> None:
    path = generate_path(Point(0, 0), Point(100, 0), "straight")
    assert place_plug(path, "none", 10, at_end=True) is None
    assert place_plug(path, "arrow1", 0, at_end=True) is None
    assert place_behind_plug(path, 10, at_end=True) is not None
