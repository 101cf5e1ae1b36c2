from __future__ import annotations

import pytest
from pydantic import ValidationError

from domain.models import ConnectorOptions, LabelSpec
from domain.stroke_options import (
    DropShadowSpec,
    OutlineSpec,
    dash_array,
    normalize_drop_shadow,
    normalize_outline,
)


@pytest.mark.parametrize("value", [None, False, 0, "", {"enabled": False}, "yes"])
def test_outline_absent_or_disabled(value: object) -> None:
    assert normalize_outline(value) is None


def test_outline_true_uses_defaults() -> None:
    assert normalize_outline(True) == OutlineSpec(color="auto", width=1, size=1, opacity=1)
    assert normalize_outline(True, default_color="#123456").color == "#123456"


def test_outline_width_and_size_fall_back_to_each_other() -> None:
    from_size = normalize_outline({"size": 3})
    from_width = normalize_outline({"width": 4, "color": "red"})
    assert from_size is not None
    assert (from_size.width, from_size.size) == (3, 3)
    assert from_width is not None
    assert (from_width.width, from_width.size, from_width.color) == (4, 4, "red")


def test_outline_keeps_explicit_zero_width() -> None:
    outline = normalize_outline({"width": 0, "size": 3})
    assert outline is not None
    assert (outline.width, outline.size, outline.thickness) == (0, 3, 0)


def test_outline_auto_color_follows_default_color() -> None:
    outline = normalize_outline({"width": 2, "color": "auto"}, default_color="#00ff00")
    assert outline is not None
    assert outline.color == "#00ff00"
    assert normalize_outline(OutlineSpec(width=2), "#00ff00") == OutlineSpec(
        color="#00ff00", width=2
    )
    assert normalize_outline(OutlineSpec(color="red"), "#00ff00").color == "red"


@pytest.mark.parametrize(("opacity", "expected"), [(0.4, 0.4), (0, 1.0), (7, 1.0), (None, 1.0)])
def test_outline_opacity_stays_in_unit_interval(opacity: object, expected: float) -> None:
    outline = normalize_outline({"opacity": opacity})
    assert outline is not None
    assert outline.opacity == expected


def test_drop_shadow_normalization() -> None:
    assert normalize_drop_shadow(None) is None
    assert normalize_drop_shadow(True) == DropShadowSpec()
    shadow = normalize_drop_shadow({"dx": 5, "blur": -3, "color": "#000"})
    assert shadow is not None
    assert (shadow.dx, shadow.dy, shadow.blur, shadow.color) == (5, 2, 0, "#000")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (True, "5,5"),
        (False, None),
        ("4 2", "4 2"),
        ("  ", None),
        ({"pattern": "1,3"}, "1,3"),
        ({"animation": True}, None),
        (3, None),
    ],
)
def test_dash_array(value: object, expected: str | None) -> None:
    assert dash_array(value) == expected


def test_connector_options_defaults() -> None:
    options = ConnectorOptions()
    assert options.path == "straight"
    assert options.curvature == 0.2
    assert (options.start_plug, options.end_plug) == ("none", "arrow1")
    assert options.outline is None
    assert options.labels == {}


def test_connector_options_accepts_nested_path_configuration() -> None:
    options = ConnectorOptions.model_validate(
        {"path": {"type": "ARC", "curvature": 0.4}, "end_plug": "Disc", "dash": True}
    )
    assert options.path == "arc"
    assert options.curvature == 0.4
    assert options.end_plug == "disc"
    assert options.dash == "5,5"


def test_connector_options_normalize_outline_and_shadow() -> None:
    options = ConnectorOptions.model_validate(
        {"outline": {"width": 2}, "drop_shadow": True, "start_plug_outline": False}
    )
    assert options.outline == OutlineSpec(width=2, size=2)
    assert options.drop_shadow == DropShadowSpec()
    assert options.start_plug_outline is None


def test_labels_accept_plain_text_and_offsets() -> None:
    options = ConnectorOptions.model_validate(
        {
            "labels": {
                "middle": "hello",
                "caption": {"text": "above", "offset": {"x": 3, "y": -2}},
                "end": {"text": "tail", "offset": [1, 1]},
            }
        }
    )
    assert options.labels["middle"] == LabelSpec(text="hello")
    assert (options.labels["caption"].offset_x, options.labels["caption"].offset_y) == (3, -2)
    assert options.labels["end"].offset_x == 1


def test_unknown_label_slot_is_rejected() -> None:
    with pytest.raises(ValidationError, match="Unknown label slot"):
        ConnectorOptions.model_validate({"labels": {"sideways": "x"}})


def test_cache_key_tracks_option_changes() -> None:
    assert ConnectorOptions().cache_key() == ConnectorOptions().cache_key()
    assert ConnectorOptions().cache_key() != ConnectorOptions(path="arc").cache_key()
