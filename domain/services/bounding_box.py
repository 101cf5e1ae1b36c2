from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from domain.models import DEFAULT_CURVATURE, PATH_ARC, BoundingBox, Point
from domain.services.geometry import is_finite_point
from domain.stroke_options import DropShadowSpec, OutlineSpec

logger = logging.getLogger(__name__)

ARC_PADDING = 50.0
BASE_PADDING = 20.0

ZERO_BOX = BoundingBox(0.0, 0.0, 0.0, 0.0)


def path_padding(
    kind: str,
    *,
    arc_padding: float = ARC_PADDING,
    base_padding: float = BASE_PADDING,
) -> float:
    return arc_padding if str(kind or "").strip().lower() == PATH_ARC else base_padding


def bounding_box(
    start: Point,
    end: Point,
    kind: str,
    curvature: float = DEFAULT_CURVATURE,
    stroke_width: float = 2.0,
    outline: OutlineSpec | None = None,
    *,
    shadow: DropShadowSpec | None = None,
    plug_outlines: Sequence[OutlineSpec | None] = (),
    arc_padding: float = ARC_PADDING,
    base_padding: float = BASE_PADDING,
) -> BoundingBox:
    """Padded viewport that holds the stroke, its outlines and its drop shadow.

    Only the thickest of the line and plug outlines widens the box.

    Curvature is accepted for call-site symmetry with the path generator; arc
    bows are covered by the fixed arc padding rather than measured.
    """
    if not (is_finite_point(start) and is_finite_point(end)):
        logger.debug("Bounding box endpoints are not finite: %s -> %s", start, end)
        return ZERO_BOX

    stroke = _non_negative(stroke_width)
    padding = _non_negative(path_padding(kind, arc_padding=arc_padding, base_padding=base_padding))
    grow = stroke + padding + max(
        (
            _non_negative(item.thickness)
            for item in (outline, *plug_outlines)
            if item is not None and item.enabled
        ),
        default=0.0,
    )

    min_x = min(start.x, end.x) - grow
    min_y = min(start.y, end.y) - grow
    max_x = max(start.x, end.x) + grow
    max_y = max(start.y, end.y) + grow

    if shadow is not None and shadow.enabled:
        dx = shadow.dx if math.isfinite(shadow.dx) else 0.0
        dy = shadow.dy if math.isfinite(shadow.dy) else 0.0
        blur = _non_negative(shadow.blur)
        min_x = min(min_x, min_x + dx - blur)
        min_y = min(min_y, min_y + dy - blur)
        max_x = max(max_x, max_x + dx + blur)
        max_y = max(max_y, max_y + dy + blur)

    return BoundingBox(
        x=min_x,
        y=min_y,
        width=max(max_x - min_x, 0.0),
        height=max(max_y - min_y, 0.0),
    )


def _non_negative(value: float) -> float:
    if value is None or not math.isfinite(value):
        return 0.0
    return max(float(value), 0.0)
