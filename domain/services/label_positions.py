from __future__ import annotations

from collections.abc import Mapping

from domain.models import LABEL_SLOTS, LabelPlacement, LabelSpec, PathResult, Point
from domain.services.path_generator import point_at

CAPTION_OFFSET = 20.0

# slot -> (fraction along the path, vertical offset)
_SLOT_ANCHORS: dict[str, tuple[float, float]] = {
    "start": (0.1, 0.0),
    "middle": (0.5, 0.0),
    "end": (0.9, 0.0),
    "caption": (0.5, -CAPTION_OFFSET),
    "path": (0.5, CAPTION_OFFSET),
}


def label_positions(
    path: PathResult,
    labels: Mapping[str, LabelSpec],
) -> tuple[LabelPlacement, ...]:
    placements: list[LabelPlacement] = []
    for slot in LABEL_SLOTS:
        spec = labels.get(slot)
        if spec is None or not spec.text:
            continue
        fraction, lift = _SLOT_ANCHORS[slot]
        anchor = point_at(path, fraction)
        if anchor is None:
            continue
        placements.append(
            LabelPlacement(
                slot=slot,
                text=spec.text,
                position=Point(anchor.x + spec.offset_x, anchor.y + lift + spec.offset_y),
            )
        )
    return tuple(placements)
