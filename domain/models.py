from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from domain.stroke_options import (
    DropShadowSpec,
    OutlineSpec,
    dash_array,
    normalize_drop_shadow,
    normalize_outline,
)

SocketPosition = Literal[
    "auto",
    "center",
    "top",
    "bottom",
    "left",
    "right",
    "top_left",
    "top_right",
    "bottom_left",
    "bottom_right",
]
PathKind = Literal["straight", "arc", "fluid", "magnet", "grid"]
SocketGravity = Union[Literal["auto"], float, Tuple[float, float]]

SOCKET_AUTO = "auto"
SOCKET_CENTER = "center"
SOCKET_POSITIONS: Tuple[str, ...] = (
    "auto",
    "center",
    "top",
    "bottom",
    "left",
    "right",
    "top_left",
    "top_right",
    "bottom_left",
    "bottom_right",
)

PATH_STRAIGHT = "straight"
PATH_ARC = "arc"
PATH_FLUID = "fluid"
PATH_MAGNET = "magnet"
PATH_GRID = "grid"
PATH_KINDS: Tuple[str, ...] = (PATH_STRAIGHT, PATH_ARC, PATH_FLUID, PATH_MAGNET, PATH_GRID)

PLUG_NONE = "none"
PLUG_BEHIND = "behind"
PLUG_KINDS: Tuple[str, ...] = (
    "none",
    "behind",
    "arrow1",
    "arrow2",
    "arrow3",
    "disc",
    "square",
    "diamond",
    "hand",
    "crosshair",
)

LABEL_SLOTS: Tuple[str, ...] = ("start", "middle", "end", "caption", "path")

DEFAULT_CURVATURE = 0.2
DEFAULT_STROKE_WIDTH = 2.0
DEFAULT_PLUG_SIZE = 10.0
DEFAULT_COLOR = "#ff6b6b"


def format_number(value: float) -> str:
    rounded = round(float(value), 4)
    if rounded == 0:
        return "0"
    if rounded.is_integer():
        return str(int(rounded))
    return f"{rounded:.4f}".rstrip("0").rstrip(".")


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class ElementLayout:
    width: float
    height: float
    origin_x: float
    origin_y: float
    x: float = 0.0
    y: float = 0.0
    measured_at: float = 0.0
    is_point: bool = False

    @property
    def is_valid(self) -> bool:
        return self.width > 0 and self.height > 0

    @property
    def is_reliable(self) -> bool:
        return self.is_point or self.is_valid

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    def is_newer_than(self, other: ElementLayout | None) -> bool:
        return other is None or self.measured_at > other.measured_at

    def to_dict(self) -> dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "origin_x": self.origin_x,
            "origin_y": self.origin_y,
            "measured_at": self.measured_at,
            "is_point": self.is_point,
        }


@dataclass(frozen=True)
class BoundingBox:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, point: Point) -> bool:
        return self.x <= point.x <= self.right and self.y <= point.y <= self.bottom

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class ConnectionPoints:
    start: Point
    end: Point
    start_socket: str = SOCKET_CENTER
    end_socket: str = SOCKET_CENTER
    reliable: bool = True


@dataclass(frozen=True)
class PathCommand:
    command: str  # one of M, L, C, A, Z
    args: Tuple[float, ...] = ()

    def end_point(self) -> Point | None:
        if len(self.args) < 2:
            return None
        return Point(self.args[-2], self.args[-1])

    def to_svg(self) -> str:
        if not self.args:
            return self.command
        return " ".join([self.command, *(format_number(arg) for arg in self.args)])


def _commands_to_svg(commands: Tuple[PathCommand, ...]) -> str:
    return " ".join(command.to_svg() for command in commands)


@dataclass(frozen=True)
class PathResult:
    kind: str
    commands: Tuple[PathCommand, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.commands

    def points(self) -> list[Point]:
        return [point for point in (command.end_point() for command in self.commands) if point]

    def to_svg(self) -> str:
        return _commands_to_svg(self.commands)


@dataclass(frozen=True)
class ShapeResult:
    kind: str
    size: float
    commands: Tuple[PathCommand, ...] = ()
    closed: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.commands

    def to_svg(self) -> str:
        return _commands_to_svg(self.commands)


@dataclass(frozen=True)
class PlugPlacement:
    shape: ShapeResult
    position: Point
    rotation: float  # degrees, clockwise on screen

    @property
    def transform(self) -> str:
        return (
            f"translate({format_number(self.position.x)}, {format_number(self.position.y)}) "
            f"rotate({format_number(self.rotation)})"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.shape.kind,
            "size": self.shape.size,
            "d": self.shape.to_svg(),
            "closed": self.shape.closed,
            "position": self.position.to_dict(),
            "rotation": self.rotation,
            "transform": self.transform,
        }


@dataclass(frozen=True)
class LabelPlacement:
    slot: str
    text: str
    position: Point

    def to_dict(self) -> dict[str, Any]:
        return {"slot": self.slot, "text": self.text, "position": self.position.to_dict()}


class LabelSpec(BaseModel):
    text: str
    offset_x: float = 0.0
    offset_y: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def accept_plain_text(cls, value: object) -> object:
        if isinstance(value, str):
            return {"text": value}
        if isinstance(value, dict) and "offset" in value:
            payload = dict(value)
            offset = payload.pop("offset")
            if isinstance(offset, dict):
                payload.setdefault("offset_x", offset.get("x", 0.0))
                payload.setdefault("offset_y", offset.get("y", 0.0))
            elif isinstance(offset, (list, tuple)) and len(offset) == 2:
                payload.setdefault("offset_x", offset[0])
                payload.setdefault("offset_y", offset[1])
            return payload
        return value


class ConnectorOptions(BaseModel):
    path: str = PATH_STRAIGHT
    curvature: float = DEFAULT_CURVATURE
    start_socket: str = SOCKET_CENTER
    end_socket: str = SOCKET_CENTER
    start_plug: str = PLUG_NONE
    end_plug: str = "arrow1"
    start_plug_size: float = DEFAULT_PLUG_SIZE
    end_plug_size: float = DEFAULT_PLUG_SIZE
    stroke_width: float = DEFAULT_STROKE_WIDTH
    color: str = DEFAULT_COLOR
    outline: Optional[OutlineSpec] = None
    start_plug_outline: Optional[OutlineSpec] = None
    end_plug_outline: Optional[OutlineSpec] = None
    drop_shadow: Optional[DropShadowSpec] = None
    dash: Optional[str] = None
    start_socket_gravity: Optional[SocketGravity] = None
    end_socket_gravity: Optional[SocketGravity] = None
    labels: Dict[str, LabelSpec] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def unpack_path_configuration(cls, value: object) -> object:
        # {"path": {"type": "arc", "curvature": 0.4}} is accepted alongside plain kinds
        if isinstance(value, dict) and isinstance(value.get("path"), Mapping):
            payload = dict(value)
            path_config = payload.pop("path")
            payload["path"] = path_config.get("type", PATH_STRAIGHT)
            if "curvature" in path_config:
                payload.setdefault("curvature", path_config["curvature"])
            return payload
        return value

    @field_validator("path", "start_socket", "end_socket", "start_plug", "end_plug", mode="before")
    @classmethod
    def normalize_kind(cls, value: object) -> str:
        return str(value or "").strip().lower()

    @field_validator("outline", "start_plug_outline", "end_plug_outline", mode="before")
    @classmethod
    def normalize_outline_value(cls, value: object) -> OutlineSpec | None:
        return normalize_outline(value)

    @field_validator("drop_shadow", mode="before")
    @classmethod
    def normalize_drop_shadow_value(cls, value: object) -> DropShadowSpec | None:
        return normalize_drop_shadow(value)

    @field_validator("dash", mode="before")
    @classmethod
    def normalize_dash_value(cls, value: object) -> str | None:
        return dash_array(value)

    @field_validator("labels", mode="after")
    @classmethod
    def ensure_known_label_slots(cls, labels: Dict[str, LabelSpec]) -> Dict[str, LabelSpec]:
        for slot in labels:
            if slot not in LABEL_SLOTS:
                msg = f"Unknown label slot: {slot}"
                raise ValueError(msg)
        return labels

    def merged(self, overrides: Mapping[str, Any]) -> ConnectorOptions:
        payload = self.model_dump()
        path_config = overrides.get("path")
        if isinstance(path_config, Mapping) and "curvature" in path_config:
            payload.pop("curvature", None)
        payload.update(overrides)
        return ConnectorOptions.model_validate(payload)

    def cache_key(self) -> str:
        return self.model_dump_json()


@dataclass(frozen=True)
class ConnectorGeometry:
    start: Point
    end: Point
    start_socket: str
    end_socket: str
    path: PathResult
    bounding_box: BoundingBox
    stroke_width: float
    start_plug: PlugPlacement | None = None
    end_plug: PlugPlacement | None = None
    behind_plugs: Tuple[PlugPlacement, ...] = ()
    labels: Tuple[LabelPlacement, ...] = ()
    dash_array: str | None = None
    outline: OutlineSpec | None = None
    drop_shadow: DropShadowSpec | None = None
    reliable: bool = True
    color: str = DEFAULT_COLOR
    start_plug_outline: OutlineSpec | None = None
    end_plug_outline: OutlineSpec | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
            "start_socket": self.start_socket,
            "end_socket": self.end_socket,
            "path": {"kind": self.path.kind, "d": self.path.to_svg()},
            "bounding_box": self.bounding_box.to_dict(),
            "stroke_width": self.stroke_width,
            "color": self.color,
            "start_plug": self.start_plug.to_dict() if self.start_plug else None,
            "end_plug": self.end_plug.to_dict() if self.end_plug else None,
            "start_plug_outline": _outline_dict(self.start_plug_outline),
            "end_plug_outline": _outline_dict(self.end_plug_outline),
            "behind_plugs": [plug.to_dict() for plug in self.behind_plugs],
            "labels": [label.to_dict() for label in self.labels],
            "dash_array": self.dash_array,
            "outline": _outline_dict(self.outline),
            "drop_shadow": self.drop_shadow.model_dump() if self.drop_shadow else None,
            "reliable": self.reliable,
        }


def _outline_dict(outline: OutlineSpec | None) -> dict[str, Any] | None:
    return outline.model_dump() if outline is not None else None


def is_finite_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)
