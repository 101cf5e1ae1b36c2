from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

AUTO_COLOR = "auto"
DEFAULT_DASH_PATTERN = "5,5"
DEFAULT_SHADOW_COLOR = "rgba(0,0,0,0.3)"


class OutlineSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    color: str = AUTO_COLOR
    width: Optional[float] = Field(default=None, ge=0)
    size: Optional[float] = Field(default=None, ge=0)
    opacity: float = Field(default=1.0, ge=0, le=1)

    @property
    def thickness(self) -> float:
        if self.width is not None:
            return self.width
        return self.size or 0.0


class DropShadowSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    dx: float = 2.0
    dy: float = 2.0
    blur: float = Field(default=2.0, ge=0)
    color: str = DEFAULT_SHADOW_COLOR
    opacity: float = Field(default=0.3, ge=0, le=1)


def normalize_outline(value: object, default_color: str | None = None) -> OutlineSpec | None:
    if isinstance(value, OutlineSpec):
        if not value.enabled:
            return None
        if value.color == AUTO_COLOR and default_color:
            return value.model_copy(update={"color": default_color})
        return value
    if not value:
        return None
    color = default_color or AUTO_COLOR
    if value is True:
        return OutlineSpec(color=color, width=1.0, size=1.0)
    if not isinstance(value, Mapping):
        return None
    if value.get("enabled") is False:
        return None
    width = _non_negative(value.get("width"))
    size = _non_negative(value.get("size"))
    if width is None and size is None:
        width = size = 1.0
    raw_color = str(value.get("color") or "").strip()
    return OutlineSpec(
        enabled=True,
        color=color if raw_color in ("", AUTO_COLOR) else raw_color,
        width=size if width is None else width,
        size=width if size is None else size,
        opacity=_unit_interval(value.get("opacity"), 1.0),
    )


def normalize_drop_shadow(value: object) -> DropShadowSpec | None:
    if isinstance(value, DropShadowSpec):
        return value if value.enabled else None
    if not value:
        return None
    if value is True:
        return DropShadowSpec()
    if not isinstance(value, Mapping):
        return None
    if value.get("enabled") is False:
        return None
    defaults = DropShadowSpec()
    return DropShadowSpec(
        dx=_finite(value.get("dx"), defaults.dx),
        dy=_finite(value.get("dy"), defaults.dy),
        blur=max(_finite(value.get("blur"), defaults.blur), 0.0),
        color=str(value.get("color") or defaults.color),
        opacity=_unit_interval(value.get("opacity"), defaults.opacity),
    )


def dash_array(value: object) -> str | None:
    if isinstance(value, bool):
        return DEFAULT_DASH_PATTERN if value else None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, Mapping):
        pattern = value.get("pattern")
        if isinstance(pattern, str) and pattern.strip():
            return pattern.strip()
    return None


def _finite(raw: Any, default: float) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return default
    value = float(raw)
    return value if math.isfinite(value) else default


def _non_negative(raw: Any) -> float | None:
    if raw is None or isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    value = float(raw)
    if not math.isfinite(value):
        return None
    return max(value, 0.0)


def _unit_interval(raw: Any, default: float) -> float:
    value = _finite(raw, default)
    if value <= 0:
        # a zero opacity reads as "unset" in option payloads
        return default
    return min(value, 1.0)
