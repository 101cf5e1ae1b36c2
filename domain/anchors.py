from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass

from domain.models import ElementLayout
from domain.ports.layout import LayoutProvider, Measurable

DEFAULT_AREA_SIZE = 100.0


@dataclass(frozen=True)
class ProvidedElement:
    """Opaque handle bound to the provider that knows how to measure it."""

    provider: LayoutProvider
    handle: Hashable

    def measure_layout(self) -> ElementLayout | None:
        return self.provider.measure(self.handle)


@dataclass(frozen=True)
class PointAnchor:
    target: Measurable
    x: float = 0.0
    y: float = 0.0

    def measure_layout(self) -> ElementLayout | None:
        layout = self.target.measure_layout()
        if layout is None:
            return None
        return ElementLayout(
            width=0.0,
            height=0.0,
            origin_x=layout.origin_x + self.x,
            origin_y=layout.origin_y + self.y,
            measured_at=layout.measured_at,
            is_point=True,
        )


@dataclass(frozen=True)
class AreaAnchor:
    target: Measurable
    x: float = 0.0
    y: float = 0.0
    width: float = DEFAULT_AREA_SIZE
    height: float = DEFAULT_AREA_SIZE

    def measure_layout(self) -> ElementLayout | None:
        layout = self.target.measure_layout()
        if layout is None:
            return None
        return ElementLayout(
            width=self.width,
            height=self.height,
            origin_x=layout.origin_x + self.x,
            origin_y=layout.origin_y + self.y,
            measured_at=layout.measured_at,
        )
