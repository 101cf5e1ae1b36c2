from __future__ import annotations

from collections.abc import Hashable
from typing import Protocol, runtime_checkable

from domain.models import ElementLayout, Point


class LayoutProvider(Protocol):
    def measure(self, handle: Hashable) -> ElementLayout | None:
        ...


class ContainerOffsetProvider(Protocol):
    def container_origin(self, container: Hashable | None = None) -> Point | None:
        ...


@runtime_checkable
class Measurable(Protocol):
    def measure_layout(self) -> ElementLayout | None:
        ...
