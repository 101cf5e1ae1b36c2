from __future__ import annotations

import logging
from collections.abc import Hashable, Mapping

from domain.anchors import ProvidedElement
from domain.models import ElementLayout, Point
from domain.ports.layout import ContainerOffsetProvider, LayoutProvider
from domain.scene import SceneDocument

logger = logging.getLogger(__name__)


class StaticLayoutProvider(LayoutProvider, ContainerOffsetProvider):
    """In-memory layout and container offset provider keyed by element handle."""

    def __init__(
        self,
        layouts: Mapping[Hashable, ElementLayout] | None = None,
        container: Point | None = None,
    ) -> None:
        self._layouts: dict[Hashable, ElementLayout] = dict(layouts or {})
        self._container = container

    @classmethod
    def from_scene(cls, scene: SceneDocument) -> StaticLayoutProvider:
        return cls(scene.layouts(), scene.container_origin())

    def measure(self, handle: Hashable) -> ElementLayout | None:
        return self._layouts.get(handle)

    def container_origin(self, container: object = None) -> Point | None:
        return self._container

    def set_container(self, container: Point | None) -> None:
        self._container = container

    def set_layout(self, handle: Hashable, layout: ElementLayout) -> bool:
        current = self._layouts.get(handle)
        if current is not None and current.is_newer_than(layout):
            logger.debug("Ignoring stale layout for %r", handle)
            return False
        self._layouts[handle] = layout
        return True

    def remove(self, handle: Hashable) -> bool:
        return self._layouts.pop(handle, None) is not None

    def handles(self) -> list[Hashable]:
        return list(self._layouts)

    def element(self, handle: Hashable) -> ProvidedElement:
        return ProvidedElement(self, handle)
