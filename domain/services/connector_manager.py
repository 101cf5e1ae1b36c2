from __future__ import annotations

import logging
from collections.abc import Hashable, Iterator
from dataclasses import dataclass, field, replace
from typing import Any, Optional, Tuple

from domain.models import ConnectorGeometry, ConnectorOptions, ElementLayout, Point
from domain.ports.layout import LayoutProvider, Measurable
from domain.services.build_connector_geometry import BuildConnectorGeometry

logger = logging.getLogger(__name__)

_CacheKey = Tuple[ElementLayout, ElementLayout, str, Optional[Point]]


@dataclass(frozen=True)
class ConnectorEntry:
    connector_id: str
    start: Hashable
    end: Hashable
    options: ConnectorOptions = field(default_factory=ConnectorOptions)
    visible: bool = True


class ConnectorManager:
    """Registry of connectors that recomputes geometry only when inputs change.

    Endpoints are either handles understood by the layout provider passed to
    ``refresh_all`` or objects that measure themselves (anchors, bound elements).
    Hidden connectors keep their configuration but are skipped on refresh.
    """

    def __init__(self, builder: BuildConnectorGeometry | None = None) -> None:
        self._builder = builder or BuildConnectorGeometry()
        self._entries: dict[str, ConnectorEntry] = {}
        self._cache: dict[str, tuple[_CacheKey, ConnectorGeometry]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ConnectorEntry]:
        return iter(list(self._entries.values()))

    def add(
        self,
        connector_id: str,
        start: Hashable,
        end: Hashable,
        options: ConnectorOptions | None = None,
    ) -> ConnectorEntry:
        if connector_id in self._entries:
            logger.debug("Replacing connector %s", connector_id)
        entry = ConnectorEntry(
            connector_id=connector_id,
            start=start,
            end=end,
            options=options or ConnectorOptions(),
        )
        self._entries[connector_id] = entry
        self._cache.pop(connector_id, None)
        return entry

    def update(
        self,
        connector_id: str,
        *,
        start: Hashable | None = None,
        end: Hashable | None = None,
        **option_changes: Any,
    ) -> ConnectorEntry:
        entry = self._require(connector_id)
        options = entry.options
        if option_changes:
            options = options.merged(option_changes)
        updated = replace(
            entry,
            start=entry.start if start is None else start,
            end=entry.end if end is None else end,
            options=options,
        )
        self._entries[connector_id] = updated
        return updated

    def remove(self, connector_id: str) -> bool:
        self._cache.pop(connector_id, None)
        return self._entries.pop(connector_id, None) is not None

    def show(self, connector_id: str) -> ConnectorEntry:
        return self._set_visible(connector_id, True)

    def hide(self, connector_id: str) -> ConnectorEntry:
        return self._set_visible(connector_id, False)

    def get(self, connector_id: str) -> ConnectorEntry | None:
        return self._entries.get(connector_id)

    def has(self, connector_id: str) -> bool:
        return connector_id in self._entries

    def ids(self) -> list[str]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()
        self._cache.clear()

    def geometry(self, connector_id: str) -> ConnectorGeometry | None:
        cached = self._cache.get(connector_id)
        return cached[1] if cached else None

    def refresh(
        self,
        connector_id: str,
        layout_provider: LayoutProvider,
        container_origin: Point | None = None,
    ) -> ConnectorGeometry | None:
        entry = self._require(connector_id)
        if not entry.visible:
            return None
        start_layout = self._measure(entry.start, layout_provider)
        end_layout = self._measure(entry.end, layout_provider)
        if start_layout is None or end_layout is None:
            logger.debug("Connector %s waiting for layout", connector_id)
            return None

        key: _CacheKey = (start_layout, end_layout, entry.options.cache_key(), container_origin)
        cached = self._cache.get(connector_id)
        if cached is not None and cached[0] == key:
            return cached[1]
        geometry = self._builder.build_from_layouts(
            start_layout, end_layout, entry.options, container_origin
        )
        if geometry is None:
            self._cache.pop(connector_id, None)
            return None
        self._cache[connector_id] = (key, geometry)
        return geometry

    def refresh_all(
        self,
        layout_provider: LayoutProvider,
        container_origin: Point | None = None,
    ) -> dict[str, ConnectorGeometry | None]:
        return {
            connector_id: self.refresh(connector_id, layout_provider, container_origin)
            for connector_id, entry in list(self._entries.items())
            if entry.visible
        }

    def _set_visible(self, connector_id: str, visible: bool) -> ConnectorEntry:
        entry = replace(self._require(connector_id), visible=visible)
        self._entries[connector_id] = entry
        return entry

    def _require(self, connector_id: str) -> ConnectorEntry:
        entry = self._entries.get(connector_id)
        if entry is None:
            msg = f"Unknown connector: {connector_id}"
            raise KeyError(msg)
        return entry

    @staticmethod
    def _measure(target: Hashable, layout_provider: LayoutProvider) -> ElementLayout | None:
        if isinstance(target, Measurable):
            return target.measure_layout()
        return layout_provider.measure(target)
