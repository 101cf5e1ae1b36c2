from __future__ import annotations

from collections.abc import Hashable

from adapters.layout.static_layout import StaticLayoutProvider
from app.config import AppSettings
from domain.anchors import DEFAULT_AREA_SIZE, AreaAnchor, PointAnchor
from domain.models import ConnectorGeometry, ConnectorOptions
from domain.ports.layout import ContainerOffsetProvider, LayoutProvider
from domain.scene import AnchorInput, Endpoint, SceneDocument
from domain.services.build_connector_geometry import BuildConnectorGeometry
from domain.services.connector_manager import ConnectorManager


def build_geometry_builder(settings: AppSettings) -> BuildConnectorGeometry:
    return BuildConnectorGeometry(settings.engine.to_geometry_config())


def resolve_endpoint(endpoint: Endpoint, provider: StaticLayoutProvider) -> Hashable:
    if not isinstance(endpoint, AnchorInput):
        return endpoint
    element = provider.element(endpoint.element)
    if endpoint.is_area:
        return AreaAnchor(
            element,
            endpoint.x,
            endpoint.y,
            DEFAULT_AREA_SIZE if endpoint.width is None else endpoint.width,
            DEFAULT_AREA_SIZE if endpoint.height is None else endpoint.height,
        )
    return PointAnchor(element, endpoint.x, endpoint.y)


def build_scene_geometry(
    scene: SceneDocument,
    builder: BuildConnectorGeometry,
    defaults: ConnectorOptions | None = None,
) -> dict[str, ConnectorGeometry | None]:
    provider = StaticLayoutProvider.from_scene(scene)
    manager = ConnectorManager(builder)
    for connector in scene.connectors:
        manager.add(
            connector.id,
            resolve_endpoint(connector.start, provider),
            resolve_endpoint(connector.end, provider),
            connector.to_options(defaults),
        )
    return refresh_scene(manager, provider, provider)


def refresh_scene(
    manager: ConnectorManager,
    layouts: LayoutProvider,
    offsets: ContainerOffsetProvider,
) -> dict[str, ConnectorGeometry | None]:
    return manager.refresh_all(layouts, offsets.container_origin())
