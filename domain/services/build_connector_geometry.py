from __future__ import annotations

import logging
from dataclasses import dataclass

from domain.models import (
    PLUG_BEHIND,
    SOCKET_AUTO,
    SOCKET_CENTER,
    ConnectionPoints,
    ConnectorGeometry,
    ConnectorOptions,
    ElementLayout,
    PathResult,
    PlugPlacement,
    Point,
    SocketGravity,
)
from domain.ports.layout import Measurable
from domain.services.bounding_box import ARC_PADDING, BASE_PADDING, bounding_box
from domain.services.label_positions import label_positions
from domain.services.path_generator import generate_gravity_path
from domain.services.plug_shapes import place_behind_plug, place_plug
from domain.services.socket_resolver import (
    DIAGONAL_RATIO,
    resolve_connection_points,
    resolve_socket,
    resolve_socket_gravity,
)
from domain.stroke_options import OutlineSpec, normalize_outline

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeometryConfig:
    arc_padding: float = ARC_PADDING
    base_padding: float = BASE_PADDING
    fine_auto_sockets: bool = False
    diagonal_ratio: float = DIAGONAL_RATIO


class BuildConnectorGeometry:
    def __init__(self, config: GeometryConfig | None = None) -> None:
        self.config = config or GeometryConfig()

    def build(
        self,
        start_target: Measurable,
        end_target: Measurable,
        options: ConnectorOptions | None = None,
        container_origin: Point | None = None,
    ) -> ConnectorGeometry | None:
        return self.build_from_layouts(
            start_target.measure_layout(),
            end_target.measure_layout(),
            options,
            container_origin,
        )

    def build_from_layouts(
        self,
        start_layout: ElementLayout | None,
        end_layout: ElementLayout | None,
        options: ConnectorOptions | None = None,
        container_origin: Point | None = None,
    ) -> ConnectorGeometry | None:
        options = options or ConnectorOptions()
        if start_layout is None or end_layout is None:
            logger.debug("Connector geometry not ready: layout missing")
            return None

        start_socket = self._gravity_socket(
            options.start_socket, options.start_socket_gravity, start_layout, end_layout
        )
        end_socket = self._gravity_socket(
            options.end_socket, options.end_socket_gravity, end_layout, start_layout
        )
        points = resolve_connection_points(
            start_layout,
            end_layout,
            start_socket,
            end_socket,
            container_origin,
            fine_auto=self.config.fine_auto_sockets,
            diagonal_ratio=self.config.diagonal_ratio,
        )
        if points is None:
            return None
        return self.build_from_points(points, options)

    def build_from_points(
        self,
        points: ConnectionPoints,
        options: ConnectorOptions | None = None,
    ) -> ConnectorGeometry:
        options = options or ConnectorOptions()
        outline = normalize_outline(options.outline, options.color)
        path = generate_gravity_path(
            points.start,
            points.end,
            options.path,
            options.curvature,
            options.start_socket_gravity,
            options.end_socket_gravity,
        )
        start_plug = place_plug(path, options.start_plug, options.start_plug_size, at_end=False)
        end_plug = place_plug(path, options.end_plug, options.end_plug_size, at_end=True)
        start_plug_outline = self._plug_outline(start_plug, options.start_plug_outline, options)
        end_plug_outline = self._plug_outline(end_plug, options.end_plug_outline, options)
        box = bounding_box(
            points.start,
            points.end,
            path.kind,
            options.curvature,
            options.stroke_width,
            outline,
            shadow=options.drop_shadow,
            plug_outlines=(start_plug_outline, end_plug_outline),
            arc_padding=self.config.arc_padding,
            base_padding=self.config.base_padding,
        )
        return ConnectorGeometry(
            start=points.start,
            end=points.end,
            start_socket=points.start_socket,
            end_socket=points.end_socket,
            path=path,
            bounding_box=box,
            stroke_width=options.stroke_width,
            start_plug=start_plug,
            end_plug=end_plug,
            behind_plugs=self._behind_plugs(path, options),
            labels=label_positions(path, options.labels),
            dash_array=options.dash,
            outline=outline,
            drop_shadow=options.drop_shadow,
            reliable=points.reliable,
            color=options.color,
            start_plug_outline=start_plug_outline,
            end_plug_outline=end_plug_outline,
        )

    def _plug_outline(
        self,
        plug: PlugPlacement | None,
        outline: OutlineSpec | None,
        options: ConnectorOptions,
    ) -> OutlineSpec | None:
        # an outline without a drawn plug has nothing to wrap
        if plug is None:
            return None
        return normalize_outline(outline, options.color)

    def _gravity_socket(
        self,
        socket: str,
        gravity: SocketGravity | None,
        layout: ElementLayout,
        other: ElementLayout,
    ) -> str:
        if socket != SOCKET_AUTO or gravity is None:
            return socket
        reference = resolve_socket(other, SOCKET_CENTER)
        if reference is None:
            return socket
        return resolve_socket_gravity(reference, layout, gravity) or socket

    def _behind_plugs(
        self,
        path: PathResult,
        options: ConnectorOptions,
    ) -> tuple[PlugPlacement, ...]:
        placements: list[PlugPlacement] = []
        if options.start_plug == PLUG_BEHIND:
            placement = place_behind_plug(path, options.start_plug_size, at_end=False)
            if placement is not None:
                placements.append(placement)
        if options.end_plug == PLUG_BEHIND:
            placement = place_behind_plug(path, options.end_plug_size, at_end=True)
            if placement is not None:
                placements.append(placement)
        return tuple(placements)
