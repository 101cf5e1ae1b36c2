from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, cast

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import ORJSONResponse
from pydantic import BaseModel, Field, ValidationError

from app.config import AppSettings, load_settings
from app.scene_wiring import build_geometry_builder, build_scene_geometry
from domain.models import DEFAULT_PLUG_SIZE, ConnectorGeometry, ConnectorOptions
from domain.scene import ContainerInput, ElementInput, SceneDocument, merge_options
from domain.services.build_connector_geometry import BuildConnectorGeometry
from domain.services.plug_shapes import PLUG_SHAPE_BUILDERS, generate_plug_shape

logger = logging.getLogger(__name__)


class ConnectorGeometryRequest(BaseModel):
    start: Optional[ElementInput] = None
    end: Optional[ElementInput] = None
    options: Dict[str, Any] = Field(default_factory=dict)
    container: Optional[ContainerInput] = None


@dataclass(frozen=True)
class GeometryContext:
    settings: AppSettings
    builder: BuildConnectorGeometry
    defaults: ConnectorOptions


def create_app(settings: AppSettings) -> FastAPI:
    app = FastAPI(title=settings.web.title)
    app.state.context = GeometryContext(
        settings=settings,
        builder=build_geometry_builder(settings),
        defaults=settings.engine.default_options(),
    )

    @app.get("/api/health")
    def api_health() -> ORJSONResponse:
        return ORJSONResponse({"status": "ok"})

    @app.post("/api/connectors/geometry")
    def api_connector_geometry(
        payload: ConnectorGeometryRequest,
        context: GeometryContext = Depends(get_context),
    ) -> ORJSONResponse:
        try:
            options = merge_options(context.defaults, payload.options)
        except ValidationError as exc:
            raise HTTPException(status_code=422, detail=validation_detail(exc)) from exc
        geometry = context.builder.build_from_layouts(
            payload.start.to_layout() if payload.start else None,
            payload.end.to_layout() if payload.end else None,
            options,
            payload.container.to_point() if payload.container else None,
        )
        return ORJSONResponse(
            {"ready": geometry is not None, "geometry": geometry_payload(geometry)}
        )

    @app.post("/api/scenes/geometry")
    def api_scene_geometry(
        scene: SceneDocument,
        context: GeometryContext = Depends(get_context),
    ) -> ORJSONResponse:
        limit = context.settings.web.max_connectors
        if len(scene.connectors) > limit:
            raise HTTPException(status_code=422, detail=f"Scene has more than {limit} connectors")
        results = build_scene_geometry(scene, context.builder, context.defaults)
        logger.debug("Computed geometry for %d connectors", len(results))
        return ORJSONResponse(
            {
                "connectors": {
                    connector_id: geometry_payload(geometry)
                    for connector_id, geometry in results.items()
                }
            }
        )

    @app.get("/api/plugs/{kind}")
    def api_plug(
        kind: str,
        size: float = Query(DEFAULT_PLUG_SIZE),
    ) -> ORJSONResponse:
        name = kind.strip().lower()
        if name not in PLUG_SHAPE_BUILDERS:
            raise HTTPException(status_code=404, detail="Plug kind not found")
        shape = generate_plug_shape(name, size)
        if shape.is_empty:
            raise HTTPException(status_code=422, detail="Plug size must be within (0, 100]")
        return ORJSONResponse(
            {"kind": shape.kind, "size": shape.size, "d": shape.to_svg(), "closed": shape.closed}
        )

    return app


def get_context(request: Request) -> GeometryContext:
    return cast(GeometryContext, request.app.state.context)


def geometry_payload(geometry: ConnectorGeometry | None) -> dict[str, Any] | None:
    return geometry.to_dict() if geometry is not None else None


def validation_detail(exc: ValidationError) -> list[dict[str, Any]]:
    return [
        {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
        for error in exc.errors()
    ]


app = create_app(load_settings())
