from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from domain.models import ConnectorOptions, ElementLayout, Point

_ENDPOINT_FIELDS = {"id", "start", "end"}


class ElementInput(BaseModel):
    width: float
    height: float
    x: float = 0.0
    y: float = 0.0
    origin_x: Optional[float] = None
    origin_y: Optional[float] = None
    measured_at: float = 0.0

    def to_layout(self) -> ElementLayout:
        return ElementLayout(
            width=self.width,
            height=self.height,
            origin_x=self.x if self.origin_x is None else self.origin_x,
            origin_y=self.y if self.origin_y is None else self.origin_y,
            x=self.x,
            y=self.y,
            measured_at=self.measured_at,
        )


class ContainerInput(BaseModel):
    x: float = 0.0
    y: float = 0.0

    def to_point(self) -> Point:
        return Point(self.x, self.y)


class AnchorInput(BaseModel):
    """Endpoint pinned to a point, or a sub-area when a size is given, of an element."""

    element: str
    x: float = 0.0
    y: float = 0.0
    width: Optional[float] = None
    height: Optional[float] = None

    @property
    def is_area(self) -> bool:
        return self.width is not None or self.height is not None


Endpoint = Union[str, AnchorInput]


def endpoint_element(endpoint: Endpoint) -> str:
    return endpoint.element if isinstance(endpoint, AnchorInput) else endpoint


def merge_options(
    defaults: ConnectorOptions | None,
    overrides: Mapping[str, Any] | None = None,
) -> ConnectorOptions:
    return (defaults or ConnectorOptions()).merged(overrides or {})


class SceneConnector(ConnectorOptions):
    id: str
    start: Endpoint
    end: Endpoint

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, value: object) -> str:
        normalized = str(value or "").strip()
        if not normalized:
            msg = "Connector id must not be empty"
            raise ValueError(msg)
        return normalized

    def to_options(self, defaults: ConnectorOptions | None = None) -> ConnectorOptions:
        overrides = self.model_dump(exclude_unset=True, exclude=_ENDPOINT_FIELDS)
        return merge_options(defaults, overrides)


class SceneDocument(BaseModel):
    container: Optional[ContainerInput] = None
    elements: Dict[str, ElementInput] = Field(default_factory=dict)
    connectors: List[SceneConnector] = Field(default_factory=list)

    @model_validator(mode="after")
    def ensure_connector_references(self) -> SceneDocument:
        seen: set[str] = set()
        for connector in self.connectors:
            if connector.id in seen:
                msg = f"Duplicate connector id: {connector.id}"
                raise ValueError(msg)
            seen.add(connector.id)
            for endpoint in (connector.start, connector.end):
                element_id = endpoint_element(endpoint)
                if element_id not in self.elements:
                    msg = f"Connector {connector.id} references unknown element: {element_id}"
                    raise ValueError(msg)
        return self

    def layouts(self) -> dict[str, ElementLayout]:
        return {element_id: element.to_layout() for element_id, element in self.elements.items()}

    def container_origin(self) -> Point | None:
        return self.container.to_point() if self.container is not None else None
