from __future__ import annotations

import os
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from domain.models import (
    DEFAULT_COLOR,
    DEFAULT_CURVATURE,
    DEFAULT_PLUG_SIZE,
    DEFAULT_STROKE_WIDTH,
    PATH_KINDS,
    PATH_STRAIGHT,
    PLUG_KINDS,
    SOCKET_CENTER,
    SOCKET_POSITIONS,
    ConnectorOptions,
)
from domain.services.bounding_box import ARC_PADDING, BASE_PADDING
from domain.services.build_connector_geometry import GeometryConfig
from domain.services.socket_resolver import DIAGONAL_RATIO

DEFAULT_CONFIG_PATH = Path("config/connector/app.yaml")


class EngineSettings(BaseModel):
    path: str = PATH_STRAIGHT
    curvature: float = DEFAULT_CURVATURE
    stroke_width: float = Field(default=DEFAULT_STROKE_WIDTH, ge=0)
    color: str = DEFAULT_COLOR
    start_socket: str = SOCKET_CENTER
    end_socket: str = SOCKET_CENTER
    start_plug: str = "none"
    end_plug: str = "arrow1"
    start_plug_size: float = Field(default=DEFAULT_PLUG_SIZE, gt=0)
    end_plug_size: float = Field(default=DEFAULT_PLUG_SIZE, gt=0)
    arc_padding: float = Field(default=ARC_PADDING, ge=0)
    base_padding: float = Field(default=BASE_PADDING, ge=0)
    fine_auto_sockets: bool = False
    diagonal_ratio: float = Field(default=DIAGONAL_RATIO, ge=0, le=1)

    @field_validator("path", mode="before")
    @classmethod
    def validate_path(cls, value: object) -> str:
        return _choice("engine.path", value, PATH_KINDS)

    @field_validator("start_socket", "end_socket", mode="before")
    @classmethod
    def validate_socket(cls, value: object) -> str:
        return _choice("engine socket", value, SOCKET_POSITIONS)

    @field_validator("start_plug", "end_plug", mode="before")
    @classmethod
    def validate_plug(cls, value: object) -> str:
        return _choice("engine plug", value, PLUG_KINDS)

    def to_geometry_config(self) -> GeometryConfig:
        return GeometryConfig(
            arc_padding=self.arc_padding,
            base_padding=self.base_padding,
            fine_auto_sockets=self.fine_auto_sockets,
            diagonal_ratio=self.diagonal_ratio,
        )

    def default_options(self) -> ConnectorOptions:
        return ConnectorOptions(
            path=self.path,
            curvature=self.curvature,
            stroke_width=self.stroke_width,
            color=self.color,
            start_socket=self.start_socket,
            end_socket=self.end_socket,
            start_plug=self.start_plug,
            end_plug=self.end_plug,
            start_plug_size=self.start_plug_size,
            end_plug_size=self.end_plug_size,
        )


class WebSettings(BaseModel):
    title: str = "Connector Geometry"
    max_connectors: int = Field(default=500, gt=0)


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CONNECTOR_", env_nested_delimiter="__")

    engine: EngineSettings = EngineSettings()
    web: WebSettings = WebSettings()

    _yaml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv("CONNECTOR_CONFIG_PATH")
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous


def _choice(label: str, value: object, allowed: tuple[str, ...]) -> str:
    normalized = str(value or "").strip().lower()
    if normalized not in allowed:
        msg = f"{label} must be one of {', '.join(allowed)}; got {value!r}"
        raise ValueError(msg)
    return normalized
