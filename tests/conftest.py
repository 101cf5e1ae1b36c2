from __future__ import annotations

import os
from collections.abc import Callable, Generator

import pytest

from app.config import AppSettings, EngineSettings, WebSettings
from domain.models import ElementLayout


def _clear_connector_env() -> None:
    for key in list(os.environ):
        if key.startswith("CONNECTOR_"):
            os.environ.pop(key, None)


_clear_connector_env()


@pytest.fixture(autouse=True)
def clear_connector_env() -> Generator[None, None, None]:
    _clear_connector_env()
    yield
    _clear_connector_env()


@pytest.fixture
def engine_settings() -> EngineSettings:
    return EngineSettings()


@pytest.fixture
def engine_settings_factory(engine_settings: EngineSettings) -> Callable[..., EngineSettings]:
    def _factory(**overrides: object) -> EngineSettings:
        return engine_settings.model_copy(update=overrides)

    return _factory


@pytest.fixture
def app_settings(engine_settings: EngineSettings) -> AppSettings:
    return AppSettings(engine=engine_settings, web=WebSettings(title="Test Connectors"))


@pytest.fixture
def app_settings_factory(
    engine_settings_factory: Callable[..., EngineSettings],
) -> Callable[..., AppSettings]:
    def _factory(**overrides: object) -> AppSettings:
        return AppSettings(
            engine=engine_settings_factory(**overrides),
            web=WebSettings(title="Test Connectors"),
        )

    return _factory


@pytest.fixture
def layout_factory() -> Callable[..., ElementLayout]:
    def _factory(
        x: float = 0.0,
        y: float = 0.0,
        width: float = 100.0,
        height: float = 50.0,
        measured_at: float = 0.0,
    ) -> ElementLayout:
        return ElementLayout(
            width=width,
            height=height,
            origin_x=x,
            origin_y=y,
            x=x,
            y=y,
            measured_at=measured_at,
        )

    return _factory
