from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from app.config import AppSettings, EngineSettings, load_settings
from domain.services.build_connector_geometry import GeometryConfig


def test_defaults_without_config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    settings = load_settings()
    assert settings.engine.path == "straight"
    assert settings.engine.to_geometry_config() == GeometryConfig()
    assert settings.web.title == "Connector Geometry"


def test_yaml_file_is_loaded(tmp_path: Path) -> None:
    config_path = tmp_path / "app.yaml"
    config_path.write_text(
        "engine:\n  path: ARC\n  curvature: 0.5\n  arc_padding: 70\nweb:\n  title: Demo\n",
        encoding="utf-8",
    )
    settings = load_settings(config_path)
    assert settings.engine.path == "arc"
    assert settings.engine.curvature == 0.5
    assert settings.engine.to_geometry_config().arc_padding == 70
    assert settings.web.title == "Demo"


def test_environment_overrides_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "app.yaml"
    config_path.write_text("engine:\n  path: arc\n  curvature: 0.5\n", encoding="utf-8")
    monkeypatch.setenv("CONNECTOR_CONFIG_PATH", str(config_path))
    monkeypatch.setenv("CONNECTOR_ENGINE__PATH", "fluid")
    settings = load_settings()
    assert settings.engine.path == "fluid"
    assert settings.engine.curvature == 0.5


def test_missing_config_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Config file not found"):
        load_settings(tmp_path / "missing.yaml")


def test_yaml_path_is_restored_after_loading(tmp_path: Path) -> None:
    config_path = tmp_path / "app.yaml"
    config_path.write_text("engine:\n  path: grid\n", encoding="utf-8")
    load_settings(config_path)
    assert AppSettings._yaml_path is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"path": "zigzag"},
        {"start_socket": "middle"},
        {"end_plug": "star"},
        {"diagonal_ratio": 2},
        {"start_plug_size": 0},
    ],
)
def test_invalid_engine_settings(overrides: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        EngineSettings(**overrides)


def test_default_options_mirror_engine_settings() -> None:
    engine = EngineSettings(path="magnet", end_plug="diamond", start_socket="auto", stroke_width=5)
    options = engine.default_options()
    assert options.path == "magnet"
    assert options.end_plug == "diamond"
    assert options.start_socket == "auto"
    assert options.stroke_width == 5
