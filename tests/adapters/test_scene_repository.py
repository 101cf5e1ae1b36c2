from __future__ import annotations

from pathlib import Path

import orjson
import pytest
from pydantic import ValidationError

from adapters.filesystem.json_utils import dump_json_bytes, load_json, parse_json_bytes
from adapters.filesystem.scene_repository import FileSystemSceneRepository
from domain.models import ElementLayout
from domain.services.build_connector_geometry import BuildConnectorGeometry

SCENE = {
    "elements": {
        "a": {"x": 0, "y": 0, "width": 100, "height": 50},
        "b": {"x": 200, "y": 0, "width": 100, "height": 50},
    },
    "connectors": [{"id": "ab", "start": "a", "end": "b", "path": "magnet"}],
}


def test_load_scene(tmp_path: Path) -> None:
    path = tmp_path / "scene.json"
    path.write_bytes(orjson.dumps(SCENE))
    scene = FileSystemSceneRepository().load(path)
    assert list(scene.elements) == ["a", "b"]
    assert scene.connectors[0].path == "magnet"


def test_load_invalid_scene(tmp_path: Path) -> None:
    path = tmp_path / "scene.json"
    path.write_bytes(orjson.dumps({"connectors": [{"id": "x", "start": "a", "end": "b"}]}))
    with pytest.raises(ValidationError):
        FileSystemSceneRepository().load(path)


def test_load_rejects_malformed_json(tmp_path: Path) -> None:
    path = tmp_path / "scene.json"
    path.write_bytes(b"{nope")
    with pytest.raises(ValueError, match="Invalid JSON"):
        FileSystemSceneRepository().load(path)
    path.write_bytes(b"[]")
    with pytest.raises(ValueError, match="JSON object"):
        FileSystemSceneRepository().load_raw(path)


def test_save_geometry_writes_json(tmp_path: Path) -> None:
    geometry = BuildConnectorGeometry().build_from_layouts(
        ElementLayout(width=100, height=50, origin_x=0, origin_y=0),
        ElementLayout(width=100, height=50, origin_x=200, origin_y=0),
    )
    target = tmp_path / "out" / "geometry.json"
    FileSystemSceneRepository().save_geometry({"ab": geometry, "pending": None}, target)
    payload = load_json(target)
    assert payload["connectors"]["pending"] is None
    assert payload["connectors"]["ab"]["path"]["d"] == "M 50 25 L 250 25"
    assert not target.with_suffix(".json.tmp").exists()


def test_json_helpers() -> None:
    assert parse_json_bytes(b'{"a": 1}') == {"a": 1}
    with pytest.raises(ValueError, match="Invalid JSON"):
        parse_json_bytes(b"{nope")
    with pytest.raises(ValueError, match="JSON object"):
        parse_json_bytes(b"[1, 2]")
    assert orjson.loads(dump_json_bytes({"b": 1, "a": 2})) == {"a": 2, "b": 1}
