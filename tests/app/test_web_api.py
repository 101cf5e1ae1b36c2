from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from fastapi.testclient import TestClient

from app.config import AppSettings
from app.web_main import create_app

BOX_A = {"x": 0, "y": 0, "width": 100, "height": 50}
BOX_B = {"x": 200, "y": 0, "width": 100, "height": 50}


@pytest.fixture
def client(app_settings: AppSettings) -> TestClient:
    return TestClient(create_app(app_settings))


def test_health(client: TestClient) -> None:
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_connector_geometry(client: TestClient) -> None:
    response = client.post(
        "/api/connectors/geometry",
        json={"start": BOX_A, "end": BOX_B, "options": {"end_plug": "disc"}},
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["ready"] is True
    geometry = payload["geometry"]
    assert geometry["path"]["d"] == "M 50 25 L 250 25"
    assert geometry["bounding_box"] == {"x": 28, "y": 3, "width": 244, "height": 44}
    assert geometry["end_plug"]["kind"] == "disc"
    assert geometry["end_plug"]["transform"] == "translate(250, 25) rotate(0)"
    assert geometry["reliable"] is True


def test_connector_geometry_with_container(client: TestClient) -> None:
    response = client.post(
        "/api/connectors/geometry",
        json={"start": BOX_A, "end": BOX_B, "container": {"x": 50, "y": 25}},
    )
    assert response.json()["geometry"]["start"] == {"x": 0, "y": 0}


def test_connector_geometry_not_ready(client: TestClient) -> None:
    response = client.post("/api/connectors/geometry", json={"start": BOX_A})
    assert response.status_code == 200
    assert response.json() == {"ready": False, "geometry": None}


def test_connector_geometry_rejects_bad_options(client: TestClient) -> None:
    response = client.post(
        "/api/connectors/geometry",
        json={"start": BOX_A, "end": BOX_B, "options": {"labels": {"nowhere": "x"}}},
    )
    assert response.status_code == 422


def test_engine_defaults_apply(app_settings_factory: Callable[..., AppSettings]) -> None:
    client = TestClient(create_app(app_settings_factory(path="arc", curvature=0.5)))
    response = client.post("/api/connectors/geometry", json={"start": BOX_A, "end": BOX_B})
    assert response.json()["geometry"]["path"]["d"] == "M 50 25 A 100 100 0 0 1 250 25"


def test_scene_geometry(client: TestClient) -> None:
    scene: dict[str, Any] = {
        "elements": {"a": BOX_A, "b": BOX_B},
        "connectors": [
            {"id": "ab", "start": "a", "end": "b", "start_socket": "auto", "end_socket": "auto"},
            {"id": "ba", "start": "b", "end": "a", "path": {"type": "grid"}},
        ],
    }
    response = client.post("/api/scenes/geometry", json=scene)
    assert response.status_code == 200
    connectors = response.json()["connectors"]
    assert list(connectors) == ["ab", "ba"]
    assert connectors["ab"]["start_socket"] == "right"
    assert connectors["ba"]["path"]["kind"] == "grid"


def test_scene_geometry_rejects_unknown_elements(client: TestClient) -> None:
    scene = {"elements": {"a": BOX_A}, "connectors": [{"id": "x", "start": "a", "end": "b"}]}
    assert client.post("/api/scenes/geometry", json=scene).status_code == 422


def test_plug_endpoint(client: TestClient) -> None:
    response = client.get("/api/plugs/square", params={"size": 10})
    assert response.status_code == 200
    assert response.json() == {
        "kind": "square",
        "size": 10,
        "d": "M -5 -5 L 5 -5 L 5 5 L -5 5 Z",
        "closed": True,
    }


def test_plug_endpoint_errors(client: TestClient) -> None:
    assert client.get("/api/plugs/star").status_code == 404
    assert client.get("/api/plugs/arrow1", params={"size": 500}).status_code == 422
    assert client.get("/api/plugs/none").status_code == 404
