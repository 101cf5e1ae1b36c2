from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from filelock import FileLock

from adapters.filesystem.json_utils import load_json, write_json_atomic
from domain.models import ConnectorGeometry
from domain.ports.repositories import SceneRepository
from domain.scene import SceneDocument


class FileSystemSceneRepository(SceneRepository):
    def load(self, path: Path) -> SceneDocument:
        return SceneDocument.model_validate(self.load_raw(path))

    def load_raw(self, path: Path) -> dict[str, Any]:
        return load_json(path)

    def save_geometry(
        self,
        geometry: Mapping[str, ConnectorGeometry | None],
        path: Path,
    ) -> None:
        payload = {
            "connectors": {
                connector_id: item.to_dict() if item is not None else None
                for connector_id, item in geometry.items()
            }
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        lock_path = path.with_suffix(f"{path.suffix}.lock")
        with FileLock(str(lock_path)):
            write_json_atomic(path, payload)
