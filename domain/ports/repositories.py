from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from domain.models import ConnectorGeometry
from domain.scene import SceneDocument


class SceneRepository(Protocol):
    def load(self, path: Path) -> SceneDocument: ...

    def load_raw(self, path: Path) -> dict[str, Any]: ...

    def save_geometry(
        self,
        geometry: Mapping[str, ConnectorGeometry | None],
        path: Path,
    ) -> None: ...
