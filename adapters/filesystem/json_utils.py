from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import orjson


def parse_json_bytes(raw: bytes) -> dict[str, Any]:
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        msg = f"Invalid JSON: {exc}"
        raise ValueError(msg) from exc
    if not isinstance(data, dict):
        msg = "Expected a JSON object"
        raise ValueError(msg)
    return data


def load_json(path: Path) -> dict[str, Any]:
    return parse_json_bytes(path.read_bytes())


def dump_json_bytes(payload: Any) -> bytes:
    try:
        return orjson.dumps(payload, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS)
    except TypeError:
        return json.dumps(payload, ensure_ascii=True, indent=2, sort_keys=True).encode("utf-8")


def write_json_atomic(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(f"{path.suffix}.tmp")
    tmp_path.write_bytes(dump_json_bytes(payload))
    tmp_path.replace(path)
