"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

DEFAULT_SETTINGS: dict[str, Any] = {
    "catalog": {
        "root": "",
        "extensions": [
            ".jpg",
            ".jpeg",
            ".png",
            ".heic",
            ".heif",
            ".webp",
            ".tif",
            ".tiff",
            ".bmp",
            ".gif",
        ],
        "limit": 1000,
        "recursive": True,
    },
    "gesture": {
        "threshold_ratio": 0.25,
        "min_velocity": 500,
        "indicator_dead_zone": 50,
        "indicator_full": 150,
    },
    "delete": {"confirm": True, "log_dir": ""},
    "logging": {"level": "INFO", "dir": ""},
    "preview": {"max_side": 2048, "mem_cache": 32},
}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively overlay `override` onto a copy of `base`."""
    out = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access.

    Values from the file are layered over `DEFAULT_SETTINGS`, so a partial
    file is valid.
    """

    def __init__(self, settings_path: str | Path, required: bool = True) -> None:
        self._path = Path(settings_path)
        data: dict[str, Any] = {}
        if self._path.exists():
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError(f"settings.json must hold an object: {self._path}")
        elif required:
            raise FileNotFoundError(f"settings.json not found: {self._path}")
        self._data = _merge(DEFAULT_SETTINGS, data)

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node
