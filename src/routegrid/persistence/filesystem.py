"""Key/value persistence for points, mode and map viewport."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from ..config import settings

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def load(self, key: str) -> Any | None: ...

    def save(self, key: str, value: Any) -> None: ...


class MemoryStore:
    """In-process store, used when nothing should touch the disk."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self.values: dict[str, Any] = {key: json.loads(json.dumps(value)) for key, value in (initial or {}).items()}

    def load(self, key: str) -> Any | None:
        return self.values.get(key)

    def save(self, key: str, value: Any) -> None:
        # round-trip through JSON so stored values match what a file would hold
        self.values[key] = json.loads(json.dumps(value))


class JsonFileStore:
    """Thin wrapper around a single JSON document holding every persisted key."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = (path or settings.resolved_state_file).resolve()
        self._values = self._read()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning(f"Ignoring unreadable state file {self.path}: {exc}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring state file {self.path}: expected an object")
            return {}
        return data

    def write_json(self, path: Path, data: Any, *, indent: int = 2) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=indent)
        tmp_path.replace(path)

    def load(self, key: str) -> Any | None:
        return self._values.get(key)

    def save(self, key: str, value: Any) -> None:
        self._values[key] = value
        self.write_json(self.path, self._values)
