"""State store adapters: one JSON file per bucket, or a plain dict for tests."""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from clicker.config import StorageConfig, storage_config_from_env

from ...application.ports.state_store import StateStorePort

logger = logging.getLogger(__name__)


class JsonFileStateStore(StateStorePort):
    """Writes ``<base_dir>/<bucket>.json``, loaded whole and written whole."""

    def __init__(self, config: StorageConfig | None = None):
        self._config = config or storage_config_from_env()

    @property
    def base_dir(self) -> Path:
        return self._config.base_dir

    def _path(self, name: str) -> Path:
        return self.base_dir / f"{name}.json"

    def load(self, name: str) -> Optional[Dict[str, Any]]:
        path = self._path(name)
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring unreadable state bucket {name}: {e}")
            return None

    def save(self, name: str, data: Dict[str, Any]) -> None:
        path = self._path(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".json.tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        tmp.replace(path)


class InMemoryStateStore(StateStorePort):
    """Dictionary-backed store; values are copied in and out."""

    def __init__(self, initial: Dict[str, Dict[str, Any]] | None = None):
        self._buckets: Dict[str, Dict[str, Any]] = copy.deepcopy(initial or {})

    def load(self, name: str) -> Optional[Dict[str, Any]]:
        data = self._buckets.get(name)
        return copy.deepcopy(data) if data is not None else None

    def save(self, name: str, data: Dict[str, Any]) -> None:
        self._buckets[name] = copy.deepcopy(data)

    def names(self) -> list:
        return sorted(self._buckets)
