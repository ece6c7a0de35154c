# mimi/storage.py — device-local key/value records
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Reading or writing the local store failed."""


class MemoryStore:
    """Dict-backed store. Handy for tests and for a session with no disk."""

    def __init__(self, records: Optional[Dict[str, Any]] = None):
        self.records: Dict[str, Any] = dict(records or {})

    def get(self, key: str) -> Optional[Any]:
        return self.records.get(key)

    def set(self, key: str, value: Any) -> None:
        self.records[key] = value


class JsonFileStore:
    """String-keyed records persisted to a single JSON file."""

    def __init__(self, path: str):
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"could not read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"{self.path} does not hold a JSON object")
        return data

    def get(self, key: str) -> Optional[Any]:
        return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp, self.path)
        except OSError as e:
            raise StorageError(f"could not write {self.path}: {e}") from e
        logger.debug("saved %s to %s", key, self.path)
