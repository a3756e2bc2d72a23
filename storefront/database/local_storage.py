"""
Key-value storage for client and shared state.

Values are strings, mirroring browser localStorage. Structured data goes through
read_json/write_json, which treat a malformed stored value as absent.
"""
import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class KeyValueStorage:
    """Base class for string-keyed storage backends."""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

    def read_json(self, key: str, default: Any = None) -> Any:
        """Decode the JSON value under key; corrupt or missing values yield default."""
        raw = self.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning(f"Discarding malformed value stored under '{key}': {e}")
            return default

    def write_json(self, key: str, value: Any) -> None:
        self.set_item(key, json.dumps(value, default=str))


class MemoryStorage(KeyValueStorage):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def keys(self):
        with self._lock:
            return list(self._data.keys())


class FileStorage(KeyValueStorage):
    """One JSON document on disk holding every key of a namespace.

    The document is rewritten in full on each mutation (write to a temp file, then
    replace), so a crash never leaves a half-written file behind.
    """

    def __init__(self, path: str):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._data: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Storage file {self.path} is unreadable, starting empty: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Storage file {self.path} does not hold an object, starting empty")
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._data, f)
        os.replace(tmp_path, self.path)

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value
            self._flush()

    def remove_item(self, key: str) -> None:
        with self._lock:
            if self._data.pop(key, None) is not None:
                self._flush()

    def clear(self) -> None:
        with self._lock:
            self._data = {}
            self._flush()


class ScopedStorage(KeyValueStorage):
    """A prefixed view of a MemoryStorage, so one process-wide store can hold many clients."""

    def __init__(self, backing: MemoryStorage, prefix: str):
        self.backing = backing
        self.prefix = prefix

    def get_item(self, key: str) -> Optional[str]:
        return self.backing.get_item(self.prefix + key)

    def set_item(self, key: str, value: str) -> None:
        self.backing.set_item(self.prefix + key, value)

    def remove_item(self, key: str) -> None:
        self.backing.remove_item(self.prefix + key)

    def clear(self) -> None:
        for key in self.backing.keys():
            if key.startswith(self.prefix):
                self.backing.remove_item(key)
