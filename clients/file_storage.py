"""
JSON file storage: the durable local store.

All slots live in one JSON object on disk ({key: string value}).
Every write rewrites the file atomically (temp file + os.replace), so a
crash mid-write leaves the previous contents intact.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


class FileStorageError(Exception):
    """Storage file exists but is not a JSON object of strings."""


class FileStorage:
    """
    File-backed storage implementing KeyValueStorage.

    The file is read on every access; there is no in-process cache,
    matching the read-through behaviour of localStorage.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"FileStorage using {self._path}")

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise FileStorageError(f"Invalid JSON in storage file '{self._path}': {e}")
        if not isinstance(data, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in data.items()
        ):
            raise FileStorageError(
                f"Storage file '{self._path}' must hold an object of string values"
            )
        return data

    def _atomic_write(self, data: dict[str, str]) -> None:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=self._path.parent,
            delete=False,
            encoding="utf-8",
            suffix=".tmp",
        ) as tf:
            json.dump(data, tf, indent=2, ensure_ascii=False)
            tmp_name = tf.name
        os.replace(tmp_name, self._path)

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"Storage values must be str, got {type(value).__name__}")
        data = self._load()
        data[key] = value
        self._atomic_write(data)

    def delete(self, key: str) -> bool:
        data = self._load()
        if key not in data:
            return False
        del data[key]
        self._atomic_write(data)
        return True

    def exists(self, key: str) -> bool:
        return key in self._load()
