"""
Key-value text media that hold the serialized calendar.

Every medium exposes get/set/remove over string keys and string values.
Media raise on failure; PersistenceBridge decides how failures are handled.
"""

import logging
import os
import re
from pathlib import Path
from typing import Protocol

from core.config import DB_PATH, STORAGE_BACKEND, STORAGE_DIR
from core.database import create_schema, delete_value, get_connection, read_value, write_value
from core.exceptions import QuotaExceededError

logger = logging.getLogger(__name__)

KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueMedium(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryMedium:
    """Dict-backed medium with an optional byte quota per value."""

    def __init__(self, max_bytes: int | None = None):
        self.max_bytes = max_bytes
        self._values: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        size = len(value.encode("utf-8"))
        if self.max_bytes is not None and size > self.max_bytes:
            raise QuotaExceededError(
                f"Value for '{key}' is {size} bytes, quota is {self.max_bytes} bytes"
            )
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)


class FileMedium:
    """One JSON text file per key inside a directory."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key '{key}'")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            f.write(value)
        os.replace(tmp, path)

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class SqliteMedium:
    """Values stored in the kv_store table of a SQLite database."""

    def __init__(self, db_path: Path | str | None = None):
        self.db_path = Path(db_path) if db_path else DB_PATH

    def _connect(self):
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = get_connection(self.db_path)
        create_schema(conn)
        return conn

    def get(self, key: str) -> str | None:
        if not self.db_path.exists():
            return None
        conn = self._connect()
        try:
            return read_value(conn, key)
        finally:
            conn.close()

    def set(self, key: str, value: str) -> None:
        conn = self._connect()
        try:
            write_value(conn, key, value)
        finally:
            conn.close()

    def remove(self, key: str) -> None:
        if not self.db_path.exists():
            return
        conn = self._connect()
        try:
            delete_value(conn, key)
        finally:
            conn.close()


def get_medium(backend: str | None = None) -> KeyValueMedium:
    """Build the configured backing medium."""
    backend = (backend or STORAGE_BACKEND).lower()
    if backend == "file":
        medium = FileMedium(STORAGE_DIR)
    elif backend == "sqlite":
        medium = SqliteMedium(DB_PATH)
    elif backend == "memory":
        medium = MemoryMedium()
    else:
        raise ValueError(f"Unknown storage backend '{backend}'")
    logger.debug(f"Using {backend} storage medium")
    return medium
