"""
Local Key-Value Storage Implementations

DESIGN DECISION: A single JSON file holds the whole key-value map.
This is the desktop equivalent of a browser profile's local storage:
1. Survives restarts for the same user
2. No database setup required
3. Human-readable, easy to inspect or delete

TRADEOFFS:
- Every write rewrites the whole file (fine for a personal expense list)
- No cross-process locking (the app is single-user, single-session)

Writes go to a temporary file first and are moved into place, so a crash
mid-write never leaves a half-written map behind.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from src.config import get_settings
from src.services.storage.interface import (
    KeyValueStorageInterface,
    StorageReadError,
    StorageWriteError,
)


class JsonFileStorage(KeyValueStorageInterface):
    """
    Key-value storage backed by a JSON object in a file.

    The file is re-read on every access, so edits made by another
    session (or by hand) are picked up on the next read.
    """

    def __init__(self, path: Optional[Path] = None):
        """
        Args:
            path: Location of the JSON file.
                  Defaults to the configured storage path.
        """
        self._path = Path(path) if path is not None else get_settings().app.storage_path

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}

        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageReadError(f"Cannot read {self._path}: {e}") from e
        except UnicodeDecodeError as e:
            raise StorageReadError(f"{self._path} is not valid UTF-8: {e}") from e

        if not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageReadError(f"{self._path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise StorageReadError(f"{self._path} does not hold a JSON object")

        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                    json.dump(data, tmp, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self._path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageWriteError(f"Cannot write {self._path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except StorageReadError:
            # A corrupt file is replaced rather than blocking every future write
            data = {}
        data[key] = value
        self._write_all(data)


class InMemoryStorage(KeyValueStorageInterface):
    """
    Key-value storage that lives only as long as the process.

    Used by tests and by create_app_components(use_storage=False).
    """

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value
