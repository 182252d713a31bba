"""
JSON File Storage Implementation

DESIGN DECISION: The whole key-value store lives in one JSON object on
disk, mirroring the mobile app's AsyncStorage (one string per key).

TRADEOFFS:
- Every write rewrites the file (fine for personal data volumes)
- Writes go through a temp file and os.replace, so the file on disk is
  always either the old or the new version
- Because of that, a batch write is atomic: all keys or none
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from digital_drawer.config import get_settings
from digital_drawer.services.storage.interface import (
    KeyValueStoreInterface,
    StorageReadError,
    StorageWriteError,
)


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """
    Key-value store persisted as a single JSON file.

    The file is read lazily on first access and cached; every write
    flushes the full mapping back to disk.
    """

    def __init__(self, path: Optional[Path] = None):
        self._path = Path(path or get_settings().storage.data_path)
        self._data: Optional[dict[str, str]] = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        """Load the store file, creating an empty store if missing."""
        if self._data is None:
            if not self._path.exists():
                self._data = {}
                return self._data
            try:
                raw = self._path.read_text(encoding="utf-8")
                data = json.loads(raw) if raw.strip() else {}
            except OSError as e:
                raise StorageReadError(f"Could not read store file {self._path}: {e}")
            except json.JSONDecodeError as e:
                raise StorageReadError(f"Store file {self._path} is corrupt: {e}")

            if not isinstance(data, dict) or not all(
                isinstance(value, str) for value in data.values()
            ):
                raise StorageReadError(
                    f"Store file {self._path} does not hold a string mapping"
                )
            self._data = data
        return self._data

    def _flush(self, data: dict[str, str], key: Optional[str] = None) -> None:
        """Write the mapping to disk through a temp file."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageWriteError(f"Could not write store file {self._path}: {e}", key=key)

    async def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    async def set(self, key: str, value: str) -> bool:
        updated = dict(self._load())
        updated[key] = value
        self._flush(updated, key=key)
        self._data = updated
        return True

    async def remove(self, key: str) -> bool:
        current = self._load()
        if key not in current:
            return False
        updated = {k: v for k, v in current.items() if k != key}
        self._flush(updated, key=key)
        self._data = updated
        return True

    @property
    def supports_atomic_batch(self) -> bool:
        return True

    async def set_many(self, items: list[tuple[str, str]]) -> list[str]:
        updated = dict(self._load())
        updated.update(items)
        self._flush(updated)
        self._data = updated
        return [key for key, _ in items]
