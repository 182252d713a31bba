"""
Backup Restore

Writes the sections of a VALIDATED backup back into the live store.

Rules:
- Each of the seven sections present in the document overwrites its
  storage key. Sections absent from the document are left untouched.
- Renamed sections are always written under their current name
  (a `homes_list` section is restored to `@home_homes`).
- By default writes are sequential and best-effort: if one write fails,
  keys already written STAY written and RestoreError reports them.
- With `atomic=True` and a store that supports atomic batches, all keys
  are written in one batch, so a failure leaves storage unchanged.

The restorer does not reload application state. The host must restart
or reload after a successful restore.
"""

import json
from typing import Optional

import structlog

from digital_drawer.backup.keys import SECTIONS, find_section_with_alias, storage_key
from digital_drawer.config import get_settings
from digital_drawer.models.backup import BackupDocument
from digital_drawer.services.storage import (
    KeyValueStoreInterface,
    StorageError,
    StorageWriteError,
)


logger = structlog.get_logger(__name__)


class RestoreError(Exception):
    """A storage write failed during restore."""

    def __init__(
        self,
        message: str,
        written_keys: list[str],
        failed_key: Optional[str],
    ):
        self.written_keys = written_keys
        self.failed_key = failed_key
        super().__init__(message)

    @property
    def is_partial(self) -> bool:
        return bool(self.written_keys)


class BackupRestorer:
    """
    Merges a validated backup document into the key-value store.
    """

    def __init__(
        self,
        key_prefix: Optional[str] = None,
        atomic: Optional[bool] = None,
    ):
        settings = get_settings()
        self._prefix = settings.storage.key_prefix if key_prefix is None else key_prefix
        self._atomic = settings.backup.atomic_restore if atomic is None else atomic

    @property
    def key_prefix(self) -> str:
        return self._prefix

    def plan(self, document: BackupDocument) -> list[tuple[str, str]]:
        """
        Work out what a restore would write.

        Returns:
            (storage_key, serialized_value) pairs in restore order
        """
        items = []
        for name in SECTIONS:
            key, found = find_section_with_alias(document, name, self._prefix)
            if found:
                # Compact separators match what the app itself writes
                value = json.dumps(
                    document[key],
                    ensure_ascii=False,
                    allow_nan=False,
                    separators=(",", ":"),
                )
                items.append((storage_key(name, self._prefix), value))
        return items

    async def restore(
        self,
        document: BackupDocument,
        store: KeyValueStoreInterface,
    ) -> list[str]:
        """
        Write every section present in the document to the store.

        Must only be called with a document the validator accepted.

        Returns:
            Storage keys written, in order

        Raises:
            RestoreError: If a write fails. `written_keys` holds the keys
                already overwritten (always empty for an atomic batch).
        """
        items = self.plan(document)

        if self._atomic and store.supports_atomic_batch:
            try:
                written = await store.set_many(items)
            except StorageError as e:
                raise RestoreError(str(e), written_keys=[], failed_key=e.key) from e
            logger.info("backup_restore_written", keys=written, atomic=True)
            return written

        written = []
        for key, value in items:
            try:
                if not await store.set(key, value):
                    raise StorageWriteError(f"Store refused to write {key}", key=key)
            except StorageError as e:
                logger.error(
                    "backup_restore_write_failed",
                    key=key,
                    written_keys=written,
                    error=str(e),
                )
                raise RestoreError(str(e), written_keys=written, failed_key=key) from e
            written.append(key)

        logger.info("backup_restore_written", keys=written, atomic=False)
        return written
