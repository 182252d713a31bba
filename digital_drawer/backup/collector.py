"""
Backup Collector

Reads every section from the live store and assembles a backup document:

    {
        "@home_profile": {...},
        "@home_history": [...],
        ...
        "_backup_date": "2024-01-01T10:00:00.000Z",
        "_app_version": "1.0.0"
    }

Collection never fails as a whole. A section that is missing, empty,
unparseable or unreadable is left out of the document.
"""

import json
from datetime import datetime, timezone
from typing import Optional

import structlog

from digital_drawer.backup.keys import (
    APP_VERSION_KEY,
    BACKUP_DATE_KEY,
    LEGACY_ALIASES,
    SECTIONS,
    storage_key,
)
from digital_drawer.config import get_settings
from digital_drawer.models.backup import BackupDocument
from digital_drawer.services.files import reject_json_constant
from digital_drawer.services.storage import KeyValueStoreInterface, StorageError


logger = structlog.get_logger(__name__)


def iso_timestamp(now: datetime) -> str:
    """UTC timestamp with millisecond precision and a Z suffix."""
    now = now.astimezone(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class BackupCollector:
    """
    Builds a backup document from the live store.
    """

    def __init__(
        self,
        key_prefix: Optional[str] = None,
        app_name: Optional[str] = None,
        app_version: Optional[str] = None,
    ):
        settings = get_settings()
        self._prefix = settings.storage.key_prefix if key_prefix is None else key_prefix
        self._app_name = app_name or settings.app.app_name
        self._app_version = app_version or settings.app.app_version

    async def _read_section(
        self,
        store: KeyValueStoreInterface,
        key: str,
    ) -> tuple[bool, object]:
        """
        Read and parse one key.

        Returns:
            (found, parsed_value)
        """
        try:
            raw = await store.get(key)
        except StorageError as e:
            logger.warning("backup_section_unreadable", key=key, error=str(e))
            return False, None

        if not raw:
            return False, None

        try:
            return True, json.loads(raw, parse_constant=reject_json_constant)
        except ValueError as e:
            logger.warning("backup_section_unparseable", key=key, error=str(e))
            return False, None

    async def collect(
        self,
        store: KeyValueStoreInterface,
        sections: tuple[str, ...] = SECTIONS,
        now: Optional[datetime] = None,
    ) -> BackupDocument:
        """
        Collect all sections into a backup document.

        For a renamed section the current key is read first; when it is
        empty the legacy key is read and exported under its legacy name.

        Args:
            store: The live key-value store
            sections: Section names to collect
            now: Timestamp to stamp into the backup (defaults to now)

        Returns:
            The backup document
        """
        document: BackupDocument = {}

        for name in sections:
            candidates = [name]
            if name in LEGACY_ALIASES:
                candidates.append(LEGACY_ALIASES[name])

            for candidate in candidates:
                key = storage_key(candidate, self._prefix)
                found, value = await self._read_section(store, key)
                if found:
                    document[key] = value
                    break

        document[BACKUP_DATE_KEY] = iso_timestamp(now or datetime.now(timezone.utc))
        document[APP_VERSION_KEY] = self._app_version

        logger.info(
            "backup_collected",
            sections=[key for key in document if key not in (BACKUP_DATE_KEY, APP_VERSION_KEY)],
        )
        return document

    def filename(self, now: Optional[datetime] = None) -> str:
        """Backup file name: <app-name>_yedek_<YYYY-MM-DD>.json"""
        now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
        return f"{self._app_name}_yedek_{now.date().isoformat()}.json"

    @staticmethod
    def serialize(document: BackupDocument) -> str:
        """Serialize a backup document as indented JSON."""
        return json.dumps(document, indent=2, ensure_ascii=False, allow_nan=False)
