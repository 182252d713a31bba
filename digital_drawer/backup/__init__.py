"""Backup engine package: collect, validate, restore."""

from digital_drawer.backup.collector import BackupCollector
from digital_drawer.backup.restorer import BackupRestorer, RestoreError
from digital_drawer.backup.summary import summarize
from digital_drawer.backup.validator import BackupValidator, JsonContentScanner

__all__ = [
    "BackupCollector",
    "BackupRestorer",
    "BackupValidator",
    "JsonContentScanner",
    "RestoreError",
    "summarize",
]
