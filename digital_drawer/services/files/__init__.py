"""Backup file services package."""

from digital_drawer.services.files.backup_files import (
    BackupFileError,
    BackupFileReadError,
    BackupFileService,
    FileTooLargeError,
    InvalidBackupJSONError,
    reject_json_constant,
)

__all__ = [
    "BackupFileError",
    "BackupFileReadError",
    "BackupFileService",
    "FileTooLargeError",
    "InvalidBackupJSONError",
    "reject_json_constant",
]
