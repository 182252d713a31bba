"""
Backup File Service

Handles the file side of backup and restore:
- writing exported backups into the export directory
- the size gate applied to an imported file BEFORE it is read
- reading and JSON-parsing an imported file

The size gate bounds the raw file. The validator's string and array
limits bound the parsed content.
"""

import json
from pathlib import Path
from typing import Any, Optional

from digital_drawer.config import get_settings


def reject_json_constant(name: str) -> Any:
    """`parse_constant` hook: NaN and Infinity are not JSON."""
    raise ValueError(f"Non-standard JSON constant: {name}")


class BackupFileError(Exception):
    """Base exception for backup file handling."""

    error_code = "file_error"


class FileTooLargeError(BackupFileError):
    """The file exceeds the import size limit."""

    error_code = "file_too_large"

    def __init__(self, size_bytes: int, max_bytes: int):
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes
        super().__init__(
            f"File too large (max {max_bytes // (1024 * 1024)} MB)"
        )


class BackupFileReadError(BackupFileError):
    """The file could not be read."""

    error_code = "file_unreadable"


class InvalidBackupJSONError(BackupFileError):
    """The file content is not valid JSON."""

    error_code = "invalid_json"


class BackupFileService:
    """
    Reads and writes backup files on the local filesystem.
    """

    def __init__(
        self,
        export_dir: Optional[Path] = None,
        max_file_size_bytes: Optional[int] = None,
    ):
        settings = get_settings().backup
        self._export_dir = Path(export_dir or settings.export_dir)
        self._max_bytes = max_file_size_bytes or settings.max_file_size_bytes

    @property
    def export_dir(self) -> Path:
        return self._export_dir

    @property
    def max_file_size_bytes(self) -> int:
        return self._max_bytes

    def write_export(self, filename: str, text: str) -> Path:
        """
        Write an exported backup.

        Args:
            filename: Backup file name (no directories)
            text: Serialized backup

        Returns:
            Path of the written file

        Raises:
            BackupFileError: If the file cannot be written
        """
        if Path(filename).name != filename:
            raise BackupFileError(f"Backup file name must not contain directories: {filename}")

        path = self._export_dir / filename
        try:
            self._export_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise BackupFileError(f"Could not write backup file {path}: {e}")
        return path

    def check_size(self, size_bytes: int) -> None:
        """
        Reject files over the import limit.

        Raises:
            FileTooLargeError: If size_bytes exceeds the limit
        """
        if size_bytes > self._max_bytes:
            raise FileTooLargeError(size_bytes, self._max_bytes)

    def read_import(self, path: Path) -> str:
        """
        Read a backup file picked by the user.

        The size is checked from file metadata first, so an oversized
        file is never read into memory.

        Raises:
            FileTooLargeError: If the file is over the limit
            BackupFileReadError: If the file cannot be read
        """
        path = Path(path)
        try:
            size = path.stat().st_size
        except OSError as e:
            raise BackupFileReadError(f"Could not read {path}: {e}")

        self.check_size(size)

        try:
            return path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise BackupFileReadError(f"Could not read {path}: {e}")

    def decode_upload(self, data: bytes) -> str:
        """Size-check and decode an uploaded file's bytes."""
        self.check_size(len(data))
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise BackupFileReadError(f"Uploaded file is not UTF-8 text: {e}")

    @staticmethod
    def parse(text: str) -> Any:
        """
        Parse backup text as JSON.

        Raises:
            InvalidBackupJSONError: If the text is not valid JSON
        """
        try:
            return json.loads(text, parse_constant=reject_json_constant)
        except (ValueError, RecursionError) as e:
            # ValueError covers JSONDecodeError and the int digit limit
            raise InvalidBackupJSONError(f"Invalid JSON format: {e}")
