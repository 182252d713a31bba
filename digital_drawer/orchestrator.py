"""
Main Orchestrator for Digital Drawer

This module ties together all the components and defines the
end-to-end flows for:
1. Backup Export (store → collect → serialize → file)
2. Backup Restore (file → size check → parse → validate → restore)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is written to storage unless the validator accepted the file
- Every failure ends as a user-facing message, never a crash
- Every step is audited, including the real cause of generic errors

Phases run strictly one after another; a restore, once validation has
started, runs to completion or failure.
"""

from pathlib import Path
from typing import Any, Callable, Optional
from uuid import UUID

from digital_drawer.audit import AuditLogger, create_correlation_id
from digital_drawer.backup import (
    BackupCollector,
    BackupRestorer,
    BackupValidator,
    RestoreError,
    summarize,
)
from digital_drawer.backup.keys import METADATA_KEYS
from digital_drawer.models.backup import (
    BackupDocument,
    BackupSummary,
    BackupValidationResult,
    RestoreReport,
)
from digital_drawer.services.files import (
    BackupFileError,
    BackupFileReadError,
    BackupFileService,
    FileTooLargeError,
    InvalidBackupJSONError,
)
from digital_drawer.services.premium import PremiumService
from digital_drawer.services.storage import (
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
)


RESTORE_SUCCESS_MESSAGE = (
    "Data restored successfully. Please restart the app to load it."
)
RESTORE_FAILED_MESSAGE = (
    "An unexpected error occurred while restoring. Please try again."
)
EXPORT_FAILED_MESSAGE = "An error occurred while creating the backup."
FILE_UNREADABLE_MESSAGE = "Could not read the file"
INVALID_JSON_MESSAGE = "Invalid JSON format"


class BackupExportError(Exception):
    """Export failed; the message is safe to show to the user."""
    pass


class BackupExportFlow:
    """
    Orchestrates the backup export flow.

    Flow:
    1. Collect → read every section from the store
    2. Serialize → indented JSON
    3. Write → file in the export directory (the host shares it)
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        collector: Optional[BackupCollector] = None,
        file_service: Optional[BackupFileService] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._collector = collector or BackupCollector()
        self._file_service = file_service or BackupFileService()
        self._audit_logger = audit_logger

    async def build_backup(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[str, str]:
        """
        Collect and serialize a backup without writing it to disk.

        Returns:
            (filename, json_text)
        """
        correlation_id = correlation_id or create_correlation_id()

        document = await self._collector.collect(self._store)
        filename = self._collector.filename()
        text = self._collector.serialize(document)

        if self._audit_logger:
            await self._audit_logger.log_backup_exported(
                filename=filename,
                sections=[key for key in document if key not in METADATA_KEYS],
                correlation_id=correlation_id,
            )

        return filename, text

    async def export_backup(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[Path, BackupDocument]:
        """
        Collect a backup and write it to the export directory.

        Returns:
            (file_path, document)

        Raises:
            BackupExportError: If the file cannot be written
        """
        correlation_id = correlation_id or create_correlation_id()

        document = await self._collector.collect(self._store)
        filename = self._collector.filename()

        try:
            path = self._file_service.write_export(
                filename, self._collector.serialize(document)
            )
        except BackupFileError as e:
            if self._audit_logger:
                await self._audit_logger.log_backup_export_failed(
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise BackupExportError(EXPORT_FAILED_MESSAGE) from e

        if self._audit_logger:
            await self._audit_logger.log_backup_exported(
                filename=filename,
                sections=[key for key in document if key not in METADATA_KEYS],
                correlation_id=correlation_id,
            )

        return path, document


class BackupRestoreFlow:
    """
    Orchestrates the restore flow.

    Flow:
    1. Size check → reject oversized files before reading
    2. Read → decode file content
    3. Parse → JSON
    4. Validate → fail-fast checks, reject reason shown verbatim
    5. Restore → overwrite each section present in the backup

    Any failure before step 5 leaves storage untouched.
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        validator: Optional[BackupValidator] = None,
        restorer: Optional[BackupRestorer] = None,
        file_service: Optional[BackupFileService] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._validator = validator or BackupValidator()
        self._restorer = restorer or BackupRestorer()
        self._file_service = file_service or BackupFileService()
        self._audit_logger = audit_logger

    async def _load(
        self,
        read: Callable[[], str],
        correlation_id: UUID,
        filename: Optional[str] = None,
    ) -> tuple[Optional[Any], Optional[str]]:
        """
        Read and parse a backup.

        Returns:
            (parsed_document, error_message) - exactly one is set
        """
        try:
            document = self._file_service.parse(read())
        except FileTooLargeError as e:
            message = str(e)
            code = e.error_code
            cause = message
        except BackupFileReadError as e:
            message = FILE_UNREADABLE_MESSAGE
            code = e.error_code
            cause = str(e)
        except InvalidBackupJSONError as e:
            message = INVALID_JSON_MESSAGE
            code = e.error_code
            cause = str(e)
        else:
            return document, None

        if self._audit_logger:
            await self._audit_logger.log_backup_file_rejected(
                reason=cause,
                error_code=code,
                correlation_id=correlation_id,
                filename=filename,
            )
        return None, message

    async def _validate(
        self,
        document: Any,
        correlation_id: UUID,
    ) -> BackupValidationResult:
        result = self._validator.validate(document)
        if not result.accepted and self._audit_logger:
            await self._audit_logger.log_validation_failed(
                reason=result.reason,
                correlation_id=correlation_id,
            )
        return result

    async def _restore_document(
        self,
        document: Any,
        correlation_id: UUID,
    ) -> RestoreReport:
        result = await self._validate(document, correlation_id)
        if not result.accepted:
            return RestoreReport(success=False, message=result.reason)

        summary = summarize(document, self._restorer.key_prefix)

        if self._audit_logger:
            await self._audit_logger.log_restore_started(
                sections=[key for key, _ in self._restorer.plan(document)],
                correlation_id=correlation_id,
            )

        try:
            written = await self._restorer.restore(document, self._store)
        except RestoreError as e:
            if self._audit_logger:
                await self._audit_logger.log_restore_failed(
                    failed_key=e.failed_key,
                    written_keys=e.written_keys,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            message = RESTORE_FAILED_MESSAGE
            if e.is_partial:
                message += (
                    " Some data was already restored: "
                    f"{', '.join(e.written_keys)}."
                )
            return RestoreReport(
                success=False,
                message=message,
                written_keys=e.written_keys,
                failed_key=e.failed_key,
                summary=summary,
            )
        except Exception as e:
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"stage": "restore"},
                    correlation_id=correlation_id,
                )
            return RestoreReport(
                success=False,
                message=RESTORE_FAILED_MESSAGE,
                summary=summary,
            )

        if self._audit_logger:
            await self._audit_logger.log_restored(
                written_keys=written,
                correlation_id=correlation_id,
            )

        return RestoreReport(
            success=True,
            message=RESTORE_SUCCESS_MESSAGE,
            written_keys=written,
            summary=summary,
        )

    async def preview(
        self,
        data: bytes,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[BackupValidationResult, Optional[BackupSummary]]:
        """
        Check an uploaded backup without writing anything.

        Used for the confirmation step before a restore.

        Returns:
            (validation_result, summary) - summary only when accepted
        """
        correlation_id = correlation_id or create_correlation_id()

        document, error = await self._load(
            lambda: self._file_service.decode_upload(data), correlation_id
        )
        if error:
            return BackupValidationResult.rejected(error), None

        result = await self._validate(document, correlation_id)
        if not result.accepted:
            return result, None
        return result, summarize(document, self._restorer.key_prefix)

    async def restore_from_upload(
        self,
        data: bytes,
        filename: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> RestoreReport:
        """
        Restore from the raw bytes of an uploaded file.
        """
        correlation_id = correlation_id or create_correlation_id()

        document, error = await self._load(
            lambda: self._file_service.decode_upload(data), correlation_id, filename
        )
        if error:
            return RestoreReport(success=False, message=error)

        return await self._restore_document(document, correlation_id)

    async def restore_from_file(
        self,
        path: Path,
        correlation_id: Optional[UUID] = None,
    ) -> RestoreReport:
        """
        Restore from a backup file on disk.
        """
        correlation_id = correlation_id or create_correlation_id()
        path = Path(path)

        document, error = await self._load(
            lambda: self._file_service.read_import(path), correlation_id, path.name
        )
        if error:
            return RestoreReport(success=False, message=error)

        return await self._restore_document(document, correlation_id)


def create_app_components(
    store: Optional[KeyValueStoreInterface] = None,
) -> tuple[BackupExportFlow, BackupRestoreFlow, PremiumService]:
    """
    Factory function to create all application components.

    Args:
        store: Key-value store to use. Defaults to the JSON file store
               configured in settings.

    Returns:
        (export_flow, restore_flow, premium_service)
        The premium service still needs `await premium.init()`.
    """
    store = store or JsonFileKeyValueStore()
    audit_logger = AuditLogger()

    export_flow = BackupExportFlow(
        store=store,
        audit_logger=audit_logger,
    )

    restore_flow = BackupRestoreFlow(
        store=store,
        audit_logger=audit_logger,
    )

    # No purchase SDK on this platform; the service reports UNAVAILABLE
    premium = PremiumService(client=None, audit_logger=audit_logger)

    return export_flow, restore_flow, premium
