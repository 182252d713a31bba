"""
Audit Logger

DESIGN DECISION: Every backup export and restore attempt is logged.
This provides:
1. Traceability of what was overwritten
2. The real cause behind the generic errors shown to the user
3. A record of partial restores (which keys were already written)

The audit logger:
- Is async so flows can await it uniformly
- Never raises (a logging failure must not break a restore)
- Supports correlation IDs to trace the events of one user action
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from digital_drawer.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Writes structured events to the local log. Events are kept in memory
    as well, so the host can show recent activity.
    """

    def __init__(self, history_size: int = 100):
        """
        Initialize audit logger.

        Args:
            history_size: How many recent events to keep in memory.
        """
        self._logger = structlog.get_logger("digital_drawer.audit")
        self._history_size = history_size
        self._events: list[AuditEvent] = []

    @property
    def recent_events(self) -> list[AuditEvent]:
        """Recent events, newest first."""
        return list(reversed(self._events))

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was logged.
        """
        self._events.append(event)
        del self._events[:-self._history_size]

        log_dict = event.to_log_dict()

        try:
            if event.severity.value in ("error", "critical"):
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except (OSError, ValueError, TypeError):
            # Broken log handler; the event is still kept in memory
            return False

        return True

    async def log_backup_exported(
        self,
        filename: str,
        sections: list[str],
        correlation_id: UUID,
    ) -> None:
        """Log a successful export."""
        await self.log(AuditEventBuilder.backup_exported(
            filename=filename,
            sections=sections,
            correlation_id=correlation_id,
        ))

    async def log_backup_export_failed(
        self,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log an export failure."""
        await self.log(AuditEventBuilder.backup_export_failed(
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    async def log_backup_file_rejected(
        self,
        reason: str,
        error_code: str,
        correlation_id: UUID,
        filename: Optional[str] = None,
    ) -> None:
        """Log a file rejected before validation (size, unreadable, bad JSON)."""
        await self.log(AuditEventBuilder.backup_file_rejected(
            reason=reason,
            error_code=error_code,
            correlation_id=correlation_id,
            filename=filename,
        ))

    async def log_validation_failed(
        self,
        reason: str,
        correlation_id: UUID,
    ) -> None:
        """Log a validator rejection."""
        await self.log(AuditEventBuilder.backup_validation_failed(
            reason=reason,
            correlation_id=correlation_id,
        ))

    async def log_restore_started(
        self,
        sections: list[str],
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.backup_restore_started(
            sections=sections,
            correlation_id=correlation_id,
        ))

    async def log_restored(
        self,
        written_keys: list[str],
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.backup_restored(
            written_keys=written_keys,
            correlation_id=correlation_id,
        ))

    async def log_restore_failed(
        self,
        failed_key: Optional[str],
        written_keys: list[str],
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a storage failure during restore."""
        await self.log(AuditEventBuilder.backup_restore_failed(
            failed_key=failed_key,
            written_keys=written_keys,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    async def log_premium_status(
        self,
        status: str,
        is_premium: bool,
    ) -> None:
        await self.log(AuditEventBuilder.premium_status_changed(
            status=status,
            is_premium=is_premium,
        ))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        await self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a restore).
    Pass it through all subsequent operations.
    """
    return uuid4()
