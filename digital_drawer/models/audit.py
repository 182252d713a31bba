"""
Audit Models for Digital Drawer

Every backup export and every restore attempt is logged for audit purposes.
This provides:
1. Traceability of what was overwritten and when
2. Diagnostic information when a restore fails half-way
3. The underlying cause of errors the user only sees as a generic message

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every step of the export and restore flows has its own event type.
    """
    # Export
    BACKUP_EXPORTED = "backup_exported"
    BACKUP_EXPORT_FAILED = "backup_export_failed"

    # Import
    BACKUP_FILE_REJECTED = "backup_file_rejected"
    BACKUP_VALIDATION_FAILED = "backup_validation_failed"
    BACKUP_RESTORE_STARTED = "backup_restore_started"
    BACKUP_RESTORED = "backup_restored"
    BACKUP_RESTORE_FAILED = "backup_restore_failed"

    # Purchases
    PREMIUM_STATUS_CHANGED = "premium_status_changed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'backup', 'storage_key')"
    )
    entity_name: Optional[str] = Field(
        default=None,
        description="Name of the entity (file name, storage key)"
    )

    # Correlation - all events of one user action share this
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all events in one restore)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_name": self.entity_name,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.backup_exported(filename, sections, correlation_id)
        event = AuditEventBuilder.backup_restored(written_keys, correlation_id)
    """

    @staticmethod
    def backup_exported(
        filename: str,
        sections: list[str],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_EXPORTED,
            entity_type="backup",
            entity_name=filename,
            correlation_id=correlation_id,
            description=f"Backup exported: {filename}",
            details={
                "sections": sections,
            },
            is_user_action=True,
        )

    @staticmethod
    def backup_export_failed(
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_EXPORT_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="backup",
            correlation_id=correlation_id,
            description="Backup export failed",
            error_message=error_message,
        )

    @staticmethod
    def backup_file_rejected(
        reason: str,
        error_code: str,
        correlation_id: UUID,
        filename: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_FILE_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="backup",
            entity_name=filename,
            correlation_id=correlation_id,
            description="Backup file rejected before validation",
            error_code=error_code,
            error_message=reason,
            is_user_action=True,
        )

    @staticmethod
    def backup_validation_failed(
        reason: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="backup",
            correlation_id=correlation_id,
            description="Backup validation failed",
            error_message=reason,
        )

    @staticmethod
    def backup_restore_started(
        sections: list[str],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_RESTORE_STARTED,
            entity_type="backup",
            correlation_id=correlation_id,
            description=f"Restoring {len(sections)} sections",
            details={
                "sections": sections,
            },
            is_user_action=True,
        )

    @staticmethod
    def backup_restored(
        written_keys: list[str],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_RESTORED,
            entity_type="backup",
            correlation_id=correlation_id,
            description=f"Backup restored: {len(written_keys)} keys written",
            details={
                "written_keys": written_keys,
            },
        )

    @staticmethod
    def backup_restore_failed(
        failed_key: Optional[str],
        written_keys: list[str],
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_RESTORE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="storage_key",
            entity_name=failed_key,
            correlation_id=correlation_id,
            description="Restore stopped on a storage failure",
            error_message=error_message,
            details={
                "written_keys": written_keys,
                "partial": bool(written_keys),
            },
        )

    @staticmethod
    def premium_status_changed(
        status: str,
        is_premium: bool,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PREMIUM_STATUS_CHANGED,
            entity_type="premium",
            description=f"Premium service {status}",
            details={
                "is_premium": is_premium,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
