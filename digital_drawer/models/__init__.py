"""
Data Models Package

This package contains all Pydantic models used in Digital Drawer.
"""

from digital_drawer.models.backup import (
    BackupDocument,
    BackupSummary,
    BackupValidationResult,
    RestoreReport,
)
from digital_drawer.models.records import (
    BillRecord,
    DocumentRecord,
    ExpenseTransaction,
    HomeProfile,
    HomeRecord,
    IncomeTransaction,
    RecordType,
    SavingsGoal,
    Transaction,
    TransactionType,
    WarrantyRecord,
)
from digital_drawer.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Backup models
    "BackupDocument",
    "BackupSummary",
    "BackupValidationResult",
    "RestoreReport",
    # Record models
    "BillRecord",
    "DocumentRecord",
    "ExpenseTransaction",
    "HomeProfile",
    "HomeRecord",
    "IncomeTransaction",
    "RecordType",
    "SavingsGoal",
    "Transaction",
    "TransactionType",
    "WarrantyRecord",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
