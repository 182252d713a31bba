"""
Backup Models

A backup document itself is plain JSON (`dict[str, Any]`) and is never
persisted as a whole; only its sections are written back to storage.
The models here describe what happens to a document: validation outcome,
restore outcome and the summary shown before the user confirms.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


BackupDocument = dict[str, Any]


class BackupValidationResult(BaseModel):
    """
    Outcome of validating a backup document.

    Either accepted, or rejected with a human-readable reason that is
    shown to the user verbatim.
    """

    accepted: bool = Field(
        ...,
        description="Is the document safe to restore?"
    )
    reason: Optional[str] = Field(
        default=None,
        description="Why the document was rejected"
    )
    validated_at: datetime = Field(
        default_factory=datetime.utcnow
    )

    @classmethod
    def ok(cls) -> "BackupValidationResult":
        return cls(accepted=True)

    @classmethod
    def rejected(cls, reason: str) -> "BackupValidationResult":
        return cls(accepted=False, reason=reason)


class BackupSummary(BaseModel):
    """What a backup contains, for the confirmation step."""

    backup_date: Optional[str] = None
    app_version: Optional[str] = None
    has_profile: bool = False
    home_count: int = Field(default=0, ge=0)
    selected_home_id: Optional[Any] = None
    xp: Optional[Any] = None
    records_by_type: dict[str, int] = Field(default_factory=dict)
    transactions_by_type: dict[str, int] = Field(default_factory=dict)
    savings_goal_count: int = Field(default=0, ge=0)

    @property
    def record_count(self) -> int:
        return sum(self.records_by_type.values())

    @property
    def transaction_count(self) -> int:
        return sum(self.transactions_by_type.values())

    def describe(self) -> list[str]:
        """Short lines describing the backup for non-technical users."""
        lines = []
        if self.backup_date:
            lines.append(f"Backup date: {self.backup_date}")
        if self.app_version:
            lines.append(f"App version: {self.app_version}")
        lines.append(f"Homes: {self.home_count}")
        lines.append(f"Household records: {self.record_count}")
        lines.append(f"Transactions: {self.transaction_count}")
        lines.append(f"Savings goals: {self.savings_goal_count}")
        return lines


class RestoreReport(BaseModel):
    """
    Result of one import attempt.

    `message` is what the user sees. On a storage failure mid-restore,
    `written_keys` lists the keys that were already overwritten.
    """

    success: bool
    message: str
    written_keys: list[str] = Field(default_factory=list)
    failed_key: Optional[str] = None
    summary: Optional[BackupSummary] = None
    finished_at: datetime = Field(
        default_factory=datetime.utcnow
    )

    @property
    def is_partial(self) -> bool:
        """Did the restore stop after writing some keys?"""
        return not self.success and bool(self.written_keys)
