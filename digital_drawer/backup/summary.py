"""
Backup Summary

Describes a validated backup for the confirmation step: how many homes,
records and transactions it holds, broken down by kind.
"""

from collections import Counter
from typing import Any

from pydantic import TypeAdapter, ValidationError

from digital_drawer.backup.keys import (
    APP_VERSION_KEY,
    BACKUP_DATE_KEY,
    FINANCE_SAVINGS,
    FINANCE_TRANSACTIONS,
    HOME_HISTORY,
    HOME_HOMES,
    HOME_PROFILE,
    HOME_SELECTED_ID,
    HOME_XP,
    NAMESPACE_PREFIX,
    find_section_with_alias,
)
from digital_drawer.models.backup import BackupDocument, BackupSummary
from digital_drawer.models.records import HomeRecord, Transaction


OTHER = "other"

_HOME_RECORD = TypeAdapter(HomeRecord)
_TRANSACTION = TypeAdapter(Transaction)


def _section(document: BackupDocument, name: str, prefix: str) -> Any:
    key, found = find_section_with_alias(document, name, prefix)
    return document[key] if found else None


def _count_by_type(items: Any, adapter: TypeAdapter) -> dict[str, int]:
    """Count items by their `type`; items that do not parse count as other."""
    counts: Counter = Counter()
    if not isinstance(items, list):
        return {}
    for item in items:
        try:
            counts[adapter.validate_python(item).type] += 1
        except ValidationError:
            counts[OTHER] += 1
    return dict(counts)


def summarize(document: BackupDocument, prefix: str = NAMESPACE_PREFIX) -> BackupSummary:
    """Build the summary of a backup document the validator accepted."""
    homes = _section(document, HOME_HOMES, prefix)
    savings = _section(document, FINANCE_SAVINGS, prefix)
    backup_date = document.get(BACKUP_DATE_KEY)
    app_version = document.get(APP_VERSION_KEY)

    return BackupSummary(
        backup_date=str(backup_date) if backup_date is not None else None,
        app_version=str(app_version) if app_version is not None else None,
        has_profile=_section(document, HOME_PROFILE, prefix) is not None,
        home_count=len(homes) if isinstance(homes, list) else 0,
        selected_home_id=_section(document, HOME_SELECTED_ID, prefix),
        xp=_section(document, HOME_XP, prefix),
        records_by_type=_count_by_type(_section(document, HOME_HISTORY, prefix), _HOME_RECORD),
        transactions_by_type=_count_by_type(
            _section(document, FINANCE_TRANSACTIONS, prefix), _TRANSACTION
        ),
        savings_goal_count=len(savings) if isinstance(savings, list) else 0,
    )
