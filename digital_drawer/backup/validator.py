"""
Backup Validation

A backup file comes from outside the app and is untrusted. Before any of it
is written to storage it goes through these checks, IN ORDER, stopping at
the first problem:

1. The document is a JSON object
2. `_backup_date` is present
3. `_backup_date` is a valid timestamp
4. Every top-level key is on the allow-list
5. Homes (`home_homes` / `homes_list`) are an array of objects with numeric ids
6. History is an array of objects with non-empty ids
7. Transactions are an array of objects with non-empty ids and numeric amounts
8. Savings goals are an array
9. Deep content scan: every string and object key is length-limited and free
   of script-injection patterns; every array is length-limited

IMPORTANT: Validation NEVER fixes anything and never raises for bad input.
It returns a rejection whose reason is shown to the user verbatim.

NOTE: Homes require a NUMBER id while history records and transactions
accept any non-empty id. Homes are created with numeric timestamp ids;
records imported from older versions may carry string ids.
"""

import re
from datetime import datetime
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError

from digital_drawer.backup.keys import (
    ALLOWED_NAMES,
    BACKUP_DATE_KEY,
    FINANCE_SAVINGS,
    FINANCE_TRANSACTIONS,
    HOME_HISTORY,
    HOME_HOMES,
    HOMES_LIST,
    METADATA_KEYS,
    find_section,
    logical_name,
)
from digital_drawer.config import get_settings
from digital_drawer.models.backup import BackupValidationResult


FORBIDDEN_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE | re.ASCII)
    for pattern in (
        r"<script",
        r"javascript:",
        r"on\w+\s*=",  # onclick=, onload= ...
        r"eval\s*\(",
        r"Function\s*\(",
    )
)

_DATETIME = TypeAdapter(datetime)


class BackupRejected(Exception):
    """Internal signal for the first failed check."""
    pass


def is_number(value: Any) -> bool:
    """JSON number check (booleans are not numbers)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_blank(value: Any) -> bool:
    """
    A value is blank when it is null, "", 0 or false.

    Arrays and objects count as present, as they did in the mobile app.
    """
    if isinstance(value, (list, dict)):
        return False
    return not value


class JsonContentScanner:
    """
    Depth-first walk over a parsed JSON value.

    Every string value and every object key is checked for length and
    forbidden patterns; every array is checked for length before its
    items are visited. Paths use dots for object members and brackets
    for array items, starting at "root".

    The walk uses an explicit stack so deeply nested input cannot exhaust
    the interpreter's recursion limit.
    """

    def __init__(self, max_string_length: int, max_array_length: int):
        self.max_string_length = max_string_length
        self.max_array_length = max_array_length

    def check_string(self, value: str, path: str) -> None:
        if len(value) > self.max_string_length:
            raise BackupRejected(
                f'Field "{path}" is too long (max {self.max_string_length} characters)'
            )
        if any(pattern.search(value) for pattern in FORBIDDEN_PATTERNS):
            raise BackupRejected(f'Field "{path}" contains malicious content')

    def check_array(self, value: list, path: str) -> None:
        if len(value) > self.max_array_length:
            raise BackupRejected(
                f'Array "{path}" has too many items (max {self.max_array_length})'
            )

    def scan(self, value: Any, path: str = "root") -> None:
        """
        Walk a value. Raises BackupRejected on the first problem.
        """
        # (is_key, value, path); popped in document order
        stack: list[tuple[bool, Any, str]] = [(False, value, path)]

        while stack:
            is_key, current, current_path = stack.pop()

            if is_key:
                self.check_string(str(current), current_path)
            elif isinstance(current, str):
                self.check_string(current, current_path)
            elif isinstance(current, list):
                self.check_array(current, current_path)
                for index in range(len(current) - 1, -1, -1):
                    stack.append((False, current[index], f"{current_path}[{index}]"))
            elif isinstance(current, dict):
                children = []
                for key, child in current.items():
                    children.append((True, key, f"{current_path}.key"))
                    children.append((False, child, f"{current_path}.{key}"))
                stack.extend(reversed(children))
            # numbers, booleans and null need no checks


class BackupValidator:
    """
    Validates a parsed backup document before restore.

    Pure: no storage access, no side effects.
    """

    def __init__(
        self,
        max_string_length: Optional[int] = None,
        max_array_length: Optional[int] = None,
        key_prefix: Optional[str] = None,
    ):
        settings = get_settings()
        self._prefix = settings.storage.key_prefix if key_prefix is None else key_prefix
        self._scanner = JsonContentScanner(
            max_string_length=max_string_length or settings.backup.max_string_length,
            max_array_length=max_array_length or settings.backup.max_array_length,
        )

    # -------------------------------------------------------------------------
    # Metadata and keys
    # -------------------------------------------------------------------------

    def _check_metadata(self, document: dict) -> None:
        backup_date = document.get(BACKUP_DATE_KEY)
        if is_blank(backup_date):
            raise BackupRejected(f"Backup file is missing metadata ({BACKUP_DATE_KEY})")

        try:
            _DATETIME.validate_python(backup_date)
        except ValidationError:
            raise BackupRejected("Backup date has an invalid date format")

    def _logical_key(self, key: Any) -> Optional[str]:
        """Allow-listed name a document key stands for, or None."""
        if not isinstance(key, str):
            return None
        if key in METADATA_KEYS:
            return key
        name = logical_name(key, self._prefix)
        if name in ALLOWED_NAMES and name not in METADATA_KEYS:
            return name
        return None

    def _check_keys(self, document: dict) -> None:
        unexpected = []
        seen: dict[str, str] = {}
        duplicates = []

        for key in document:
            name = self._logical_key(key)
            if name is None:
                unexpected.append(str(key))
            elif name in seen:
                duplicates.append(f"{seen[name]} / {key}")
            else:
                seen[name] = key

        if unexpected:
            raise BackupRejected(f"Unexpected keys detected: {', '.join(unexpected)}")
        if duplicates:
            raise BackupRejected(f"Duplicate sections detected: {', '.join(duplicates)}")

    # -------------------------------------------------------------------------
    # Section structure
    # -------------------------------------------------------------------------

    def _section(self, document: dict, name: str) -> tuple[str, Any]:
        """(document_key, value) of a section; value is None when absent."""
        key, found = find_section(document, name, self._prefix)
        return key, document[key] if found else None

    @staticmethod
    def _require_array(key: str, value: Any) -> list:
        if not isinstance(value, list):
            raise BackupRejected(f"{key} must be an array")
        return value

    def _check_homes(self, document: dict) -> None:
        for name in (HOME_HOMES, HOMES_LIST):
            key, homes = self._section(document, name)
            if homes is None:
                continue
            for index, home in enumerate(self._require_array(key, homes), start=1):
                home_id = home.get("id") if isinstance(home, dict) else None
                if not is_number(home_id) or not home_id:
                    raise BackupRejected(f"Home #{index} has an invalid ID")

    def _check_history(self, document: dict) -> None:
        key, history = self._section(document, HOME_HISTORY)
        if history is None:
            return
        for index, record in enumerate(self._require_array(key, history), start=1):
            if not isinstance(record, dict) or is_blank(record.get("id")):
                raise BackupRejected(f"Record #{index} is missing an ID")

    def _check_transactions(self, document: dict) -> None:
        key, transactions = self._section(document, FINANCE_TRANSACTIONS)
        if transactions is None:
            return
        for index, transaction in enumerate(self._require_array(key, transactions), start=1):
            if not isinstance(transaction, dict) or is_blank(transaction.get("id")):
                raise BackupRejected(f"Transaction #{index} is missing an ID")
            if "amount" in transaction and not is_number(transaction["amount"]):
                raise BackupRejected(f"Transaction #{index} has an invalid amount")

    def _check_savings(self, document: dict) -> None:
        key, savings = self._section(document, FINANCE_SAVINGS)
        if savings is not None:
            self._require_array(key, savings)

    # -------------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------------

    def validate(self, document: Any) -> BackupValidationResult:
        """
        Run all checks in order, stopping at the first failure.

        Args:
            document: The parsed backup (any JSON value)

        Returns:
            Accepted, or rejected with the reason
        """
        if not isinstance(document, dict):
            return BackupValidationResult.rejected("Backup data has an invalid format")

        try:
            self._check_metadata(document)
            self._check_keys(document)
            self._check_homes(document)
            self._check_history(document)
            self._check_transactions(document)
            self._check_savings(document)
            self._scanner.scan(document)
        except BackupRejected as e:
            return BackupValidationResult.rejected(str(e))

        return BackupValidationResult.ok()
