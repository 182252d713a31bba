"""
Tests for backup validation.

The validator runs its checks in a fixed order and reports only the
first problem, so several tests here pin that order down.
"""

import pytest

from digital_drawer.backup import BackupValidator, JsonContentScanner
from digital_drawer.backup.keys import ALLOWED_NAMES
from digital_drawer.backup.validator import BackupRejected, is_blank, is_number


DATE = "2024-01-01T00:00:00Z"


@pytest.fixture
def validator() -> BackupValidator:
    return BackupValidator(max_string_length=10000, max_array_length=5000, key_prefix="@")


def reason_of(validator: BackupValidator, document) -> str:
    result = validator.validate(document)
    assert result.accepted is False
    assert result.reason
    return result.reason


class TestScenarios:
    """End-to-end examples of accepted and rejected documents."""

    def test_transactions_only_backup_is_accepted(self, validator):
        """Test a minimal backup with one transaction."""
        result = validator.validate({
            "_backup_date": DATE,
            "finance_transactions": [{"id": 1, "amount": 50}],
        })
        assert result.accepted is True
        assert result.reason is None

    def test_script_in_history_description_is_rejected(self, validator):
        """Test that a script tag deep in a record is caught with its path."""
        reason = reason_of(validator, {
            "_backup_date": DATE,
            "home_history": [{"id": 1, "description": "<script>alert(1)</script>"}],
        })
        assert "home_history[0].description" in reason
        assert "malicious content" in reason

    def test_unparseable_date_is_rejected(self, validator):
        """Test that a bad backup date is rejected."""
        reason = reason_of(validator, {"_backup_date": "not-a-date"})
        assert "invalid date format" in reason

    def test_unexpected_key_is_named(self, validator):
        """Test that an unknown top-level key is named in the reason."""
        reason = reason_of(validator, {"_backup_date": DATE, "unexpected_key": 1})
        assert "unexpected_key" in reason

    def test_full_prefixed_backup_is_accepted(self, validator):
        """Test a backup as the app exports it (namespaced keys)."""
        document = {
            "@home_profile": {"title": "Evim", "ownerName": "Ayşe"},
            "@home_history": [
                {"id": 1700000000001, "type": "bill", "cost": "120", "subType": "electricity"},
                {"id": "1700000000002", "type": "warranty", "productName": "Buzdolabı"},
            ],
            "@homes_list": [{"id": 1700000000000, "title": "Evim"}],
            "@current_home_id": 1700000000000,
            "@home_xp": 40,
            "@finance_transactions": [{"id": 1, "type": "expense", "amount": 50.5}],
            "@finance_savings": [{"id": 2, "title": "Tatil", "targetAmount": 1000}],
            "_backup_date": DATE,
            "_app_version": "1.0.0",
        }
        assert validator.validate(document).accepted is True


class TestDocumentShape:
    """Checks 1-3: type and metadata."""

    @pytest.mark.parametrize("document", [None, [], "backup", 42, True])
    def test_non_object_is_rejected(self, validator, document):
        """Test that anything but an object is an invalid format."""
        assert "invalid format" in reason_of(validator, document)

    @pytest.mark.parametrize("backup_date", [None, "", 0, False])
    def test_blank_backup_date_is_missing(self, validator, backup_date):
        """Test that blank metadata counts as missing."""
        assert "missing metadata" in reason_of(validator, {"_backup_date": backup_date})

    def test_absent_backup_date_is_missing(self, validator):
        assert "missing metadata" in reason_of(validator, {"home_xp": 5})

    @pytest.mark.parametrize("backup_date", [
        "2024-01-01T00:00:00Z",
        "2024-01-01T10:30:00.123Z",
        "2024-01-01T10:30:00+03:00",
        "2024-01-01",
    ])
    def test_valid_dates_are_accepted(self, validator, backup_date):
        """Test common ISO-8601 forms."""
        assert validator.validate({"_backup_date": backup_date}).accepted is True

    @pytest.mark.parametrize("backup_date", ["yesterday", "2024-13-45", {"y": 2024}])
    def test_invalid_dates_are_rejected(self, validator, backup_date):
        assert "invalid date format" in reason_of(validator, {"_backup_date": backup_date})

    def test_missing_metadata_wins_over_unexpected_key(self, validator):
        """Test fail-fast order: metadata is checked before keys."""
        reason = reason_of(validator, {"unexpected_key": 1})
        assert "missing metadata" in reason
        assert "unexpected_key" not in reason


class TestAllowList:
    """Check 4: top-level keys."""

    def test_allow_list_has_eleven_names(self):
        assert len(ALLOWED_NAMES) == 11

    @pytest.mark.parametrize("name", sorted(ALLOWED_NAMES - {"_backup_date", "_app_version"}))
    def test_every_section_name_is_allowed_bare_and_prefixed(self, validator, name):
        """Test that each section is accepted with and without the namespace prefix."""
        for key in (name, f"@{name}"):
            result = validator.validate({"_backup_date": DATE, key: None})
            assert result.accepted is True, key

    @pytest.mark.parametrize("key", ["foo", "@foo", "@_backup_date", "@@home_xp", "HOME_XP"])
    def test_unknown_keys_are_rejected(self, validator, key):
        """Test that any key outside the allow-list is named."""
        reason = reason_of(validator, {"_backup_date": DATE, key: 1})
        assert key in reason

    def test_all_unexpected_keys_are_listed(self, validator):
        reason = reason_of(validator, {"_backup_date": DATE, "a": 1, "home_xp": 1, "b": 2})
        assert "a, b" in reason

    def test_same_section_twice_is_rejected(self, validator):
        """Test a section given under both its prefixed and bare name."""
        reason = reason_of(validator, {"_backup_date": DATE, "@home_xp": 1, "home_xp": 2})
        assert "Duplicate sections" in reason

    def test_unexpected_key_wins_over_bad_homes(self, validator):
        """Test fail-fast order: keys are checked before structure."""
        reason = reason_of(validator, {"_backup_date": DATE, "x": 1, "home_homes": "no"})
        assert "x" in reason
        assert "must be an array" not in reason


class TestHomes:
    """Check 5: homes need numeric ids."""

    def test_numeric_id_is_accepted(self, validator):
        result = validator.validate({"_backup_date": DATE, "homes_list": [{"id": 42}]})
        assert result.accepted is True

    def test_numeric_string_id_is_rejected_for_homes(self, validator):
        """Test homes are stricter than history records about id type."""
        reason = reason_of(validator, {"_backup_date": DATE, "homes_list": [{"id": "42"}]})
        assert "Home #1" in reason

    def test_numeric_string_id_is_accepted_for_history(self, validator):
        result = validator.validate({"_backup_date": DATE, "home_history": [{"id": "42"}]})
        assert result.accepted is True

    @pytest.mark.parametrize("home", [{"id": 0}, {"id": True}, {"id": None}, {}, "home", 7])
    def test_invalid_home_ids(self, validator, home):
        reason = reason_of(validator, {"_backup_date": DATE, "home_homes": [{"id": 1}, home]})
        assert "Home #2 has an invalid ID" in reason

    @pytest.mark.parametrize("key", ["home_homes", "homes_list", "@home_homes"])
    def test_homes_must_be_an_array(self, validator, key):
        reason = reason_of(validator, {"_backup_date": DATE, key: {"id": 1}})
        assert f"{key} must be an array" in reason

    def test_both_alias_names_are_checked(self, validator):
        reason = reason_of(validator, {
            "_backup_date": DATE,
            "home_homes": [{"id": 1}],
            "homes_list": [{"id": "1"}],
        })
        assert "Home #1" in reason


class TestHistory:
    """Check 6: history records need a non-empty id."""

    def test_index_is_one_based(self, validator):
        reason = reason_of(validator, {
            "_backup_date": DATE,
            "home_history": [{"id": 1}, {"id": 2}, {"description": "no id"}],
        })
        assert "Record #3 is missing an ID" in reason

    @pytest.mark.parametrize("record_id", ["", 0, None, False])
    def test_blank_ids_are_rejected(self, validator, record_id):
        reason = reason_of(validator, {"_backup_date": DATE, "home_history": [{"id": record_id}]})
        assert "Record #1" in reason

    def test_duplicate_ids_pass_through(self, validator):
        result = validator.validate({
            "_backup_date": DATE,
            "home_history": [{"id": 1}, {"id": 1}],
        })
        assert result.accepted is True

    def test_non_object_record_is_rejected(self, validator):
        reason = reason_of(validator, {"_backup_date": DATE, "home_history": ["record"]})
        assert "Record #1" in reason

    def test_history_must_be_an_array(self, validator):
        reason = reason_of(validator, {"_backup_date": DATE, "home_history": "none"})
        assert "home_history must be an array" in reason

    def test_null_section_is_skipped(self, validator):
        result = validator.validate({"_backup_date": DATE, "home_history": None})
        assert result.accepted is True

    def test_bad_homes_win_over_bad_history(self, validator):
        """Test fail-fast order between structure checks."""
        reason = reason_of(validator, {
            "_backup_date": DATE,
            "home_history": [{}],
            "home_homes": [{"id": "x"}],
        })
        assert "Home #1" in reason


class TestTransactions:
    """Check 7: transactions need an id and a numeric amount."""

    def test_missing_id(self, validator):
        reason = reason_of(validator, {
            "_backup_date": DATE,
            "finance_transactions": [{"id": 1}, {"amount": 5}],
        })
        assert "Transaction #2 is missing an ID" in reason

    @pytest.mark.parametrize("amount", ["50", None, True, [50]])
    def test_non_numeric_amount_is_rejected(self, validator, amount):
        reason = reason_of(validator, {
            "_backup_date": DATE,
            "finance_transactions": [{"id": 1, "amount": amount}],
        })
        assert "Transaction #1 has an invalid amount" in reason

    @pytest.mark.parametrize("amount", [0, 50, -12.5])
    def test_numeric_amounts_are_accepted(self, validator, amount):
        result = validator.validate({
            "_backup_date": DATE,
            "finance_transactions": [{"id": 1, "amount": amount}],
        })
        assert result.accepted is True

    def test_amount_is_optional(self, validator):
        result = validator.validate({
            "_backup_date": DATE,
            "finance_transactions": [{"id": "t-1", "category": "market"}],
        })
        assert result.accepted is True

    def test_transactions_must_be_an_array(self, validator):
        reason = reason_of(validator, {"_backup_date": DATE, "finance_transactions": {}})
        assert "finance_transactions must be an array" in reason


class TestSavings:
    """Check 8: savings goals are an array."""

    def test_savings_must_be_an_array(self, validator):
        reason = reason_of(validator, {"_backup_date": DATE, "finance_savings": {"id": 1}})
        assert "finance_savings must be an array" in reason

    def test_savings_elements_are_unconstrained(self, validator):
        result = validator.validate({
            "_backup_date": DATE,
            "finance_savings": [{}, {"title": "Araba"}, 3],
        })
        assert result.accepted is True


class TestContentScan:
    """Check 9: deep scan of strings, keys and arrays."""

    def test_string_at_limit_is_accepted(self, validator):
        result = validator.validate({"_backup_date": DATE, "home_profile": {"note": "a" * 10000}})
        assert result.accepted is True

    def test_string_over_limit_is_rejected(self, validator):
        reason = reason_of(validator, {"_backup_date": DATE, "home_profile": {"note": "a" * 10001}})
        assert "root.home_profile.note" in reason
        assert "10000" in reason

    def test_array_at_limit_is_accepted(self, validator):
        result = validator.validate({"_backup_date": DATE, "finance_savings": [0] * 5000})
        assert result.accepted is True

    def test_array_over_limit_is_rejected(self, validator):
        reason = reason_of(validator, {"_backup_date": DATE, "finance_savings": [0] * 5001})
        assert "root.finance_savings" in reason
        assert "5000" in reason

    def test_nested_array_over_limit_is_rejected(self, validator):
        reason = reason_of(validator, {
            "_backup_date": DATE,
            "home_profile": {"tags": [1] * 5001},
        })
        assert "root.home_profile.tags" in reason

    @pytest.mark.parametrize("payload", [
        "<SCRIPT>alert(1)</SCRIPT>",
        "JavaScript:alert(1)",
        "<img src=x onerror=alert(1)>",
        "<a OnClick = 'x'>",
        "eval (document.cookie)",
        "new Function('return 1')",
    ])
    def test_forbidden_patterns_are_rejected_at_any_depth(self, validator, payload):
        """Test each forbidden pattern deep inside nested containers."""
        reason = reason_of(validator, {
            "_backup_date": DATE,
            "home_profile": {"a": {"b": [{"c": payload}]}},
        })
        assert "root.home_profile.a.b[0].c" in reason
        assert "malicious content" in reason

    @pytest.mark.parametrize("text", [
        "Electricity bill for January",
        "Doğalgaz faturası - 350 TL",
        "https://example.com/receipt.pdf",
        "function of the boiler",
    ])
    def test_ordinary_text_passes(self, validator, text):
        result = validator.validate({"_backup_date": DATE, "home_history": [{"id": 1, "description": text}]})
        assert result.accepted is True

    def test_object_keys_are_scanned(self, validator):
        reason = reason_of(validator, {"_backup_date": DATE, "home_profile": {"onclick=": "x"}})
        assert "root.home_profile.key" in reason

    def test_metadata_strings_are_scanned(self, validator):
        reason = reason_of(validator, {"_backup_date": DATE, "_app_version": "<script>"})
        assert "root._app_version" in reason

    def test_first_problem_in_document_order_is_reported(self, validator):
        reason = reason_of(validator, {
            "_backup_date": DATE,
            "home_profile": {"a": "<script>", "b": "x" * 10001},
        })
        assert "root.home_profile.a" in reason
        assert "malicious content" in reason

    def test_custom_limits(self):
        validator = BackupValidator(max_string_length=25, max_array_length=2, key_prefix="@")
        assert "too long" in validator.validate({"_backup_date": DATE, "home_xp": "a" * 26}).reason
        assert "too many items" in validator.validate({"_backup_date": DATE, "home_xp": [1, 2, 3]}).reason


class TestJsonContentScanner:
    """Tests for the scanner on its own."""

    def test_deep_nesting_does_not_recurse(self):
        """Test nesting deeper than the recursion limit is walked."""
        value = "<script>"
        for _ in range(5000):
            value = [value]
        scanner = JsonContentScanner(max_string_length=100, max_array_length=10)
        with pytest.raises(BackupRejected, match="malicious content"):
            scanner.scan(value)

    def test_clean_value_passes(self):
        scanner = JsonContentScanner(max_string_length=100, max_array_length=10)
        scanner.scan({"a": [1, 2.5, None, True, {"b": "ok"}]})


class TestHelpers:
    """Tests for JSON type helpers."""

    @pytest.mark.parametrize("value,expected", [
        (1, True), (1.5, True), (0, True), (True, False), ("1", False), (None, False),
    ])
    def test_is_number(self, value, expected):
        assert is_number(value) is expected

    @pytest.mark.parametrize("value,expected", [
        (None, True), ("", True), (0, True), (False, True),
        ("a", False), (1, False), ([], False), ({}, False),
    ])
    def test_is_blank(self, value, expected):
        assert is_blank(value) is expected


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
