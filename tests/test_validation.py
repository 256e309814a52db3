"""
Unit tests for taskcore.validation.

Covers the rule table interpretation for create, partial update and list
filters, including the all-violations-reported guarantee.
"""
import pytest

from taskcore.errors import TaskValidationError, ViolationKind
from taskcore.validation import (
    RULES_BY_NAME,
    validate_create,
    validate_filter,
    validate_update,
)
from taskcore.validation.rules import is_email, is_iso_datetime


def _violations(exc_info):
    return {v.field: v.kind for v in exc_info.value.violations}


class TestValidateCreate:
    """Tests for validate_create."""

    def test_minimal_payload(self):
        fields = validate_create({"title": "Write spec", "priority": "medium"})
        assert fields == {"title": "Write spec", "priority": "medium"}

    def test_full_payload_maps_wire_names(self, sample_task):
        fields = validate_create(sample_task)
        assert fields["assignee_email"] == "dev@example.com"
        assert fields["due_date"] == "2026-03-01T17:00:00Z"
        assert fields["description"] == "Draft the resource API design"

    def test_status_is_ignored_on_create(self):
        fields = validate_create({"title": "T", "priority": "low", "status": "in_progress"})
        assert "status" not in fields

    def test_invalid_status_is_ignored_on_create(self):
        fields = validate_create({"title": "T", "priority": "low", "status": "archived"})
        assert fields == {"title": "T", "priority": "low"}

    def test_missing_required_fields(self):
        with pytest.raises(TaskValidationError) as exc_info:
            validate_create({})
        assert _violations(exc_info) == {
            "title": ViolationKind.REQUIRED,
            "priority": ViolationKind.REQUIRED,
        }

    def test_reports_every_violation(self):
        """Empty title and unknown priority give exactly two entries."""
        with pytest.raises(TaskValidationError) as exc_info:
            validate_create({"title": "", "priority": "urgent"})
        violations = exc_info.value.violations
        assert len(violations) == 2
        assert _violations(exc_info) == {
            "title": ViolationKind.MIN_LENGTH,
            "priority": ViolationKind.ENUM,
        }
        assert all(v.message for v in violations)

    def test_title_length_bounds(self):
        assert validate_create({"title": "x" * 200, "priority": "low"})["title"] == "x" * 200
        with pytest.raises(TaskValidationError) as exc_info:
            validate_create({"title": "x" * 201, "priority": "low"})
        assert _violations(exc_info) == {"title": ViolationKind.MAX_LENGTH}

    def test_description_max_length(self):
        validate_create({"title": "T", "priority": "low", "description": "d" * 2000})
        with pytest.raises(TaskValidationError) as exc_info:
            validate_create({"title": "T", "priority": "low", "description": "d" * 2001})
        assert _violations(exc_info) == {"description": ViolationKind.MAX_LENGTH}

    def test_wrong_types(self):
        with pytest.raises(TaskValidationError) as exc_info:
            validate_create({"title": 42, "priority": ["high"], "description": True})
        assert _violations(exc_info) == {
            "title": ViolationKind.TYPE,
            "priority": ViolationKind.TYPE,
            "description": ViolationKind.TYPE,
        }

    def test_bad_formats(self):
        with pytest.raises(TaskValidationError) as exc_info:
            validate_create({
                "title": "T",
                "priority": "low",
                "assigneeEmail": "not-an-email",
                "dueDate": "next tuesday",
            })
        assert _violations(exc_info) == {
            "assigneeEmail": ViolationKind.FORMAT,
            "dueDate": ViolationKind.FORMAT,
        }

    def test_read_only_fields_rejected(self):
        with pytest.raises(TaskValidationError) as exc_info:
            validate_create({
                "id": "abc",
                "title": "T",
                "priority": "low",
                "createdAt": "2026-01-01T00:00:00Z",
            })
        assert _violations(exc_info) == {
            "id": ViolationKind.READ_ONLY,
            "createdAt": ViolationKind.READ_ONLY,
        }

    def test_unknown_keys_ignored(self):
        fields = validate_create({"title": "T", "priority": "low", "color": "blue"})
        assert "color" not in fields

    def test_null_optional_is_absent(self):
        fields = validate_create({"title": "T", "priority": "low", "description": None})
        assert "description" not in fields

    def test_null_required_is_rejected(self):
        with pytest.raises(TaskValidationError) as exc_info:
            validate_create({"title": None, "priority": "low"})
        assert _violations(exc_info) == {"title": ViolationKind.REQUIRED}

    def test_non_object_payload(self):
        with pytest.raises(TaskValidationError) as exc_info:
            validate_create(["title", "priority"])
        assert _violations(exc_info) == {"body": ViolationKind.TYPE}


class TestValidateUpdate:
    """Tests for validate_update."""

    def test_empty_payload_is_valid(self):
        assert validate_update({}) == {}

    def test_subset_of_fields(self):
        assert validate_update({"priority": "high"}) == {"priority": "high"}

    def test_same_rules_as_create(self):
        with pytest.raises(TaskValidationError) as exc_info:
            validate_update({"title": "", "status": "done"})
        assert _violations(exc_info) == {
            "title": ViolationKind.MIN_LENGTH,
            "status": ViolationKind.ENUM,
        }

    def test_required_fields_cannot_be_nulled(self):
        with pytest.raises(TaskValidationError) as exc_info:
            validate_update({"title": None, "priority": None, "status": None})
        assert set(_violations(exc_info)) == {"title", "priority", "status"}
        assert set(_violations(exc_info).values()) == {ViolationKind.REQUIRED}

    def test_null_clears_optional_field(self):
        assert validate_update({"assigneeEmail": None}) == {"assignee_email": None}

    def test_read_only_fields_rejected(self):
        with pytest.raises(TaskValidationError) as exc_info:
            validate_update({"updatedAt": "2026-01-01T00:00:00Z"})
        assert _violations(exc_info) == {"updatedAt": ViolationKind.READ_ONLY}


class TestValidateFilter:
    """Tests for validate_filter."""

    def test_no_filters(self):
        assert validate_filter({}) == {}

    def test_both_filters(self):
        assert validate_filter({"status": "pending", "priority": "high"}) == {
            "status": "pending",
            "priority": "high",
        }

    def test_unknown_keys_ignored(self):
        assert validate_filter({"title": "x", "sort": "asc", "priority": "low"}) == {"priority": "low"}

    def test_empty_values_treated_as_absent(self):
        assert validate_filter({"status": "", "priority": ""}) == {}

    def test_invalid_enum_values(self):
        with pytest.raises(TaskValidationError) as exc_info:
            validate_filter({"status": "archived", "priority": "urgent"})
        assert _violations(exc_info) == {
            "status": ViolationKind.ENUM,
            "priority": ViolationKind.ENUM,
        }


class TestFormatChecks:
    """Tests for the email and date-time format predicates."""

    @pytest.mark.parametrize("value", [
        "dev@example.com",
        "first.last+tag@sub.example.org",
    ])
    def test_valid_emails(self, value):
        assert is_email(value)

    @pytest.mark.parametrize("value", [
        "plainaddress",
        "@example.com",
        "dev@example",
        "dev@@example.com",
        "dev @example.com",
        "dev@" + "a" * 250 + ".com",
    ])
    def test_invalid_emails(self, value):
        assert not is_email(value)

    @pytest.mark.parametrize("value", [
        "2026-03-01T17:00:00Z",
        "2026-03-01T17:00:00+02:00",
        "2026-03-01T17:00:00.123456789Z",
        "2026-03-01T17:00",
    ])
    def test_valid_datetimes(self, value):
        assert is_iso_datetime(value)

    @pytest.mark.parametrize("value", [
        "2026-03-01",
        "2026-02-30T10:00:00Z",
        "2026-03-01T25:00:00Z",
        "yesterday",
    ])
    def test_invalid_datetimes(self, value):
        assert not is_iso_datetime(value)


def test_rule_table_declares_filterable_fields():
    filterable = {name for name, rule in RULES_BY_NAME.items() if rule.filterable}
    assert filterable == {"status", "priority"}
