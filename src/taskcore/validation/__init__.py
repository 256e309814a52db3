"""Schema validation for task payloads and list filters."""

from .rules import FieldRule, TASK_FIELD_RULES, RULES_BY_NAME
from .validator import validate_create, validate_update, validate_filter

__all__ = [
    "FieldRule",
    "TASK_FIELD_RULES",
    "RULES_BY_NAME",
    "validate_create",
    "validate_update",
    "validate_filter",
]
