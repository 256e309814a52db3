# Copyright 2024 TaskCore Contributors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Table-driven validation for task payloads and list filters.

All three entry points are pure functions: they read the rule table, collect
every violation, and either return normalized fields keyed by Task attribute
name or raise a single ``TaskValidationError`` listing all of them.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..errors import FieldViolation, TaskValidationError, ViolationKind
from .rules import FORMAT_CHECKS, FORMAT_DESCRIPTIONS, TASK_FIELD_RULES, FieldRule

logger = logging.getLogger(__name__)

_TYPE_NAMES = {str: "string"}


def _check_value(rule: FieldRule, value: Any) -> Optional[FieldViolation]:
    """Return the first violated constraint of a non-null value, if any."""
    if not isinstance(value, rule.type):
        return FieldViolation(
            rule.name,
            ViolationKind.TYPE,
            f"{rule.name} must be a {_TYPE_NAMES.get(rule.type, rule.type.__name__)}",
        )
    if rule.enum is not None and value not in rule.enum:
        return FieldViolation(
            rule.name,
            ViolationKind.ENUM,
            f"{rule.name} must be one of: {', '.join(rule.enum)}",
        )
    if rule.min_length is not None and len(value) < rule.min_length:
        return FieldViolation(
            rule.name,
            ViolationKind.MIN_LENGTH,
            f"{rule.name} must be at least {rule.min_length} character(s) long",
        )
    if rule.max_length is not None and len(value) > rule.max_length:
        return FieldViolation(
            rule.name,
            ViolationKind.MAX_LENGTH,
            f"{rule.name} must be at most {rule.max_length} characters long",
        )
    if rule.format is not None and not FORMAT_CHECKS[rule.format](value):
        return FieldViolation(
            rule.name,
            ViolationKind.FORMAT,
            f"{rule.name} must be {FORMAT_DESCRIPTIONS[rule.format]}",
        )
    return None


def _require_object(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise TaskValidationError(
            [FieldViolation("body", ViolationKind.TYPE, "Request body must be a JSON object")]
        )
    return payload


def _raise_if_any(violations: List[FieldViolation], operation: str) -> None:
    if violations:
        logger.info(
            "Rejected %s payload: %s",
            operation,
            ", ".join(f"{v.field}={v.kind.value}" for v in violations),
        )
        raise TaskValidationError(violations)


def _validate_fields(
    payload: Mapping[str, Any],
    rules: Sequence[FieldRule],
    *,
    partial: bool,
) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    violations: List[FieldViolation] = []

    for rule in rules:
        if not partial and not rule.settable_on_create:
            continue

        if rule.name not in payload:
            if rule.required and not partial:
                violations.append(
                    FieldViolation(rule.name, ViolationKind.REQUIRED, f"{rule.name} is required")
                )
            continue

        if rule.read_only:
            violations.append(
                FieldViolation(
                    rule.name, ViolationKind.READ_ONLY, f"{rule.name} is set by the server and cannot be written"
                )
            )
            continue

        value = payload[rule.name]
        if value is None:
            if not rule.nullable:
                violations.append(
                    FieldViolation(rule.name, ViolationKind.REQUIRED, f"{rule.name} cannot be null")
                )
            elif partial:
                # explicit null clears an optional field on update
                fields[rule.attr] = None
            continue

        violation = _check_value(rule, value)
        if violation is not None:
            violations.append(violation)
        else:
            fields[rule.attr] = value

    _raise_if_any(violations, "update" if partial else "create")
    return fields


def validate_create(payload: Any, rules: Sequence[FieldRule] = TASK_FIELD_RULES) -> Dict[str, Any]:
    """
    Validate a create payload.

    Returns:
        Normalized fields keyed by Task attribute name. Unknown keys and
        null optional fields are dropped.

    Raises:
        TaskValidationError: listing every violated field.
    """
    return _validate_fields(_require_object(payload), rules, partial=False)


def validate_update(payload: Any, rules: Sequence[FieldRule] = TASK_FIELD_RULES) -> Dict[str, Any]:
    """
    Validate a partial update payload.

    Any subset of mutable fields may be present; an empty payload is valid
    and yields an empty dict. Optional fields set to null map to ``None``.
    """
    return _validate_fields(_require_object(payload), rules, partial=True)


def validate_filter(
    query_params: Mapping[str, Any], rules: Sequence[FieldRule] = TASK_FIELD_RULES
) -> Dict[str, str]:
    """
    Validate list filters.

    Only filterable fields are considered; unknown keys are ignored and empty
    values count as absent.
    """
    filters: Dict[str, str] = {}
    violations: List[FieldViolation] = []

    for rule in rules:
        if not rule.filterable:
            continue
        value = query_params.get(rule.name)
        if value is None or value == "":
            continue
        violation = _check_value(rule, value)
        if violation is not None:
            violations.append(violation)
        else:
            filters[rule.attr] = value

    _raise_if_any(violations, "filter")
    return filters
