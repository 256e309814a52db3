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
Declarative field rules for the Task resource.

Each field's constraints live in a single ``FieldRule`` record; the validator
interprets the table generically. Adding a field means adding a row here.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Optional, Tuple

from ..models.task import TaskPriority, TaskStatus

EMAIL_MAX_LENGTH = 254

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s.]+(\.[^@\s.]+)+$")
_DATETIME_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}(:\d{2}(\.\d{1,9})?)?([Zz]|[+-]\d{2}:\d{2})?$"
)


def is_email(value: str) -> bool:
    return len(value) <= EMAIL_MAX_LENGTH and _EMAIL_RE.match(value) is not None


def is_iso_datetime(value: str) -> bool:
    """True for ISO-8601 date-times that name a real calendar instant."""
    if not _DATETIME_RE.match(value):
        return False
    normalized = value
    if normalized[-1] in "Zz":
        normalized = normalized[:-1] + "+00:00"
    # fromisoformat only accepts up to microsecond precision
    match = re.search(r"\.(\d+)", normalized)
    if match and len(match.group(1)) > 6:
        normalized = normalized.replace(match.group(0), "." + match.group(1)[:6], 1)
    try:
        datetime.fromisoformat(normalized)
    except ValueError:
        return False
    return True


FORMAT_CHECKS: Dict[str, Callable[[str], bool]] = {
    "email": is_email,
    "date-time": is_iso_datetime,
}

FORMAT_DESCRIPTIONS: Dict[str, str] = {
    "email": "a valid email address",
    "date-time": "an ISO-8601 date-time (e.g. 2026-01-31T17:00:00Z)",
}


@dataclass(frozen=True)
class FieldRule:
    """Constraints for one wire field.

    ``name`` is the camelCase wire name, ``attr`` the Task attribute it maps to.
    ``required`` applies to create; on update every field is optional but a
    required field can never be set to null.
    """

    name: str
    attr: str
    type: type = str
    required: bool = False
    read_only: bool = False
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    enum: Optional[Tuple[str, ...]] = None
    format: Optional[str] = None
    filterable: bool = False
    # false: the server decides the initial value and create ignores the key
    settable_on_create: bool = True

    @property
    def nullable(self) -> bool:
        # status has a server default but is never optional once stored
        return not self.required and self.enum is None


TASK_FIELD_RULES: Tuple[FieldRule, ...] = (
    FieldRule("id", "id", read_only=True),
    FieldRule("title", "title", required=True, min_length=1, max_length=200),
    FieldRule("description", "description", max_length=2000),
    FieldRule(
        "priority",
        "priority",
        required=True,
        enum=tuple(p.value for p in TaskPriority),
        filterable=True,
    ),
    FieldRule("assigneeEmail", "assignee_email", format="email"),
    FieldRule("dueDate", "due_date", format="date-time"),
    FieldRule(
        "status",
        "status",
        enum=tuple(s.value for s in TaskStatus),
        filterable=True,
        settable_on_create=False,
    ),
    FieldRule("createdAt", "created_at", read_only=True),
    FieldRule("updatedAt", "updated_at", read_only=True),
)

RULES_BY_NAME: Dict[str, FieldRule] = {rule.name: rule for rule in TASK_FIELD_RULES}
