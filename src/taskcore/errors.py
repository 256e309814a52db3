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
Typed outcomes raised by the validator and the task store.

The API layer is the only place that turns these into HTTP responses
(see ``taskcore.api.errors``). Nothing here knows about FastAPI.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence


class ErrorKind(str, enum.Enum):
    """Public error kinds carried in ``{"error": {"kind": ...}}``."""

    VALIDATION_ERROR = "ValidationError"
    NOT_FOUND = "NotFound"
    INTERNAL_ERROR = "InternalError"


class ViolationKind(str, enum.Enum):
    """Machine-readable reason a single field failed validation."""

    REQUIRED = "required"
    TYPE = "type"
    MIN_LENGTH = "min_length"
    MAX_LENGTH = "max_length"
    ENUM = "enum"
    FORMAT = "format"
    READ_ONLY = "read_only"


@dataclass(frozen=True)
class FieldViolation:
    field: str
    kind: ViolationKind
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "kind": self.kind.value, "message": self.message}


class TaskError(Exception):
    """Base class for every error the task service raises on purpose."""

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def details(self) -> List[FieldViolation]:
        return []


class TaskValidationError(TaskError):
    """One or more field constraints were violated.

    Always carries the complete list of violations, never just the first.
    """

    kind = ErrorKind.VALIDATION_ERROR
    status_code = 400

    def __init__(self, violations: Sequence[FieldViolation], message: str | None = None):
        self.violations = list(violations)
        if message is None:
            fields = ", ".join(v.field for v in self.violations)
            message = f"Request validation failed for: {fields}" if fields else "Request validation failed"
        super().__init__(message)

    @property
    def details(self) -> List[FieldViolation]:
        return list(self.violations)


class TaskNotFoundError(TaskError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")


class TaskInternalError(TaskError):
    """Unexpected failure inside the service; surfaced without internals."""

    kind = ErrorKind.INTERNAL_ERROR
    status_code = 500
