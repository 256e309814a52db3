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
Pydantic Task model for TaskCore API operations.

Attributes are snake_case in Python and camelCase on the wire
(``assignee_email`` <-> ``assigneeEmail``). Optional fields that are unset
are omitted from the JSON representation.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field  # pyright: ignore[reportMissingImports]
from pydantic.alias_generators import to_camel  # pyright: ignore[reportMissingImports]


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Task(BaseModel):
    """A persisted task. Instances are treated as immutable snapshots."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    id: str = Field(..., description="Server-generated unique identifier")
    title: str = Field(..., description="Task title (1-200 characters)")
    description: Optional[str] = Field(None, description="Free-form description (<= 2000 characters)")
    priority: TaskPriority = Field(..., description="Task priority")
    assignee_email: Optional[str] = Field(None, description="Email address of the assignee")
    due_date: Optional[str] = Field(None, description="ISO-8601 date-time, stored as submitted")
    status: TaskStatus = Field(TaskStatus.PENDING, description="Lifecycle status")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")
    updated_at: datetime = Field(..., description="Last modification timestamp (UTC)")

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict using wire (camelCase) names, unset optionals dropped."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
