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

"""Storage interface for task resources.

The API layer depends only on ``TaskRepository``; a persistent engine can be
plugged in behind the same five operations without touching the routes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

from ..models.task import Task


class TaskRepository(ABC):
    """Base class for task stores."""

    @abstractmethod
    def create(self, fields: Mapping[str, Any]) -> Task:
        """
        Insert a new task built from validated fields.

        Args:
            fields: Output of ``validate_create`` (attribute names as keys)

        Returns:
            The stored Task with id, status and timestamps filled in
        """

    @abstractmethod
    def get(self, task_id: str) -> Task:
        """Return the task or raise ``TaskNotFoundError``."""

    @abstractmethod
    def list(self, filters: Optional[Mapping[str, str]] = None) -> List[Task]:
        """
        Return tasks matching every filter, in creation order.

        Args:
            filters: Attribute name -> exact value. Empty or None means all.
        """

    @abstractmethod
    def update(self, task_id: str, fields: Mapping[str, Any]) -> Task:
        """Merge validated fields into an existing task or raise ``TaskNotFoundError``."""

    @abstractmethod
    def delete(self, task_id: str) -> None:
        """Remove the task permanently or raise ``TaskNotFoundError``."""

    @abstractmethod
    def count(self) -> int:
        """Number of tasks currently stored."""
