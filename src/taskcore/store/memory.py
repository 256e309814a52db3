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
In-memory task store.

Tasks live in an insertion-ordered dict keyed by id, so listing always
follows creation order. A single re-entrant lock serializes every call;
stored Task objects are frozen, so handing them out needs no copying.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Set

from ..errors import TaskInternalError, TaskNotFoundError
from ..models.task import Task, TaskStatus
from .base import TaskRepository

logger = logging.getLogger(__name__)

MAX_ID_ATTEMPTS = 8
_TICK = timedelta(microseconds=1)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


class InMemoryTaskStore(TaskRepository):
    """Process-local task store. Nothing survives a restart."""

    def __init__(
        self,
        id_factory: Callable[[], str] = _new_id,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._tasks: Dict[str, Task] = {}
        # every id ever handed out, deleted ones included
        self._issued_ids: Set[str] = set()
        self._id_factory = id_factory
        self._clock = clock
        self._last_timestamp: Optional[datetime] = None
        self._lock = threading.RLock()

    def _next_timestamp(self) -> datetime:
        """Wall-clock time, nudged forward so it never repeats or goes back."""
        now = self._clock()
        if self._last_timestamp is not None and now <= self._last_timestamp:
            now = self._last_timestamp + _TICK
        self._last_timestamp = now
        return now

    def _allocate_id(self) -> str:
        for _ in range(MAX_ID_ATTEMPTS):
            task_id = self._id_factory()
            if task_id not in self._issued_ids:
                self._issued_ids.add(task_id)
                return task_id
            logger.warning(f"Task id collision on {task_id}, retrying")
        raise TaskInternalError(f"Could not allocate a unique task id after {MAX_ID_ATTEMPTS} attempts")

    def _require(self, task_id: str) -> Task:
        task = self._tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def create(self, fields: Mapping[str, Any]) -> Task:
        with self._lock:
            task_id = self._allocate_id()
            now = self._next_timestamp()
            values = {**fields, "status": TaskStatus.PENDING}
            task = Task(id=task_id, created_at=now, updated_at=now, **values)
            self._tasks[task_id] = task
            logger.info(f"Task {task_id} created (priority={task.priority.value})")
            return task

    def get(self, task_id: str) -> Task:
        with self._lock:
            return self._require(task_id)

    def list(self, filters: Optional[Mapping[str, str]] = None) -> List[Task]:
        filters = dict(filters or {})
        with self._lock:
            return [
                task
                for task in self._tasks.values()
                if all(getattr(task, attr) == value for attr, value in filters.items())
            ]

    def update(self, task_id: str, fields: Mapping[str, Any]) -> Task:
        with self._lock:
            current = self._require(task_id)
            if not fields:
                # empty partial update is a no-op; updated_at stays put
                return current
            merged = current.model_dump()
            merged.update(fields)
            merged["id"] = current.id
            merged["created_at"] = current.created_at
            merged["updated_at"] = self._next_timestamp()
            task = Task(**merged)
            self._tasks[task_id] = task
            logger.info(f"Task {task_id} updated ({', '.join(sorted(fields))})")
            return task

    def delete(self, task_id: str) -> None:
        with self._lock:
            self._require(task_id)
            del self._tasks[task_id]
            logger.info(f"Task {task_id} deleted")

    def count(self) -> int:
        with self._lock:
            return len(self._tasks)

    def clear(self) -> None:
        """Drop all tasks. Issued ids stay reserved."""
        with self._lock:
            self._tasks.clear()
