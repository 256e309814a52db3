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

from __future__ import annotations
import logging
from contextlib import contextmanager
from time import perf_counter
from typing import Any, Dict, Iterator, List
from fastapi import APIRouter, Depends, Request, Response  # pyright: ignore[reportMissingImports]
from prometheus_client import Counter, Gauge, Histogram  # pyright: ignore[reportMissingImports]

from ...errors import TaskError
from ...models import ErrorBody, Task
from ...store import TaskRepository
from ...validation import validate_create, validate_filter, validate_update

router = APIRouter()
logger = logging.getLogger(__name__)

# --- Observability ---
TASK_REQUESTS = Counter(
    "taskcore_task_requests_total", "Task API requests", ["operation", "outcome"]
)
TASK_REQUEST_LATENCY = Histogram(
    "taskcore_task_request_latency_seconds", "Task API latency seconds", ["operation"]
)
TASKS_STORED = Gauge("taskcore_tasks_stored", "Tasks currently held in the store")

_OUTCOMES = {
    "ValidationError": "validation_error",
    "NotFound": "not_found",
    "InternalError": "internal_error",
}

_ERROR_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    400: {"model": ErrorBody, "description": "Validation failed"},
    404: {"model": ErrorBody, "description": "Task not found"},
    500: {"model": ErrorBody, "description": "Internal error"},
}


# --- Dependencies ---
def get_task_store(request: Request) -> TaskRepository:
    return request.app.state.task_store


# --- Helpers ---
@contextmanager
def _observe(operation: str) -> Iterator[None]:
    """Count the outcome and time one operation; errors propagate unchanged."""
    started = perf_counter()
    outcome = "ok"
    try:
        yield
    except TaskError as exc:
        outcome = _OUTCOMES[exc.kind.value]
        raise
    except Exception:
        outcome = "internal_error"
        raise
    finally:
        TASK_REQUESTS.labels(operation, outcome).inc()
        TASK_REQUEST_LATENCY.labels(operation).observe(perf_counter() - started)


# --- Endpoints ---

@router.get(
    "/tasks",
    response_model=List[Task],
    response_model_exclude_none=True,
    responses={400: _ERROR_RESPONSES[400]},
)
async def list_tasks(
    request: Request,
    store: TaskRepository = Depends(get_task_store),
) -> List[Task]:
    """
    List tasks in creation order.

    Optional ``status`` and ``priority`` query parameters are exact-match
    filters combined with AND. Unknown parameters are ignored.
    """
    with _observe("list"):
        filters = validate_filter(request.query_params)
        return store.list(filters)


@router.post(
    "/tasks",
    response_model=Task,
    response_model_exclude_none=True,
    status_code=201,
    responses={400: _ERROR_RESPONSES[400], 500: _ERROR_RESPONSES[500]},
)
async def create_task(
    payload: Dict[str, Any],
    store: TaskRepository = Depends(get_task_store),
) -> Task:
    """Create a task. ``title`` and ``priority`` are required; status starts as pending."""
    with _observe("create"):
        fields = validate_create(payload)
        task = store.create(fields)
        TASKS_STORED.set(store.count())
        return task


@router.get(
    "/tasks/{task_id}",
    response_model=Task,
    response_model_exclude_none=True,
    responses={404: _ERROR_RESPONSES[404]},
)
async def get_task(
    task_id: str,
    store: TaskRepository = Depends(get_task_store),
) -> Task:
    with _observe("get"):
        return store.get(task_id)


_UPDATE_ROUTE = dict(
    response_model=Task,
    response_model_exclude_none=True,
    responses={400: _ERROR_RESPONSES[400], 404: _ERROR_RESPONSES[404]},
)


@router.patch("/tasks/{task_id}", **_UPDATE_ROUTE)
@router.put("/tasks/{task_id}", **_UPDATE_ROUTE)
async def update_task(
    task_id: str,
    payload: Dict[str, Any],
    store: TaskRepository = Depends(get_task_store),
) -> Task:
    """
    Partially update a task.

    Only fields present in the body change. The body is validated before the
    store is consulted, so an invalid body on an unknown id reports 400.
    """
    with _observe("update"):
        fields = validate_update(payload)
        return store.update(task_id, fields)


@router.delete(
    "/tasks/{task_id}",
    status_code=204,
    response_class=Response,
    responses={404: _ERROR_RESPONSES[404]},
)
async def delete_task(
    task_id: str,
    store: TaskRepository = Depends(get_task_store),
) -> Response:
    with _observe("delete"):
        store.delete(task_id)
        TASKS_STORED.set(store.count())
        return Response(status_code=204)
