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
Exception handlers that turn typed outcomes into the shared error body.

Every error response looks like::

    {"error": {"kind": "...", "message": "...", "details": [{field, kind, message}]}}

``details`` is only present for field-level failures.
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import FastAPI, Request  # pyright: ignore[reportMissingImports]
from fastapi.exceptions import RequestValidationError  # pyright: ignore[reportMissingImports]
from fastapi.responses import JSONResponse  # pyright: ignore[reportMissingImports]

from ..errors import (
    FieldViolation,
    TaskError,
    TaskInternalError,
    TaskValidationError,
    ViolationKind,
)
from ..models.errors import ErrorBody

logger = logging.getLogger(__name__)

GENERIC_INTERNAL_MESSAGE = "An unexpected error occurred while processing the request"

_REQUEST_ERROR_KINDS = {
    "missing": ViolationKind.REQUIRED,
    "json_invalid": ViolationKind.FORMAT,
}


def error_response(exc: TaskError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorBody.from_exception(exc).to_dict(),
    )


def _violations_from_request_error(exc: RequestValidationError) -> List[FieldViolation]:
    violations = []
    for err in exc.errors():
        # payloads are untyped dicts, so only the top-level location is meaningful
        loc = err.get("loc") or ("body",)
        field = str(loc[0])
        kind = _REQUEST_ERROR_KINDS.get(err.get("type", ""), ViolationKind.TYPE)
        message = "Request body must be a JSON object" if kind is ViolationKind.TYPE else err.get("msg", "Invalid request")
        violations.append(FieldViolation(field, kind, message))
    return violations


async def task_error_handler(request: Request, exc: TaskError) -> JSONResponse:
    if isinstance(exc, TaskInternalError):
        logger.error(f"Internal error on {request.method} {request.url.path}: {exc.message}", exc_info=exc)
        exc = TaskInternalError(GENERIC_INTERNAL_MESSAGE)
    return error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    violations = _violations_from_request_error(exc)
    logger.info(f"Rejected malformed request on {request.method} {request.url.path}")
    return error_response(TaskValidationError(violations))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return error_response(TaskInternalError(GENERIC_INTERNAL_MESSAGE))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskError, task_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
