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

"""Response models for the shared error body ``{"error": {...}}``."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field  # pyright: ignore[reportMissingImports]

from ..errors import TaskError


class FieldViolationModel(BaseModel):
    field: str
    kind: str
    message: str


class ErrorInfo(BaseModel):
    kind: str = Field(..., description="ValidationError | NotFound | InternalError")
    message: str
    details: Optional[List[FieldViolationModel]] = None


class ErrorBody(BaseModel):
    error: ErrorInfo

    @classmethod
    def from_exception(cls, exc: TaskError) -> "ErrorBody":
        details = [FieldViolationModel(**v.to_dict()) for v in exc.details]
        return cls(
            error=ErrorInfo(
                kind=exc.kind.value,
                message=exc.message,
                details=details or None,
            )
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
