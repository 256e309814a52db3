"""
Data models for TaskCore.

This module provides the pydantic Task entity and the shared error body.
All imports are safe and don't trigger runtime dependencies.
"""

from .task import Task, TaskStatus, TaskPriority
from .errors import ErrorBody, ErrorInfo, FieldViolationModel

__all__ = ["Task", "TaskStatus", "TaskPriority", "ErrorBody", "ErrorInfo", "FieldViolationModel"]
