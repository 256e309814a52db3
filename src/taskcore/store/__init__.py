"""Task storage: the repository interface and its in-memory implementation."""

from .base import TaskRepository
from .memory import InMemoryTaskStore

__all__ = ["TaskRepository", "InMemoryTaskStore"]
