import os
from datetime import datetime, timedelta, timezone


# ----------------------------------------------------------------------
# 1. Environment MUST be set before any imports happen
# ----------------------------------------------------------------------

os.environ.setdefault("ENV", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")


import pytest
from fastapi.testclient import TestClient

from taskcore.config import ServerConfig
from taskcore.main import create_app
from taskcore.store import InMemoryTaskStore


class SteppingClock:
    """Deterministic clock: every call returns the previous value plus ``step``."""

    def __init__(self, start=None, step=timedelta(seconds=1)):
        self.current = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self):
        value = self.current
        self.current = self.current + self.step
        return value


@pytest.fixture
def clock():
    return SteppingClock()


@pytest.fixture
def store(clock):
    return InMemoryTaskStore(clock=clock)


@pytest.fixture
def config():
    return ServerConfig()


@pytest.fixture
def app(config, store):
    return create_app(config=config, store=store)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def sample_task():
    """A valid create payload using every field."""
    return {
        "title": "Write spec",
        "description": "Draft the resource API design",
        "priority": "medium",
        "assigneeEmail": "dev@example.com",
        "dueDate": "2026-03-01T17:00:00Z",
    }
