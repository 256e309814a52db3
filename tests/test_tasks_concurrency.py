"""
Concurrent request tests against the ASGI app.

Many overlapping requests are fired through httpx's ASGI transport; every
mutation must land completely and listing must stay consistent.
"""
import asyncio
from datetime import datetime

import httpx
import pytest

from taskcore.config import ServerConfig
from taskcore.main import create_app
from taskcore.store import InMemoryTaskStore


def _parse(stamp):
    return datetime.fromisoformat(stamp.replace("Z", "+00:00"))


@pytest.fixture
def asgi_app():
    return create_app(config=ServerConfig(), store=InMemoryTaskStore())


@pytest.mark.asyncio
async def test_concurrent_creates_are_all_stored(asgi_app):
    transport = httpx.ASGITransport(app=asgi_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        responses = await asyncio.gather(*[
            client.post("/tasks", json={"title": f"task-{i}", "priority": "low"})
            for i in range(40)
        ])
        assert all(r.status_code == 201 for r in responses)
        ids = [r.json()["id"] for r in responses]
        assert len(set(ids)) == 40

        listed = (await client.get("/tasks")).json()
        assert len(listed) == 40
        assert {t["id"] for t in listed} == set(ids)


@pytest.mark.asyncio
async def test_concurrent_updates_to_same_task(asgi_app):
    transport = httpx.ASGITransport(app=asgi_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        created = (await client.post("/tasks", json={"title": "shared", "priority": "low"})).json()
        task_id = created["id"]

        responses = await asyncio.gather(*[
            client.patch(f"/tasks/{task_id}", json={"description": f"rev-{i}", "priority": "high"})
            for i in range(20)
        ])
        assert all(r.status_code == 200 for r in responses)
        stamps = sorted(_parse(r.json()["updatedAt"]) for r in responses)
        assert len(set(stamps)) == 20

        final = (await client.get(f"/tasks/{task_id}")).json()
        assert final["title"] == "shared"
        assert final["priority"] == "high"
        assert final["description"] in {f"rev-{i}" for i in range(20)}
        assert _parse(final["updatedAt"]) == stamps[-1]


@pytest.mark.asyncio
async def test_concurrent_deletes_only_one_succeeds(asgi_app):
    transport = httpx.ASGITransport(app=asgi_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        created = (await client.post("/tasks", json={"title": "doomed", "priority": "low"})).json()

        responses = await asyncio.gather(*[
            client.delete(f"/tasks/{created['id']}") for _ in range(10)
        ])
        codes = sorted(r.status_code for r in responses)
        assert codes.count(204) == 1
        assert codes.count(404) == 9
