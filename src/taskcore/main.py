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
Main TaskCore FastAPI application.

Wires the in-memory task store, the task router and the shared error
handlers together. The store is created with the app (not in the lifespan)
so that a bare ``TestClient(app)`` already has a working store.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest  # type: ignore

from . import __version__
from .api.errors import register_exception_handlers
from .api.routers.tasks_router import router as tasks_router
from .config import ServerConfig
from .store import InMemoryTaskStore, TaskRepository

logger = logging.getLogger(__name__)

SERVICE_NAME = "taskcore-api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting TaskCore API application...")
    logger.info(f"Task routes mounted at {app.state.config.api_prefix or '/'}")
    yield
    # Shutdown
    store: TaskRepository = app.state.task_store
    logger.info(f"Shutting down TaskCore API application ({store.count()} tasks discarded)")


def create_app(
    config: Optional[ServerConfig] = None,
    store: Optional[TaskRepository] = None,
) -> FastAPI:
    """
    Build the ASGI application.

    Args:
        config: Settings to use (defaults to ``ServerConfig.from_env()``)
        store: Task store to serve (defaults to a fresh ``InMemoryTaskStore``)
    """
    config = config or ServerConfig.from_env()

    app = FastAPI(
        title="TaskCore API",
        description="In-memory task management with schema-driven validation",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.task_store = store if store is not None else InMemoryTaskStore()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_allow_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(tasks_router, prefix=config.api_prefix, tags=["Tasks"])

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "service": SERVICE_NAME, "version": __version__}

    @app.get("/readyz")
    async def ready_check():
        task_store: TaskRepository = app.state.task_store
        return {"status": "ready", "deps": {"store": "ok", "tasks": task_store.count()}}

    @app.get("/")
    async def root():
        return {"message": "Welcome to TaskCore API", "version": __version__, "docs": "/docs", "health": "/health"}

    if config.enable_metrics_endpoint:
        @app.get("/metrics")
        async def metrics():
            return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app


app = create_app()


def run() -> None:
    """Console entrypoint: configure logging and serve with uvicorn."""
    import uvicorn
    from .logging_setup import setup_logging

    config: ServerConfig = app.state.config
    setup_logging(config.log_level)
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        proxy_headers=True,
        forwarded_allow_ips="*",
        log_config=None,
    )


if __name__ == "__main__":
    run()
