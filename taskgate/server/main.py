"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS),
and includes all API routers. The lifespan loads persisted jobs and runs the
job worker for as long as the application is up.
"""

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskgate import __version__
from taskgate.core.logging_config import get_logger, setup_logging
from taskgate.engine import JobManager

from .api.v1 import health, sessions, tasks
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .services.manager import get_job_manager, set_job_manager

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Startup loads the job store (failing any job interrupted by a crash) and
    starts the worker loop. Shutdown stops the worker.
    """
    logger.info("Starting up taskgate server...")
    manager = get_job_manager()
    try:
        await manager.load()
    except Exception as e:
        logger.error(f"Job store load failed: {e}", exc_info=True)
        raise
    manager.start()

    yield

    logger.info("Shutting down taskgate server...")
    await manager.stop()


def create_app(job_manager: Optional[JobManager] = None) -> FastAPI:
    if job_manager is not None:
        set_job_manager(job_manager)

    app = FastAPI(
        title=constant.PROJECT_NAME,
        description="""
        taskgate Server API

        Submit agent tasks, follow their logs and transcripts, and approve or
        reject dangerous tool calls before they run.
        """,
        version=__version__,
        openapi_url=f"{constant.API_V1_STR}/openapi.json",
        docs_url=f"{constant.API_V1_STR}/docs",
        redoc_url=f"{constant.API_V1_STR}/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(tasks.router, prefix=f"{constant.API_V1_STR}/tasks", tags=["tasks"])
    app.include_router(sessions.router, prefix=f"{constant.API_V1_STR}/sessions", tags=["sessions"])
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve ``app`` with uvicorn."""
    uvicorn.run(
        "taskgate.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )
