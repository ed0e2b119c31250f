from pathlib import Path
from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from taskgate.engine import AgentCache, JobManager, JsonFileJobStore
from taskgate.engine.agents.echo import build_echo_agent


@pytest_asyncio.fixture
async def job_manager(tmp_path: Path) -> JobManager:
    """A job manager over a JSON store in a temp dir, driving the echo shell agent."""
    return JobManager(
        store=JsonFileJobStore(tmp_path / "jobs.json"),
        agent_factory=build_echo_agent,
        agent_cache=AgentCache(max_size=4),
        tick_interval=0.01,
    )


@pytest_asyncio.fixture(name="client")
async def client_fixture(job_manager: JobManager) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client bound to an app that uses ``job_manager``.

    The ASGI transport does not run the lifespan, so the worker loop is not
    started; tests advance jobs with ``job_manager.try_advance()``.
    """
    from taskgate.server.main import create_app
    from taskgate.server.services.manager import set_job_manager

    app = create_app(job_manager)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    set_job_manager(None)
