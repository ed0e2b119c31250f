"""SQLAlchemy async job store.

Usage
-----

- Create an async engine with ``create_engine``.
- Create tables with ``create_all`` (``SqlJobStore.initialize`` does this).
- Create a session factory with ``create_sessionmaker``.

Transaction model
-----------------

``save_all`` rewrites the job table inside one transaction: every current
job is merged and rows for jobs no longer present are deleted. A reader
never sees a half-written set.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import List, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from taskgate.core.logging_config import get_logger

from ..errors import StoreError
from ..schemas.domain import Job
from .base import BaseJobStore
from .models import Base, JobRow

logger = get_logger(__name__)


def create_engine(db_url: str) -> AsyncEngine:
    """Create an async SQLAlchemy engine.

    Postgres URLs are normalized to the asyncpg driver and bare ``sqlite://``
    URLs to aiosqlite.
    """
    url = re.sub(r"^postgres(?:ql)?(?:\+[a-z0-9_]+)?://", "postgresql+asyncpg://", db_url, count=1)
    url = re.sub(r"^sqlite://", "sqlite+aiosqlite://", url, count=1)
    return create_async_engine(url, pool_pre_ping=True)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


class SqlJobStore(BaseJobStore):
    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._session_factory = create_sessionmaker(engine)
        self._initialized = False

    @classmethod
    def from_url(cls, db_url: str) -> "SqlJobStore":
        return cls(create_engine(db_url))

    async def initialize(self) -> None:
        if not self._initialized:
            await create_all(self._engine)
            self._initialized = True

    async def dispose(self) -> None:
        await self._engine.dispose()

    async def _read(self) -> List[Job]:
        await self.initialize()
        async with self._session_factory() as s:
            result = await s.execute(select(JobRow).order_by(JobRow.position))
            rows = result.scalars().all()
        return [Job.model_validate_json(row.data) for row in rows]

    async def save_all(self, jobs: Sequence[Job]) -> None:
        await self.initialize()
        now = datetime.now(timezone.utc)
        ids = [job.id for job in jobs]
        try:
            async with self._session_factory() as s:
                async with s.begin():
                    if ids:
                        await s.execute(delete(JobRow).where(JobRow.id.not_in(ids)))
                    else:
                        await s.execute(delete(JobRow))
                    for position, job in enumerate(jobs):
                        await s.merge(
                            JobRow(
                                id=job.id,
                                position=position,
                                status=job.status.value,
                                data=job.model_dump_json(),
                                created_at=job.created_at,
                                updated_at=now,
                            )
                        )
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to save jobs: {e}") from e
