from __future__ import annotations

import abc
from datetime import datetime, timezone
from typing import List, Sequence

from taskgate.core.logging_config import get_logger

from ..schemas.domain import Job, JobStatus
from ..transcript import format_log_line

logger = get_logger(__name__)

INTERRUPTED_LOG = "Job interrupted by unexpected server termination"
INTERRUPTED_ERROR = "Interrupted by unexpected server termination"


def recover_interrupted(jobs: Sequence[Job]) -> List[Job]:
    """Mark every job persisted as ``running`` as ``failed``.

    A ``running`` job on load means the process died mid-execution. It is
    never resumed.
    """
    recovered: List[Job] = []
    for job in jobs:
        if job.status == JobStatus.running:
            job.status = JobStatus.failed
            job.logs.append(format_log_line(INTERRUPTED_LOG))
            job.result = {"error": INTERRUPTED_ERROR}
            job.pending_tool_calls = None
            job.completed_at = datetime.now(timezone.utc)
            logger.warning(f"Recovered interrupted job {job.id} as failed")
        recovered.append(job)
    return recovered


class BaseJobStore(abc.ABC):
    """Shared load path for job stores: read raw jobs, then apply recovery."""

    async def load_all(self) -> List[Job]:
        return recover_interrupted(await self._read())

    @abc.abstractmethod
    async def save_all(self, jobs: Sequence[Job]) -> None: ...

    @abc.abstractmethod
    async def _read(self) -> List[Job]: ...
