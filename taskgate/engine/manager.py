"""Job manager: job arena, FIFO queue and single-worker loop.

``JobManager`` owns every ``Job`` in the process. It is the only writer of
the job map and the queue, and it exposes the operations used by the
boundary layer (create, look up, resolve approvals, append logs/messages).

Scheduling
----------

A background task ticks every ``tick_interval`` seconds and calls
``try_advance``. One ``asyncio.Lock`` guards the queue and the processing
flag, so "dequeue, mark running, claim the slot" is a single step and at
most one job is ever inside the turn runner. Approved jobs are pushed to the
front of the queue; new jobs go to the back.

Persistence
-----------

Every mutation ends with a full ``save_all`` of the job set. Save failures
are logged and swallowed; the in-memory state stays authoritative until the
next successful save.
"""

from __future__ import annotations

import asyncio
from collections import deque
from datetime import datetime, timezone
from typing import Any, Callable, Deque, Dict, List, Optional, Set

from taskgate.core.logging_config import get_logger

from .agent import Agent
from .cache import AgentCache
from .errors import AgentInitializationError, UnknownJobTypeError
from .policy import ApprovalGate, ApprovalPolicy
from .runtime import MAX_TURNS, OutcomeKind, TurnOutcome, TurnRunner
from .schemas.domain import ChatMessage, Job, JobStatus, JobType, MessageRole
from .store import JobStore
from .transcript import format_log_line, new_message

logger = get_logger(__name__)

AgentFactory = Callable[[Job], Agent]


class JobManager:
    def __init__(
        self,
        *,
        store: JobStore,
        agent_factory: AgentFactory,
        approval_policy: Optional[ApprovalPolicy] = None,
        agent_cache: Optional[AgentCache] = None,
        max_turns: int = MAX_TURNS,
        tick_interval: float = 1.0,
    ) -> None:
        if tick_interval <= 0:
            raise ValueError("tick_interval must be positive")
        self._store = store
        self._agent_factory = agent_factory
        self._agents = agent_cache if agent_cache is not None else AgentCache()
        self._agents.pin_when(self._agent_in_use)
        self._gate = ApprovalGate(approval_policy or ApprovalPolicy(), self)
        self._runner = TurnRunner(gate=self._gate, journal=self, max_turns=max_turns)
        self._tick_interval = tick_interval

        self._jobs: Dict[str, Job] = {}
        self._queue: Deque[str] = deque()
        self._lock = asyncio.Lock()
        self._processing = False
        self._current_job_id: Optional[str] = None
        self._deferred_resume: Set[str] = set()
        self._worker: Optional[asyncio.Task[None]] = None

    @property
    def agents(self) -> AgentCache:
        return self._agents

    @property
    def current_job_id(self) -> Optional[str]:
        """Id of the job inside the turn runner, if any."""
        return self._current_job_id

    @property
    def is_running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Load persisted jobs and queue the ones still ``pending``.

        Jobs persisted as ``running`` come back ``failed`` from the store.
        Jobs waiting for approval stay off the queue until resolved.
        """
        jobs = await self._store.load_all()
        async with self._lock:
            self._jobs = {job.id: job for job in jobs}
            self._queue.clear()
            for job in sorted(jobs, key=lambda j: j.created_at):
                if job.status == JobStatus.pending:
                    self._queue.append(job.id)
        logger.info(f"Loaded {len(jobs)} job(s), {len(self._queue)} queued")
        await self.persist()

    def start(self) -> None:
        if self.is_running:
            return
        self._worker = asyncio.create_task(self._worker_loop(), name="taskgate-worker")
        logger.info("Job worker started")

    async def stop(self) -> None:
        """Cancel the worker loop and clean up cached agents.

        A job in flight is abandoned as ``running``.
        """
        worker, self._worker = self._worker, None
        if worker is not None:
            worker.cancel()
            try:
                await worker
            except asyncio.CancelledError:
                pass
        await self._agents.clear()
        logger.info("Job worker stopped")

    async def _worker_loop(self) -> None:
        while True:
            try:
                await self.try_advance()
            except Exception:
                logger.exception("Worker tick failed")
            await asyncio.sleep(self._tick_interval)

    # ------------------------------------------------------------------
    # Boundary operations
    # ------------------------------------------------------------------

    async def create_job(self, job_type: str, payload: Dict[str, Any]) -> Job:
        job = Job(type=job_type, payload=dict(payload))
        command = payload.get("command")
        if command:
            job.messages.append(new_message(MessageRole.user, str(command)))
        async with self._lock:
            self._jobs[job.id] = job
            self._queue.append(job.id)
        logger.info(f"Created job {job.id} ({job_type})")
        await self.persist()
        return job

    def get_job(self, job_id: str) -> Optional[Job]:
        return self._jobs.get(job_id)

    def list_jobs(self) -> List[Job]:
        return sorted(self._jobs.values(), key=lambda j: j.created_at)

    def get_active_jobs(self) -> List[Job]:
        return [job for job in self.list_jobs() if job.is_active]

    def get_completed_jobs(self) -> List[Job]:
        return [job for job in self.list_jobs() if job.is_terminal]

    def queued_job_ids(self) -> List[str]:
        return list(self._queue)

    async def resolve_approval(self, job_id: str, approval_id: str, approved: bool) -> bool:
        """
        Approve or reject the pending approval of a job.

        Args:
            job_id: The paused job.
            approval_id: Must match the job's pending approval request.
            approved: True to resume the job, False to fail it.

        Returns:
            False if the ids do not match a live pending approval.
        """
        job = self._jobs.get(job_id)
        if job is None:
            return False
        async with self._lock:
            if not await self._gate.resolve(job, approval_id, approved):
                return False
            if approved:
                self._enqueue(job.id, front=True)
        if not approved:
            await self._release_agent(job)
        return True

    async def invalidate_session(self, session_id: str) -> bool:
        """Drop the cached agent for a session so the next job starts fresh."""
        removed = await self._agents.remove(session_id)
        if removed:
            logger.info(f"Invalidated agent for session {session_id}")
        return removed

    # ------------------------------------------------------------------
    # Journal: append-only mutations, each followed by a save
    # ------------------------------------------------------------------

    async def add_log(self, job_id: str, message: str) -> None:
        job = self._jobs.get(job_id)
        if job is None:
            return
        job.logs.append(format_log_line(message))
        await self.persist()

    async def add_message(self, job_id: str, message: ChatMessage) -> None:
        job = self._jobs.get(job_id)
        if job is None:
            return
        job.messages.append(message)
        await self.persist()

    async def persist(self) -> None:
        try:
            await self._store.save_all(list(self._jobs.values()))
        except Exception:
            logger.exception("Failed to persist jobs")

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def _enqueue(self, job_id: str, *, front: bool = False) -> None:
        if job_id in self._queue:
            return
        if job_id == self._current_job_id:
            # Approved before the worker released it; queued once the slot frees.
            self._deferred_resume.add(job_id)
            return
        if front:
            self._queue.appendleft(job_id)
        else:
            self._queue.append(job_id)

    async def try_advance(self) -> Optional[str]:
        """Run the job at the front of the queue, if the worker slot is free.

        Returns:
            The id of the job that ran, or None if nothing ran.
        """
        async with self._lock:
            if self._processing:
                return None
            job = self._dequeue_runnable()
            if job is None:
                return None
            job.status = JobStatus.running
            self._processing = True
            self._current_job_id = job.id
        try:
            await self._run(job)
        finally:
            async with self._lock:
                self._processing = False
                self._current_job_id = None
                if job.id in self._deferred_resume:
                    self._deferred_resume.discard(job.id)
                    self._queue.appendleft(job.id)
        return job.id

    def _dequeue_runnable(self) -> Optional[Job]:
        while self._queue:
            job = self._jobs.get(self._queue.popleft())
            if job is not None and job.status in (JobStatus.pending, JobStatus.running):
                return job
        return None

    async def _run(self, job: Job) -> None:
        await self.add_log(job.id, "Job started")
        try:
            outcome = await self._execute(job)
        except Exception as e:
            outcome = TurnOutcome.failed(str(e) or e.__class__.__name__, turn_count=job.turn_count)
        await self._settle(job, outcome)

    async def _execute(self, job: Job) -> TurnOutcome:
        if job.type != JobType.execute_command.value:
            raise UnknownJobTypeError(job.type)
        agent = await self._agent_for(job)
        return await self._runner.run(job, agent)

    async def _agent_for(self, job: Job) -> Agent:
        def build() -> Agent:
            try:
                return self._agent_factory(job)
            except Exception as e:
                raise AgentInitializationError(str(e)) from e

        return await self._agents.get_or_create(self._agent_key(job), build)

    @staticmethod
    def _agent_key(job: Job) -> str:
        return job.session_id or job.id

    def _agent_in_use(self, key: str) -> bool:
        # A paused job resumes on the agent that holds its conversation.
        return any(job.is_active and self._agent_key(job) == key for job in self._jobs.values())

    async def _settle(self, job: Job, outcome: TurnOutcome) -> None:
        if outcome.kind == OutcomeKind.paused:
            return
        job.completed_at = datetime.now(timezone.utc)
        if outcome.kind == OutcomeKind.completed:
            job.status = JobStatus.completed
            job.result = {"stdout": outcome.output, "exit_code": 0}
            await self.add_log(job.id, "Job completed successfully")
        else:
            job.status = JobStatus.failed
            job.result = {"error": outcome.error}
            await self.add_log(job.id, f"Job failed: {outcome.error}")
        await self._release_agent(job)

    async def _release_agent(self, job: Job) -> None:
        # Session agents outlive their jobs; one-off agents do not.
        if job.session_id is None:
            await self._agents.remove(job.id)
