from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from engine_fakes import MemoryJobStore, RecordingJournal, ScriptedAgent
from taskgate.engine.cache import AgentCache
from taskgate.engine.manager import JobManager
from taskgate.engine.policy import ApprovalPolicy
from taskgate.engine.schemas import Job


@pytest.fixture
def journal() -> RecordingJournal:
    return RecordingJournal()


@pytest.fixture
def store() -> MemoryJobStore:
    return MemoryJobStore()


@pytest.fixture
def make_manager(store: MemoryJobStore):
    """Build a JobManager whose agent factory hands out the given agents by key."""

    def _make(
        agent: Optional[ScriptedAgent] = None,
        *,
        agents: Optional[Dict[str, ScriptedAgent]] = None,
        policy: Optional[ApprovalPolicy] = None,
        max_turns: int = 50,
        job_store: Optional[Any] = None,
    ) -> JobManager:
        built: List[Job] = []

        def factory(job: Job) -> ScriptedAgent:
            built.append(job)
            if agents is not None:
                return agents[job.session_id or job.id]
            return agent if agent is not None else ScriptedAgent()

        manager = JobManager(
            store=job_store if job_store is not None else store,
            agent_factory=factory,
            approval_policy=policy,
            agent_cache=AgentCache(max_size=8),
            max_turns=max_turns,
            tick_interval=0.01,
        )
        manager.built_for = built  # type: ignore[attr-defined]
        return manager

    return _make
