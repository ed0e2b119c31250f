"""Job execution engine.

Design overview
---------------

- ``JobManager`` owns the jobs and the queue and runs one job at a time.
- ``TurnRunner`` drives the agent loop for that job using LangGraph. It
  returns a ``TurnOutcome`` of paused, completed or failed.
- ``ApprovalGate`` decides whether a tool batch may run and is the only code
  that moves a job into or out of ``waiting_approval``.
- Job stores persist the full job set after every mutation and convert jobs
  found ``running`` on load into ``failed``.
"""

from .agent import Agent, AgentEvent, AgentEventType
from .cache import AgentCache
from .errors import (
    AgentInitializationError,
    StoreError,
    TaskgateError,
    UnknownJobTypeError,
)
from .manager import AgentFactory, JobManager
from .policy import ApprovalGate, ApprovalPolicy
from .runtime import MAX_TURNS, OutcomeKind, TurnOutcome, TurnRunner
from .store import JobStore, JsonFileJobStore, SqlJobStore, build_job_store

__all__ = [
    "Agent",
    "AgentCache",
    "AgentEvent",
    "AgentEventType",
    "AgentFactory",
    "AgentInitializationError",
    "ApprovalGate",
    "ApprovalPolicy",
    "JobManager",
    "JobStore",
    "JsonFileJobStore",
    "MAX_TURNS",
    "OutcomeKind",
    "SqlJobStore",
    "StoreError",
    "TaskgateError",
    "TurnOutcome",
    "TurnRunner",
    "UnknownJobTypeError",
    "build_job_store",
]
