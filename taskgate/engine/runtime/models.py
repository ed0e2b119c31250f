"""Turn runner outcome and LangGraph state types.

- ``TurnOutcome`` is the value returned by ``TurnRunner.run``. A pause for
  approval is one of its three kinds, never an exception.
- ``_TurnState`` is the mutable state passed between LangGraph nodes for one
  execution of one job.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, NotRequired, Optional, Required, TypedDict

from ..agent import Agent
from ..schemas.domain import Job, ToolCallRequest


class OutcomeKind(str, Enum):
    paused = "paused"
    completed = "completed"
    failed = "failed"


@dataclass(frozen=True)
class TurnOutcome:
    """How one execution of the turn runner ended.

    ``output`` is the accumulated assistant text (completed runs). ``error``
    is the failure message (failed runs). ``turn_count`` is the counter at the
    moment the runner stopped.
    """

    kind: OutcomeKind
    turn_count: int
    output: str = ""
    error: Optional[str] = None
    limit_reached: bool = False

    @classmethod
    def paused(cls, *, turn_count: int) -> "TurnOutcome":
        return cls(kind=OutcomeKind.paused, turn_count=turn_count)

    @classmethod
    def completed(cls, output: str, *, turn_count: int, limit_reached: bool = False) -> "TurnOutcome":
        return cls(kind=OutcomeKind.completed, turn_count=turn_count, output=output, limit_reached=limit_reached)

    @classmethod
    def failed(cls, error: str, *, turn_count: int) -> "TurnOutcome":
        return cls(kind=OutcomeKind.failed, turn_count=turn_count, error=error)

    @property
    def is_paused(self) -> bool:
        return self.kind == OutcomeKind.paused


class _TurnState(TypedDict):
    """Mutable LangGraph state for a single runner execution.

    Required keys:

    - ``job`` / ``agent``: the job being driven and its agent.
    - ``turn_count``: seeded from ``job.turn_count``; incremented on turn entry.
    - ``max_turns``: turn limit for this execution.
    - ``current_message``: next outbound message for the agent.
    - ``full_response``: assistant text accumulated across all turns.

    Optional keys:

    - ``turn_requests``: tool calls collected during the latest turn.
    - ``has_finished``: the agent emitted ``finished`` during the latest turn.
    - ``limit_reached``: the turn limit stopped the loop.
    - ``outcome``: set by terminal nodes.
    """

    job: Required[Job]
    agent: Required[Agent]
    turn_count: Required[int]
    max_turns: Required[int]
    current_message: Required[str]
    full_response: Required[str]
    turn_requests: NotRequired[List[ToolCallRequest]]
    has_finished: NotRequired[bool]
    limit_reached: NotRequired[bool]
    outcome: NotRequired[TurnOutcome]
