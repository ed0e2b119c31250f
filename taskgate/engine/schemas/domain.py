from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import Field

from .base import BaseSchema


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid4())


class JobStatus(str, Enum):
    pending = "pending"
    running = "running"
    waiting_approval = "waiting_approval"
    completed = "completed"
    failed = "failed"


ACTIVE_JOB_STATUSES = frozenset({JobStatus.pending, JobStatus.running, JobStatus.waiting_approval})
TERMINAL_JOB_STATUSES = frozenset({JobStatus.completed, JobStatus.failed})


class JobType(str, Enum):
    execute_command = "execute_command"


class MessageRole(str, Enum):
    user = "user"
    assistant = "assistant"
    tool_call = "tool_call"
    tool_result = "tool_result"
    thinking = "thinking"
    system = "system"
    approval_request = "approval_request"


class ApprovalStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class ToolCallRequest(BaseSchema):
    """A side-effecting operation the agent asked to run."""

    call_id: str = Field(default_factory=_new_id)
    name: str
    args: Dict[str, Any] = Field(default_factory=dict)


class ToolCallResult(BaseSchema):
    """Outcome of one executed tool call, in request order."""

    name: str
    output: Optional[str] = None
    error: Optional[str] = None
    exit_code: Optional[int] = None

    def display_text(self) -> str:
        return self.output or self.error or "completed"


class ChatMessage(BaseSchema):
    id: str = Field(default_factory=_new_id)
    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=_utc_now)
    metadata: Optional[Dict[str, Any]] = None


class ApprovalRequest(BaseSchema):
    id: str = Field(default_factory=_new_id)
    job_id: str

    command: str
    reason: str
    status: ApprovalStatus = ApprovalStatus.pending

    created_at: datetime = Field(default_factory=_utc_now)


class Job(BaseSchema):
    """One durable unit of agent-driven work.

    ``pending_approval`` is set exactly while ``status`` is
    ``waiting_approval``. ``turn_count`` is the resumption cursor for the
    turn runner and never exceeds the configured turn limit.
    """

    id: str = Field(default_factory=_new_id)
    type: str
    payload: Dict[str, Any] = Field(default_factory=dict)

    status: JobStatus = JobStatus.pending
    logs: List[str] = Field(default_factory=list)
    messages: List[ChatMessage] = Field(default_factory=list)

    pending_approval: Optional[ApprovalRequest] = None
    pending_tool_calls: Optional[List[ToolCallRequest]] = None
    turn_count: int = Field(default=0, ge=0)

    result: Optional[Dict[str, Any]] = None
    created_at: datetime = Field(default_factory=_utc_now)
    completed_at: Optional[datetime] = None

    @property
    def session_id(self) -> Optional[str]:
        value = self.payload.get("session_id")
        return str(value) if value else None

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_JOB_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_JOB_STATUSES
