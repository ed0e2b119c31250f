"""Domain schemas shared by the engine, the job store and the HTTP layer."""

from .base import BaseSchema
from .domain import (
    ACTIVE_JOB_STATUSES,
    TERMINAL_JOB_STATUSES,
    ApprovalRequest,
    ApprovalStatus,
    ChatMessage,
    Job,
    JobStatus,
    JobType,
    MessageRole,
    ToolCallRequest,
    ToolCallResult,
)

__all__ = [
    "ACTIVE_JOB_STATUSES",
    "TERMINAL_JOB_STATUSES",
    "ApprovalRequest",
    "ApprovalStatus",
    "BaseSchema",
    "ChatMessage",
    "Job",
    "JobStatus",
    "JobType",
    "MessageRole",
    "ToolCallRequest",
    "ToolCallResult",
]
