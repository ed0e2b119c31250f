"""
API Schemas.

This module contains Pydantic models used for API request bodies and response validation.
Job responses reuse the engine's ``Job`` model directly.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from taskgate.engine.schemas import JobStatus


class TaskCreate(BaseModel):
    """
    Schema for submitting a new task.

    The command becomes the first user message of the job's transcript and the
    first message sent to the agent.
    """

    command: str = Field(
        ...,
        min_length=1,
        description="The instruction for the agent.",
        examples=["echo hi"],
    )
    cwd: Optional[str] = Field(
        default=None,
        description="Working directory for tool execution.",
        examples=["/workspace/repo"],
    )
    session_id: Optional[str] = Field(
        default=None,
        description="Session whose agent (and conversation history) the job should reuse.",
        examples=["session-123"],
    )

    model_config = ConfigDict(json_schema_extra={"example": {"command": "echo hi", "session_id": "session-123"}})


class TaskAccepted(BaseModel):
    job_id: str
    status: JobStatus
    message: str = "Task accepted."


class ApprovalSubmit(BaseModel):
    """
    Schema for resolving a pending approval.

    Both the job id (in the path) and ``approval_id`` must match the job's live
    pending approval request.
    """

    approval_id: str = Field(..., description="Id of the pending approval request.")
    approved: bool = Field(..., description="True to resume the job, False to fail it.")


class ApprovalResolved(BaseModel):
    success: bool = True
    job_id: str
    status: JobStatus


class SessionAgentDropped(BaseModel):
    session_id: str
    removed: bool
