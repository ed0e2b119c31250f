"""Error types for the job execution engine.

Approval pauses are not errors and never appear here; the turn runner reports
them as a ``TurnOutcome``. These exceptions cover the failures that end a job.
"""

from __future__ import annotations


class TaskgateError(Exception):
    """Base error for all engine exceptions."""


class UnknownJobTypeError(TaskgateError):
    """Raised when a job's type has no execution path."""

    def __init__(self, job_type: str) -> None:
        super().__init__(f"Unknown job type: {job_type}")


class AgentInitializationError(TaskgateError):
    """Raised when the agent factory cannot build an agent for a job."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Failed to initialize Agent: {message}")


class StoreError(TaskgateError):
    """Raised by job stores when a snapshot cannot be read or written."""
