"""Approval gate.

``ApprovalGate`` is the only component that moves a job into or out of
``waiting_approval``. A batch of tool calls is paused as a unit: if any call
in the batch is dangerous, none of them run until a human resolves the
request.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from taskgate.core.logging_config import get_logger

from ..journal import JobJournal
from ..schemas.domain import (
    ApprovalRequest,
    ApprovalStatus,
    Job,
    JobStatus,
    MessageRole,
    ToolCallRequest,
)
from ..transcript import new_message
from .models import ApprovalCheck, ApprovalPolicy

logger = get_logger(__name__)

APPROVAL_REQUIRED_LOG = "[Approval Required] Dangerous operation detected"
REJECTED_ERROR = "Rejected by approver"


def describe_tool_call(request: ToolCallRequest) -> str:
    name = request.name.lower()
    if name == "shell":
        return f"`{request.args.get('command') or 'unknown command'}`"
    if name == "write_file":
        return f"Write to `{request.args.get('path') or 'unknown file'}`"
    if name == "edit":
        return f"Edit `{request.args.get('file_path') or 'unknown file'}`"
    return f"{request.name}(...)"


class ApprovalGate:
    def __init__(self, policy: ApprovalPolicy, journal: JobJournal) -> None:
        self._policy = policy
        self._journal = journal

    @property
    def policy(self) -> ApprovalPolicy:
        return self._policy

    def check(self, requests: Sequence[ToolCallRequest]) -> ApprovalCheck:
        """Classify a batch; an empty batch or a disabled policy never needs approval."""
        if not self._policy.enabled:
            return ApprovalCheck(needs=False)
        dangerous = tuple(r for r in requests if self._policy.requires_approval(r.name))
        return ApprovalCheck(needs=bool(dangerous), dangerous=dangerous)

    @staticmethod
    def summarize(dangerous: Sequence[ToolCallRequest]) -> str:
        return "\n- ".join(describe_tool_call(r) for r in dangerous)

    async def pause(self, job: Job, requests: Sequence[ToolCallRequest], *, turn_count: int) -> ApprovalRequest:
        """
        Park ``job`` in ``waiting_approval`` with the whole batch stored for later.

        Args:
            job: The running job.
            requests: The complete tool-call batch produced by the current turn.
            turn_count: The turn counter to resume from.

        Returns:
            The new pending ApprovalRequest.
        """
        check = self.check(requests)
        summary = self.summarize(check.dangerous or requests)
        reason = f"The agent wants to execute the following operation(s):\n- {summary}"

        approval = ApprovalRequest(job_id=job.id, command=summary, reason=reason)
        job.pending_tool_calls = list(requests)
        job.turn_count = turn_count
        job.pending_approval = approval
        job.status = JobStatus.waiting_approval

        await self._journal.add_log(job.id, APPROVAL_REQUIRED_LOG)
        await self._journal.add_message(
            job.id,
            new_message(
                MessageRole.approval_request,
                reason,
                {
                    "approval_id": approval.id,
                    "command": summary,
                    "tool_calls": [r.model_dump(mode="json") for r in requests],
                },
            ),
        )
        logger.info(f"Job {job.id} paused for approval {approval.id}")
        return approval

    async def resolve(self, job: Job, approval_id: str, approved: bool) -> bool:
        """
        Apply a human decision to a paused job.

        Returns False without touching the job when it is not waiting for
        approval or ``approval_id`` does not match its pending request.
        """
        pending = job.pending_approval
        if job.status != JobStatus.waiting_approval or pending is None or pending.id != approval_id:
            return False

        job.pending_approval = None
        if approved:
            job.status = JobStatus.running
            outcome = ApprovalStatus.approved
            content = f"Approved: {pending.command}"
        else:
            job.status = JobStatus.failed
            job.pending_tool_calls = None
            job.result = {"error": REJECTED_ERROR, "rejected": True}
            job.completed_at = datetime.now(timezone.utc)
            outcome = ApprovalStatus.rejected
            content = f"Rejected: {pending.command}"
        pending.status = outcome

        await self._journal.add_log(job.id, f"[Approval {outcome.value.capitalize()}] {pending.command}")
        await self._journal.add_message(
            job.id,
            new_message(MessageRole.system, content, {"approval_id": pending.id, "approval_status": outcome.value}),
        )
        logger.info(f"Approval {pending.id} for job {job.id} resolved as {outcome.value}")
        return True
