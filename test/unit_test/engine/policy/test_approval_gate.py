from __future__ import annotations

import pytest

from engine_fakes import RecordingJournal
from taskgate.engine.policy import (
    TOOLS_REQUIRING_APPROVAL,
    ApprovalGate,
    ApprovalPolicy,
    describe_tool_call,
)
from taskgate.engine.schemas import ApprovalStatus, Job, JobStatus, MessageRole, ToolCallRequest


def _req(name: str, **args) -> ToolCallRequest:
    return ToolCallRequest(name=name, args=args)


def _running_job(journal: RecordingJournal) -> Job:
    return journal.track(Job(type="execute_command", status=JobStatus.running))


def test_default_dangerous_tools() -> None:
    assert TOOLS_REQUIRING_APPROVAL == frozenset({"shell", "write_file", "edit"})


@pytest.mark.parametrize("name", ["shell", "SHELL", "Write_File", "edit"])
def test_dangerous_names_match_case_insensitively(journal: RecordingJournal, name: str) -> None:
    gate = ApprovalGate(ApprovalPolicy(), journal)
    check = gate.check([_req("read_file", path="a"), _req(name)])
    assert check.needs
    assert [r.name for r in check.dangerous] == [name]


def test_safe_batch_needs_no_approval(journal: RecordingJournal) -> None:
    gate = ApprovalGate(ApprovalPolicy(), journal)
    check = gate.check([_req("read_file", path="a"), _req("glob", pattern="*.py")])
    assert not check.needs
    assert check.dangerous == ()


def test_disabled_policy_never_needs_approval(journal: RecordingJournal) -> None:
    gate = ApprovalGate(ApprovalPolicy(enabled=False), journal)
    assert not gate.check([_req("shell", command="rm -rf /")]).needs


@pytest.mark.parametrize(
    ("request_", "expected"),
    [
        (ToolCallRequest(name="shell", args={"command": "ls -la"}), "`ls -la`"),
        (ToolCallRequest(name="write_file", args={"path": "a.txt"}), "Write to `a.txt`"),
        (ToolCallRequest(name="edit", args={"file_path": "src/x.py"}), "Edit `src/x.py`"),
        (ToolCallRequest(name="deploy", args={"env": "prod"}), "deploy(...)"),
        (ToolCallRequest(name="shell", args={}), "`unknown command`"),
        (ToolCallRequest(name="write_file", args={"path": ""}), "Write to `unknown file`"),
        (ToolCallRequest(name="edit", args={}), "Edit `unknown file`"),
    ],
)
def test_describe_tool_call(request_: ToolCallRequest, expected: str) -> None:
    assert describe_tool_call(request_) == expected


def test_summary_joins_entries_as_a_list() -> None:
    summary = ApprovalGate.summarize([_req("shell", command="make"), _req("edit", file_path="a.py")])
    assert summary == "`make`\n- Edit `a.py`"


@pytest.mark.asyncio
async def test_pause_stores_batch_and_creates_request(journal: RecordingJournal) -> None:
    gate = ApprovalGate(ApprovalPolicy(), journal)
    job = _running_job(journal)
    batch = [_req("read_file", path="a"), _req("shell", command="echo hi")]

    approval = await gate.pause(job, batch, turn_count=4)

    assert job.status == JobStatus.waiting_approval
    assert job.pending_approval == approval
    assert approval.job_id == job.id
    assert approval.command == "`echo hi`"
    assert approval.reason == "The agent wants to execute the following operation(s):\n- `echo hi`"
    assert job.pending_tool_calls == batch
    assert job.turn_count == 4
    assert "[Approval Required] Dangerous operation detected" in job.logs

    message = job.messages[-1]
    assert message.role == MessageRole.approval_request
    assert message.metadata["approval_id"] == approval.id
    assert [c["name"] for c in message.metadata["tool_calls"]] == ["read_file", "shell"]


@pytest.mark.asyncio
async def test_approve_returns_job_to_running(journal: RecordingJournal) -> None:
    gate = ApprovalGate(ApprovalPolicy(), journal)
    job = _running_job(journal)
    approval = await gate.pause(job, [_req("shell", command="echo hi")], turn_count=1)

    assert await gate.resolve(job, approval.id, True)

    assert approval.status == ApprovalStatus.approved
    assert job.status == JobStatus.running
    assert job.pending_approval is None
    assert job.pending_tool_calls is not None
    assert job.result is None
    assert job.messages[-1].role == MessageRole.system
    assert job.messages[-1].metadata == {"approval_id": approval.id, "approval_status": "approved"}


@pytest.mark.asyncio
async def test_reject_fails_job_with_marker(journal: RecordingJournal) -> None:
    gate = ApprovalGate(ApprovalPolicy(), journal)
    job = _running_job(journal)
    approval = await gate.pause(job, [_req("shell", command="echo hi")], turn_count=1)

    assert await gate.resolve(job, approval.id, False)

    assert approval.status == ApprovalStatus.rejected
    assert job.status == JobStatus.failed
    assert job.pending_approval is None
    assert job.pending_tool_calls is None
    assert job.result == {"error": "Rejected by approver", "rejected": True}
    assert job.completed_at is not None
    assert job.messages[-1].metadata["approval_status"] == "rejected"


@pytest.mark.asyncio
async def test_resolution_requires_matching_live_request(journal: RecordingJournal) -> None:
    gate = ApprovalGate(ApprovalPolicy(), journal)
    job = _running_job(journal)

    assert not await gate.resolve(job, "nope", True)

    approval = await gate.pause(job, [_req("shell", command="echo hi")], turn_count=1)
    messages_before = len(job.messages)

    assert not await gate.resolve(job, "stale-id", True)
    assert job.status == JobStatus.waiting_approval
    assert len(job.messages) == messages_before

    assert await gate.resolve(job, approval.id, True)
    assert not await gate.resolve(job, approval.id, True)
