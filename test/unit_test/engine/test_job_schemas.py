from __future__ import annotations

import pytest
from pydantic import ValidationError

from taskgate.engine.agent import AgentEvent, AgentEventType
from taskgate.engine.schemas import Job, JobStatus, ToolCallRequest


def test_new_job_defaults() -> None:
    job = Job(type="execute_command", payload={"command": "ls"})

    assert job.status == JobStatus.pending
    assert job.logs == [] and job.messages == []
    assert job.pending_approval is None and job.pending_tool_calls is None
    assert job.turn_count == 0
    assert job.result is None and job.completed_at is None
    assert job.created_at.tzinfo is not None
    assert job.id != Job(type="execute_command").id


@pytest.mark.parametrize(
    ("status", "active", "terminal"),
    [
        (JobStatus.pending, True, False),
        (JobStatus.running, True, False),
        (JobStatus.waiting_approval, True, False),
        (JobStatus.completed, False, True),
        (JobStatus.failed, False, True),
    ],
)
def test_status_views(status: JobStatus, active: bool, terminal: bool) -> None:
    job = Job(type="execute_command", status=status)
    assert job.is_active is active
    assert job.is_terminal is terminal


def test_session_id_comes_from_payload() -> None:
    assert Job(type="execute_command", payload={"session_id": "s1"}).session_id == "s1"
    assert Job(type="execute_command", payload={"session_id": ""}).session_id is None
    assert Job(type="execute_command").session_id is None


def test_negative_turn_count_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Job(type="execute_command", turn_count=-1)


def test_unknown_fields_are_rejected() -> None:
    with pytest.raises(ValidationError):
        Job.model_validate({"type": "execute_command", "owner": "me"})


def test_agent_event_payload_helpers() -> None:
    event = AgentEvent(type=AgentEventType.thought, value={"summary": "thinking hard"})
    assert event.text("summary") == "thinking hard"
    assert AgentEvent(type=AgentEventType.finished, value="stop").text("reason") == "stop"
    assert AgentEvent(type=AgentEventType.error, value={}).text("message", "Unknown error") == "Unknown error"

    from_mapping = AgentEvent(
        type=AgentEventType.tool_call_request, value={"name": "shell", "args": {"command": "ls"}}
    ).tool_request()
    assert isinstance(from_mapping, ToolCallRequest)
    assert from_mapping.args == {"command": "ls"}
