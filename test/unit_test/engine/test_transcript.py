from __future__ import annotations

from datetime import datetime, timezone

from taskgate.engine.schemas import MessageRole, ToolCallRequest, ToolCallResult
from taskgate.engine.transcript import (
    format_log_line,
    preview,
    tool_call_log,
    tool_call_message,
    tool_result_log,
    tool_result_message,
    tool_results_message,
)


def test_log_lines_are_timestamped() -> None:
    now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    assert format_log_line("Job started", now=now) == "[2024-05-01T12:00:00+00:00] Job started"


def test_preview_marks_truncation() -> None:
    assert preview("abc", 3) == "abc"
    assert preview("abcdef", 3) == "abc..."


def test_tool_call_entries() -> None:
    request = ToolCallRequest(name="shell", args={"command": "x" * 200})

    log = tool_call_log(request)
    assert log.startswith('[Tool Call] shell({"command": "xxx')
    assert log.endswith("...)")

    message = tool_call_message(request)
    assert message.role == MessageRole.tool_call
    assert message.content == "Calling `shell`"
    assert message.metadata["tool_args"] == {"command": "x" * 200}


def test_tool_result_entries() -> None:
    ok = ToolCallResult(name="shell", output="hi\n", exit_code=0)
    failed = ToolCallResult(name="edit", error="file not found")

    assert tool_result_log(ok) == "[Tool shell] Exit: 0, Output: hi\n"
    assert tool_result_log(failed) == "[Tool edit] Exit: ok, Output: "

    message = tool_result_message(failed)
    assert message.role == MessageRole.tool_result
    assert message.content == "file not found"
    assert message.metadata == {"tool_name": "edit", "error": "file not found"}
    assert tool_result_message(ok).metadata == {"tool_name": "shell", "exit_code": 0}


def test_tool_results_message_lists_results_in_order() -> None:
    results = [
        ToolCallResult(name="shell", output="one"),
        ToolCallResult(name="edit", error="denied"),
        ToolCallResult(name="write_file"),
    ]
    assert tool_results_message(results) == (
        "Tool execution results:\nshell: one\nedit: denied\nwrite_file: completed"
    )
