"""Transcript and job-log construction.

Every transcript message and log line the engine writes is built here so the
turn runner, the approval gate and the job manager share one set of formats.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence

from .schemas.domain import ChatMessage, MessageRole, ToolCallRequest, ToolCallResult

TOOL_RESULTS_PREFIX = "Tool execution results:\n"

ARGS_PREVIEW_CHARS = 100
OUTPUT_PREVIEW_CHARS = 300
RESPONSE_PREVIEW_CHARS = 200


def format_log_line(message: str, *, now: Optional[datetime] = None) -> str:
    stamp = (now or datetime.now(timezone.utc)).isoformat()
    return f"[{stamp}] {message}"


def new_message(
    role: MessageRole,
    content: str,
    metadata: Optional[Dict[str, Any]] = None,
) -> ChatMessage:
    return ChatMessage(role=role, content=content, metadata=metadata)


def preview(text: str, limit: int) -> str:
    """Truncate ``text`` to ``limit`` characters, marking the cut with ``...``."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def _dump_args(args: Dict[str, Any]) -> str:
    return json.dumps(args, ensure_ascii=False, default=str)


def tool_call_log(request: ToolCallRequest) -> str:
    return f"[Tool Call] {request.name}({preview(_dump_args(request.args), ARGS_PREVIEW_CHARS)})"


def tool_call_message(request: ToolCallRequest) -> ChatMessage:
    return new_message(
        MessageRole.tool_call,
        f"Calling `{request.name}`",
        {"tool_name": request.name, "tool_args": request.args, "call_id": request.call_id},
    )


def tool_response_log(name: str, display: str) -> str:
    return f"[Tool Result] {name}: {preview(display, RESPONSE_PREVIEW_CHARS)}"


def tool_result_log(result: ToolCallResult) -> str:
    exit_text = "ok" if result.exit_code is None else str(result.exit_code)
    return f"[Tool {result.name}] Exit: {exit_text}, Output: {preview(result.output or '', OUTPUT_PREVIEW_CHARS)}"


def tool_result_message(result: ToolCallResult) -> ChatMessage:
    metadata: Dict[str, Any] = {"tool_name": result.name}
    if result.exit_code is not None:
        metadata["exit_code"] = result.exit_code
    if result.error:
        metadata["error"] = result.error
    return new_message(MessageRole.tool_result, result.display_text(), metadata)


def tool_results_message(results: Sequence[ToolCallResult]) -> str:
    """Compose the next outbound agent message from an executed batch."""
    return TOOL_RESULTS_PREFIX + "\n".join(f"{r.name}: {r.display_text()}" for r in results)
