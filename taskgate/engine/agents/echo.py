"""Local shell agent for development and end-to-end demos."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, List, Optional, Sequence

from taskgate.core.logging_config import get_logger

from ..agent import AgentEvent, AgentEventType
from ..schemas.domain import Job, ToolCallRequest, ToolCallResult
from ..transcript import TOOL_RESULTS_PREFIX

logger = get_logger(__name__)


class EchoShellAgent:
    """Deterministic agent that asks to run the user's command in a shell.

    A user message becomes one ``shell`` tool call; a tool-results message is
    echoed back as assistant content, which ends the job. Only the ``shell``
    tool is implemented.
    """

    def __init__(self, *, cwd: Optional[str] = None, timeout_seconds: float = 300.0) -> None:
        self._cwd = cwd
        self._timeout_seconds = timeout_seconds

    async def send_message(self, text: str) -> AsyncIterator[AgentEvent]:
        if text.startswith(TOOL_RESULTS_PREFIX):
            yield AgentEvent(type=AgentEventType.content, value=text[len(TOOL_RESULTS_PREFIX) :].strip())
            yield AgentEvent(type=AgentEventType.finished, value={"reason": "stop"})
            return

        yield AgentEvent(type=AgentEventType.thought, value={"summary": "Running the requested command in a shell"})
        yield AgentEvent(
            type=AgentEventType.tool_call_request,
            value=ToolCallRequest(name="shell", args={"command": text}),
        )
        yield AgentEvent(type=AgentEventType.finished, value={"reason": "tool_use"})

    async def execute_tool_calls(self, requests: Sequence[ToolCallRequest]) -> List[ToolCallResult]:
        results: List[ToolCallResult] = []
        for request in requests:
            if request.name.lower() != "shell":
                results.append(ToolCallResult(name=request.name, error=f"Unsupported tool: {request.name}"))
                continue
            results.append(await self._run_shell(str(request.args.get("command") or "")))
        return results

    async def _run_shell(self, command: str) -> ToolCallResult:
        if not command:
            return ToolCallResult(name="shell", error="No command given", exit_code=1)
        logger.debug(f"Running shell command: {command}")
        proc = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            cwd=self._cwd,
        )
        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=self._timeout_seconds)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            return ToolCallResult(
                name="shell",
                error=f"Command timed out after {self._timeout_seconds:g}s",
                exit_code=proc.returncode,
            )
        return ToolCallResult(
            name="shell",
            output=stdout.decode("utf-8", errors="replace"),
            exit_code=proc.returncode,
        )

    async def cleanup(self) -> None:
        return None


def build_echo_agent(job: Job) -> EchoShellAgent:
    cwd = job.payload.get("cwd")
    return EchoShellAgent(cwd=str(cwd) if cwd else None)
