"""Agent collaborator contract.

An agent is the external conversational partner driven by the turn runner.
The engine only relies on two operations:

- ``send_message`` returns an ordered, single-pass async stream of
  ``AgentEvent`` values for one model turn.
- ``execute_tool_calls`` runs a batch of tool calls and returns one
  ``ToolCallResult`` per request, in request order.

Event payloads
--------------

=====================  ====================================================
``content``            ``str`` chunk of assistant text
``thought``            ``{"summary": str}`` or a plain string
``tool_call_request``  ``ToolCallRequest`` (or a mapping that validates to one)
``tool_call_response`` ``{"name": str, "result_display": str}``
``error``              ``{"message": str}`` or a plain string
``finished``           ``{"reason": str}`` or a plain string
=====================  ====================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any, AsyncIterator, List, Protocol, Sequence

from .schemas.base import BaseSchema
from .schemas.domain import ToolCallRequest, ToolCallResult


class AgentEventType(str, Enum):
    content = "content"
    thought = "thought"
    tool_call_request = "tool_call_request"
    tool_call_response = "tool_call_response"
    error = "error"
    finished = "finished"


class AgentEvent(BaseSchema):
    type: AgentEventType
    value: Any = None

    def text(self, key: str, default: str = "") -> str:
        """Return ``value[key]`` for mapping payloads, or the payload itself as text."""
        if isinstance(self.value, dict):
            found = self.value.get(key)
            return str(found) if found else default
        if self.value is None:
            return default
        return str(self.value) or default

    def tool_request(self) -> ToolCallRequest:
        if isinstance(self.value, ToolCallRequest):
            return self.value
        return ToolCallRequest.model_validate(self.value)


class Agent(Protocol):
    """Protocol for agent implementations."""

    def send_message(self, text: str) -> AsyncIterator[AgentEvent]: ...

    async def execute_tool_calls(self, requests: Sequence[ToolCallRequest]) -> List[ToolCallResult]: ...

    async def cleanup(self) -> None: ...
