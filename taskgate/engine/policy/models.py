from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Tuple

from pydantic import Field

from ..schemas.base import BaseSchema
from ..schemas.domain import ToolCallRequest

TOOLS_REQUIRING_APPROVAL: FrozenSet[str] = frozenset({"shell", "write_file", "edit"})


class ApprovalPolicy(BaseSchema):
    """
    Configuration for the human-in-the-loop approval gate.

    A tool call needs approval when its name (compared case-insensitively) is
    in ``tools_requiring_approval``. ``enabled=False`` turns the gate off
    entirely, so every batch runs without pausing.
    """

    enabled: bool = True
    tools_requiring_approval: FrozenSet[str] = Field(
        default=TOOLS_REQUIRING_APPROVAL,
        description="Lower-case tool names whose calls pause the job for approval.",
    )

    def requires_approval(self, tool_name: str) -> bool:
        return tool_name.lower() in self.tools_requiring_approval


@dataclass(frozen=True)
class ApprovalCheck:
    """Classification of one tool-call batch."""

    needs: bool
    dangerous: Tuple[ToolCallRequest, ...] = field(default_factory=tuple)
