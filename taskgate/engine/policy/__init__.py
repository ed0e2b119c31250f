"""Approval gate package.

Exposes the approval policy configuration and the gate that pauses and
resumes jobs around dangerous tool calls.
"""

from .gate import ApprovalGate, describe_tool_call
from .models import TOOLS_REQUIRING_APPROVAL, ApprovalCheck, ApprovalPolicy

__all__ = [
    "ApprovalCheck",
    "ApprovalGate",
    "ApprovalPolicy",
    "TOOLS_REQUIRING_APPROVAL",
    "describe_tool_call",
]
