"""Bundled agent implementations."""

from .echo import EchoShellAgent, build_echo_agent

__all__ = [
    "EchoShellAgent",
    "build_echo_agent",
]
