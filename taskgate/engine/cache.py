"""Agent caching for session-scoped conversations.

Agents are expensive to build and carry conversation history, so jobs that
share a session reuse one agent. Jobs without a session are keyed by their
own id. The boundary layer invalidates entries when the session's context
changes (for example after switching repository or branch).
"""

import asyncio
from typing import Callable, Dict, Optional

from taskgate.core.logging_config import get_logger

from .agent import Agent

logger = get_logger(__name__)


class AgentCache:
    """Bounded cache of agent instances.

    This cache handles:
    - Agent instance creation and reuse
    - FIFO eviction once ``max_size`` is reached, skipping pinned keys
    - Cleanup of evicted or invalidated agents

    A key is pinned while ``is_pinned(key)`` is true, e.g. while a job paused
    for approval still needs its agent. When every cached key is pinned the
    cache grows past ``max_size`` instead of evicting.

    Attributes:
        max_size: Maximum number of agents to cache (0 = unlimited)
    """

    def __init__(self, max_size: int = 0, is_pinned: Optional[Callable[[str], bool]] = None) -> None:
        self._agents: Dict[str, Agent] = {}
        self._max_size = max_size
        self._is_pinned: Callable[[str], bool] = is_pinned or (lambda key: False)
        self._lock = asyncio.Lock()

    def pin_when(self, is_pinned: Callable[[str], bool]) -> None:
        """Install the predicate that protects in-use keys from eviction."""
        self._is_pinned = is_pinned

    async def get(self, key: str) -> Optional[Agent]:
        async with self._lock:
            return self._agents.get(key)

    async def set(self, key: str, agent: Agent) -> None:
        """Store an agent, evicting the oldest unpinned entry when the cache is full."""
        async with self._lock:
            await self._set_locked(key, agent)

    async def get_or_create(self, key: str, factory: Callable[[], Agent]) -> Agent:
        """Return the cached agent for ``key``, building it with ``factory`` on a miss."""
        async with self._lock:
            agent = self._agents.get(key)
            if agent is None:
                agent = factory()
                await self._set_locked(key, agent)
            return agent

    async def remove(self, key: str) -> bool:
        """Remove an agent from the cache and clean it up.

        Returns:
            True if an agent was cached under ``key``.
        """
        async with self._lock:
            agent = self._agents.pop(key, None)
        if agent is None:
            return False
        await agent.cleanup()
        return True

    async def clear(self) -> None:
        async with self._lock:
            agents = list(self._agents.values())
            self._agents.clear()
        for agent in agents:
            await agent.cleanup()

    async def has(self, key: str) -> bool:
        async with self._lock:
            return key in self._agents

    def size(self) -> int:
        return len(self._agents)

    async def _set_locked(self, key: str, agent: Agent) -> None:
        if key not in self._agents and self._max_size > 0 and len(self._agents) >= self._max_size:
            victim = next((k for k in self._agents if not self._is_pinned(k)), None)
            if victim is None:
                logger.debug(f"All {len(self._agents)} cached agents are in use; not evicting")
            else:
                evicted = self._agents.pop(victim)
                logger.debug(f"Evicting cached agent {victim}")
                await evicted.cleanup()
        self._agents[key] = agent
