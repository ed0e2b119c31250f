"""
Job Manager Service.

Builds the process-wide ``JobManager`` from settings and keeps it as a
singleton for the API layer.
"""

from importlib import import_module
from typing import Optional

from taskgate.core.logging_config import get_logger
from taskgate.engine import AgentCache, ApprovalPolicy, JobManager, build_job_store
from taskgate.engine.manager import AgentFactory
from taskgate.server.core.config import Settings, settings

logger = get_logger(__name__)


def load_agent_factory(path: str) -> AgentFactory:
    """Resolve a ``module:callable`` import path to an agent factory."""
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Agent factory must be given as 'module:callable', got {path!r}")
    factory = getattr(import_module(module_name), attr, None)
    if not callable(factory):
        raise ValueError(f"Agent factory {path!r} is not callable")
    return factory


def build_job_manager(config: Settings) -> JobManager:
    logger.info(f"Building job manager with store {config.store_url}")
    return JobManager(
        store=build_job_store(config.store_url),
        agent_factory=load_agent_factory(config.agent_factory),
        approval_policy=ApprovalPolicy(enabled=config.require_approval),
        agent_cache=AgentCache(max_size=config.agent_cache_size),
        max_turns=config.max_turns,
        tick_interval=config.tick_interval_seconds,
    )


_job_manager: Optional[JobManager] = None


def get_job_manager() -> JobManager:
    global _job_manager
    if _job_manager is None:
        _job_manager = build_job_manager(settings)
    return _job_manager


def set_job_manager(manager: Optional[JobManager]) -> None:
    global _job_manager
    _job_manager = manager
