"""Unit tests for server configuration settings model.

Tests verify that the Settings model binds ``TASKGATE_*`` environment
variables, validates engine bounds, and that the job manager service builds
an engine from it.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from taskgate.engine import JobManager, JsonFileJobStore
from taskgate.engine.agents.echo import build_echo_agent
from taskgate.server.core.config import Settings
from taskgate.server.services.manager import build_job_manager, load_agent_factory


class TestSettingsDefaults:
    """Test Settings defaults when no environment is configured."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.server_host == "0.0.0.0"
        assert settings.server_port == 8000
        assert settings.cors_origins == ["*"]
        assert settings.store_url == "file://.taskgate/jobs.json"
        assert settings.tick_interval_seconds == 1.0
        assert settings.max_turns == 50
        assert settings.require_approval is True
        assert settings.agent_factory == "taskgate.engine.agents.echo:build_echo_agent"


class TestSettingsBinding:
    """Test Settings model environment variable binding."""

    def test_engine_settings_binding(self, monkeypatch):
        """Test TASKGATE_* engine variables binding."""
        monkeypatch.setenv("TASKGATE_STORE_URL", "sqlite+aiosqlite:///jobs.db")
        monkeypatch.setenv("TASKGATE_MAX_TURNS", "10")
        monkeypatch.setenv("TASKGATE_TICK_INTERVAL_SECONDS", "0.5")
        monkeypatch.setenv("TASKGATE_REQUIRE_APPROVAL", "false")

        settings = Settings(_env_file=None)
        assert settings.store_url == "sqlite+aiosqlite:///jobs.db"
        assert settings.max_turns == 10
        assert settings.tick_interval_seconds == 0.5
        assert settings.require_approval is False

    def test_cors_origins_binding(self, monkeypatch):
        """Test TASKGATE_CORS_ORIGINS is parsed as a JSON list."""
        monkeypatch.setenv("TASKGATE_CORS_ORIGINS", '["http://localhost:3000"]')

        settings = Settings(_env_file=None)
        assert settings.cors_origins == ["http://localhost:3000"]

    def test_env_var_names_are_case_sensitive(self, monkeypatch):
        monkeypatch.setenv("taskgate_server_port", "9000")

        settings = Settings(_env_file=None)
        assert settings.server_port == 8000

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("TASKGATE_MAX_TURNS", "0"),
            ("TASKGATE_MAX_TURNS", "51"),
            ("TASKGATE_TICK_INTERVAL_SECONDS", "0"),
            ("TASKGATE_AGENT_CACHE_SIZE", "-1"),
        ],
    )
    def test_out_of_range_values_are_rejected(self, monkeypatch, name: str, value: str):
        monkeypatch.setenv(name, value)

        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestAgentFactoryLoading:
    """Test resolving the configured agent factory import path."""

    def test_loads_callable(self):
        assert load_agent_factory("taskgate.engine.agents.echo:build_echo_agent") is build_echo_agent

    @pytest.mark.parametrize(
        "path",
        [
            "taskgate.engine.agents.echo",
            ":build_echo_agent",
            "taskgate.engine.agents.echo:missing",
            "taskgate:__version__",
        ],
    )
    def test_invalid_paths_are_rejected(self, path: str):
        with pytest.raises(ValueError):
            load_agent_factory(path)

    def test_missing_module_raises_import_error(self):
        with pytest.raises(ImportError):
            load_agent_factory("taskgate.no_such_module:factory")


class TestBuildJobManager:
    def test_builds_manager_from_settings(self, tmp_path: Path):
        settings = Settings(
            _env_file=None,
            store_url=f"file://{tmp_path / 'jobs.json'}",
            max_turns=5,
            agent_cache_size=3,
        )

        manager = build_job_manager(settings)

        assert isinstance(manager, JobManager)
        assert isinstance(manager._store, JsonFileJobStore)
        assert manager._store.path == tmp_path / "jobs.json"
        assert manager.is_running is False
