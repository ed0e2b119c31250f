"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It loads all configuration from environment variables and a .env file
without explicit dotenv loading.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are bound from environment variables and the .env file.
    Field names may also be passed directly, which is what tests do.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Server Configuration
    # =====================================================================

    server_host: str = Field(
        default="0.0.0.0",
        description="Server host address to bind to",
        alias="TASKGATE_SERVER_HOST",
    )

    server_port: int = Field(
        default=8000,
        description="Server port number",
        alias="TASKGATE_SERVER_PORT",
    )

    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins (use * for all)",
        alias="TASKGATE_CORS_ORIGINS",
    )

    # =====================================================================
    # Logging Configuration
    # =====================================================================

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="TASKGATE_LOG_LEVEL",
    )

    log_format: str = Field(
        default="detailed",
        description="Console log format: simple, detailed or json",
        alias="TASKGATE_LOG_FORMAT",
    )

    log_file_dir: str = Field(
        default="logs",
        description="Directory for log files when file logging is enabled",
        alias="TASKGATE_LOG_FILE_DIR",
    )

    enable_file_logging: bool = Field(
        default=False,
        description="Also write logs to files under log_file_dir",
        alias="TASKGATE_ENABLE_FILE_LOGGING",
    )

    # =====================================================================
    # Job Engine Configuration
    # =====================================================================

    store_url: str = Field(
        default="file://.taskgate/jobs.json",
        description="Job store location: file://<path> for JSON, or an async SQLAlchemy URL",
        alias="TASKGATE_STORE_URL",
    )

    tick_interval_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Worker loop tick period in seconds",
        alias="TASKGATE_TICK_INTERVAL_SECONDS",
    )

    max_turns: int = Field(
        default=50,
        ge=1,
        le=50,
        description="Maximum agent turns per job",
        alias="TASKGATE_MAX_TURNS",
    )

    require_approval: bool = Field(
        default=True,
        description="Pause jobs for human approval before shell, write_file and edit tool calls",
        alias="TASKGATE_REQUIRE_APPROVAL",
    )

    agent_cache_size: int = Field(
        default=32,
        ge=0,
        description="Maximum number of cached session agents (0 = unbounded)",
        alias="TASKGATE_AGENT_CACHE_SIZE",
    )

    agent_factory: str = Field(
        default="taskgate.engine.agents.echo:build_echo_agent",
        description="Import path (module:callable) of the agent factory",
        alias="TASKGATE_AGENT_FACTORY",
    )


settings = Settings()
