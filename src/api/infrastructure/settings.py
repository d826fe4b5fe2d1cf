"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        TABLERO_DB_HOST: Database host (default: localhost)
        TABLERO_DB_PORT: Database port (default: 5432)
        TABLERO_DB_DATABASE: Database name (default: tablero)
        TABLERO_DB_USERNAME: Database user (default: tablero)
        TABLERO_DB_PASSWORD: Database password (required in production)
        TABLERO_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        TABLERO_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="TABLERO_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="tablero", description="Database name")
    username: str = Field(default="tablero", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class BoardSettings(BaseSettings):
    """Board engine settings.

    Environment variables:
        TABLERO_BOARD_LOCK_TIMEOUT_SECONDS: Wait for a board's lock before
            failing with Busy (default: 5.0)
        TABLERO_BOARD_SUBSCRIBER_QUEUE_SIZE: Pending change events per
            subscriber before events are dropped (default: 100)
        TABLERO_BOARD_STORAGE_BACKEND: "memory" or "postgres" (default: memory)
        TABLERO_BOARD_ELEVATED_MEMBER_ROLE: Role tag that lets members manage
            members and delete boards (default: board_admin)
        TABLERO_BOARD_DEFAULT_GROUP_TITLE: Title of the group seeded on new boards
        TABLERO_BOARD_DEFAULT_COLUMN_TITLE: Title of the status column seeded on new boards
        TABLERO_BOARD_DEFAULT_STATUS_OPTIONS: Options of the seeded status column
    """

    model_config = SettingsConfigDict(
        env_prefix="TABLERO_BOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    lock_timeout_seconds: float = Field(
        default=5.0,
        description="Seconds to wait for a board's lock",
        gt=0,
        le=300,
    )
    subscriber_queue_size: int = Field(
        default=100,
        description="Maximum pending change events per subscriber",
        ge=1,
        le=10000,
    )
    storage_backend: Literal["memory", "postgres"] = Field(
        default="memory",
        description="Where boards are stored",
    )
    elevated_member_role: str | None = Field(
        default="board_admin",
        description="Role tag elevating members to manage members and delete boards",
    )
    default_group_title: str = Field(
        default="Main Group",
        description="Title of the group seeded on new boards",
        min_length=1,
        max_length=255,
    )
    default_column_title: str = Field(
        default="Status",
        description="Title of the status column seeded on new boards",
        min_length=1,
        max_length=255,
    )
    default_status_options: list[str] = Field(
        default=["To Do", "In Progress", "Done"],
        description="Options of the seeded status column",
    )

    @field_validator("elevated_member_role")
    @classmethod
    def blank_role_disables_elevation(cls, value: str | None) -> str | None:
        """Treat an empty role tag as no elevation."""
        if value is not None and not value.strip():
            return None
        return value


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections.

    Environment variables:
        TABLERO_APP_NAME: Application name
        TABLERO_DEBUG: Debug mode (default: false)
        TABLERO_LOG_LEVEL: Minimum log level (default: INFO)
        TABLERO_LOG_FORMAT: "console", "json" or "auto" to pick console output
            on a TTY and JSON elsewhere (default: auto)
    """

    model_config = SettingsConfigDict(
        env_prefix="TABLERO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Tablero API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Minimum log level",
    )
    log_format: Literal["auto", "console", "json"] = Field(
        default="auto",
        description="Log renderer",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        """Accept log levels in any case."""
        return value.upper() if isinstance(value, str) else value

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def boards(self) -> BoardSettings:
        """Get board engine settings."""
        return get_board_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_board_settings() -> BoardSettings:
    """Get cached board engine settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return BoardSettings()
