"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"

STORAGE_BACKEND_MEMORY = "memory"
STORAGE_BACKEND_FILE = "file"
STORAGE_BACKEND_DATABASE = "database"
STORAGE_BACKENDS = (
    STORAGE_BACKEND_MEMORY,
    STORAGE_BACKEND_FILE,
    STORAGE_BACKEND_DATABASE,
)


class Settings(BaseSettings):
    """Configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    app_timezone: str = Field(
        default="America/Bogota",
        description="Reference timezone used to interpret programming dates and times",
    )
    storage_backend: str = Field(
        default=STORAGE_BACKEND_FILE,
        description="Durable key-value backend: memory, file or database",
    )
    storage_path: str = Field(
        default=".cargo_alerts/state.json",
        description="JSON document used by the file storage backend",
        min_length=1,
    )
    database_url: str = Field(
        default="sqlite:///./cargo_alerts.db",
        description="SQLAlchemy URL used by the database storage backend",
        min_length=1,
    )
    throttle_seconds: float = Field(
        default=30,
        description="Minimum seconds between two automatic programming checks",
        ge=0,
    )
    max_notifications_per_tick: int = Field(
        default=5,
        description="Maximum per-item programming notifications emitted per check",
        gt=0,
    )
    imminent_window_minutes: float = Field(
        default=5,
        description="Lookahead window for the 'about to start' alert",
        ge=0,
    )
    check_interval_seconds: float = Field(
        default=60,
        description="Period of the background programming check timer",
        gt=0,
    )
    programming_api_url: str | None = Field(
        default=None,
        description="Endpoint returning the programming records as JSON",
    )
    programming_api_token: str | None = Field(
        default=None,
        description="Bearer token sent to the programming endpoint",
    )
    programming_request_timeout: float = Field(
        default=10,
        description="Timeout in seconds for programming requests",
        gt=0,
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"],
        description="Origins allowed to call the API from the dashboard",
    )

    @field_validator("storage_backend")
    @classmethod
    def _validate_storage_backend(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in STORAGE_BACKENDS:
            raise ValueError(
                "STORAGE_BACKEND must be one of: " + ", ".join(STORAGE_BACKENDS)
            )
        return normalized


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = [
    "Settings",
    "get_settings",
    "reset_settings_cache",
    "STORAGE_BACKEND_MEMORY",
    "STORAGE_BACKEND_FILE",
    "STORAGE_BACKEND_DATABASE",
]
