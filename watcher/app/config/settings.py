"""Settings for the watcher, read once from the environment at startup."""
from __future__ import annotations

from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from watcher.app.constants import DEFAULT_PENDING_DIR, WatchSetBackend
from watcher.app.errors import ConfigurationError

KEY_PLACEHOLDERS = ("{key}", "%s")

WatchSetBackendName = Literal["filesystem", "inmemory"]
LogLevelName = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
LogFormatName = Literal["console", "json"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    host: str = Field("0.0.0.0", validation_alias="HOST")
    port: int = Field(8080, validation_alias="PORT")

    # e.g. http://localhost:3000/task/{key}/info (the legacy %s form is also accepted)
    remote_url: str = Field(..., validation_alias="REMOTE_URL")
    webhook_url: str = Field(..., validation_alias="WEBHOOK_URL")
    poll_interval_seconds: int = Field(..., ge=1, validation_alias="POLL_INTERVAL")

    pending_dir: str = Field(DEFAULT_PENDING_DIR, validation_alias="PENDING_DIR")
    watch_set_backend: WatchSetBackendName = Field(
        WatchSetBackend.FILESYSTEM, validation_alias="WATCH_SET_BACKEND"
    )
    allow_duplicate_watches: bool = Field(True, validation_alias="ALLOW_DUPLICATE_WATCHES")

    http_connect_timeout_seconds: float = Field(5.0, gt=0, validation_alias="HTTP_CONNECT_TIMEOUT_SECONDS")
    http_read_timeout_seconds: float = Field(30.0, gt=0, validation_alias="HTTP_READ_TIMEOUT_SECONDS")

    log_level: LogLevelName = Field("INFO", validation_alias="LOG_LEVEL")
    log_format: LogFormatName = Field("console", validation_alias="LOG_FORMAT")

    @field_validator("remote_url")
    @classmethod
    def _remote_url_has_placeholder(cls, value: str) -> str:
        if not any(p in value for p in KEY_PLACEHOLDERS):
            raise ValueError("REMOTE_URL must contain a {key} or %s placeholder")
        return value

    @field_validator("webhook_url")
    @classmethod
    def _webhook_url_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("WEBHOOK_URL must not be empty")
        return value.strip()

    @field_validator("watch_set_backend", "log_format", mode="before")
    @classmethod
    def _lowercase_choice(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("log_level", mode="before")
    @classmethod
    def _uppercase_level(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value


def load_settings(**overrides: object) -> Settings:
    """Build Settings from the environment, mapping validation failures to ConfigurationError."""
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ())) or 'settings'}: {err.get('msg')}"
            for err in exc.errors()
        )
        raise ConfigurationError(f"invalid configuration: {problems}") from exc
