"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./taskboard.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        default="change-me",
        description="Secret key for signing JWT tokens and channel grants",
        min_length=1,
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    channel_grant_expire_seconds: int = Field(
        default=60,
        description="Lifetime of a signed channel subscription grant",
        gt=0,
    )
    admin_channel: str = Field(
        default="private-admin",
        description="Name of the broadcast channel shared by administrators",
        min_length=1,
    )
    app_timezone: str = Field(
        default="UTC",
        description="Timezone used to stamp outgoing realtime events",
    )
    dedupe_bucket_seconds: int = Field(
        default=5,
        description="Width of the timestamp bucket used to derive event identities",
        gt=0,
    )
    dedupe_ledger_size: int = Field(
        default=500,
        description="Maximum number of applied event keys remembered per live session",
        gt=0,
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to call the API from a browser",
    )
    log_level: str = Field(
        default="INFO",
        description="Level applied to the ``taskboard`` logger hierarchy",
    )

    @model_validator(mode="after")
    def _validate_admin_channel(self) -> "Settings":
        if not self.admin_channel.startswith("private-"):
            raise ValueError("ADMIN_CHANNEL must be a private channel name")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
