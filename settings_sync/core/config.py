"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app, its dependencies and the
CLI entrypoint share one immutable configuration surface loaded at startup.
Values come from the process environment first, then from a `.env` file in
the working directory.
"""

from functools import lru_cache
from typing import Annotated, Optional

from pydantic import AnyHttpUrl, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_SETTINGS_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    frozen=True,
)


def _split_csv(value: str | tuple[str, ...] | list[str]) -> tuple[str, ...]:
    if isinstance(value, tuple):
        return value
    if isinstance(value, list):
        return tuple(value)
    return tuple(item.strip() for item in value.split(",") if item.strip())


class RedisSettings(BaseSettings):
    """Connection details for the backing key-value store."""

    model_config = _SETTINGS_CONFIG

    uri: str = Field(..., validation_alias="REDIS_URI")
    socket_timeout: Optional[float] = Field(
        None,
        validation_alias="REDIS_SOCKET_TIMEOUT",
        description="Seconds before a store call is abandoned; client default when unset.",
    )


class PepperSettings(BaseSettings):
    """Server-held secrets mixed into storage key derivation."""

    model_config = _SETTINGS_CONFIG

    secrets: SecretStr = Field(..., validation_alias="PEPPER_SECRETS")
    settings: SecretStr = Field(..., validation_alias="PEPPER_SETTINGS")

    @model_validator(mode="after")
    def _require_distinct(self) -> "PepperSettings":
        secrets_pepper = self.secrets.get_secret_value()
        settings_pepper = self.settings.get_secret_value()
        if not secrets_pepper or not settings_pepper:
            raise ValueError("Both PEPPER_SECRETS and PEPPER_SETTINGS must be non-empty.")
        if secrets_pepper == settings_pepper:
            raise ValueError("PEPPER_SECRETS and PEPPER_SETTINGS must differ.")
        return self


class DiscordSettings(BaseSettings):
    """Configuration required for the Discord OAuth flow."""

    model_config = _SETTINGS_CONFIG

    client_id: str = Field(..., validation_alias="DISCORD_CLIENT_ID")
    client_secret: SecretStr = Field(..., validation_alias="DISCORD_CLIENT_SECRET")
    redirect_uri: AnyHttpUrl = Field(..., validation_alias="DISCORD_REDIRECT_URI")
    api_base_url: str = Field("https://discord.com/api", validation_alias="DISCORD_API_BASE")
    http_timeout_seconds: float = Field(
        10.0,
        gt=0,
        validation_alias="DISCORD_HTTP_TIMEOUT",
        description="Timeout applied to each call made to Discord.",
    )
    scopes: Annotated[tuple[str, ...], NoDecode] = Field(
        ("identify",),
        validation_alias="DISCORD_SCOPES",
    )

    @field_validator("scopes", mode="before")
    @classmethod
    def _split_scopes(
        cls, value: str | tuple[str, ...] | list[str]
    ) -> tuple[str, ...]:
        """Support providing scopes as a comma-separated string."""
        return _split_csv(value)


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = _SETTINGS_CONFIG

    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    size_limit: int = Field(
        32 * 1024 * 1024,
        gt=0,
        validation_alias="SIZE_LIMIT",
        description="Largest settings payload accepted, in bytes.",
    )
    host: str = Field("0.0.0.0", validation_alias="HOST")
    port: int = Field(8080, validation_alias="PORT")
    cors_allow_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        ("*",),
        validation_alias="CORS_ALLOW_ORIGINS",
    )
    redis: RedisSettings = Field(default_factory=RedisSettings)
    peppers: PepperSettings = Field(default_factory=PepperSettings)
    discord: DiscordSettings = Field(default_factory=DiscordSettings)

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(
        cls, value: str | tuple[str, ...] | list[str]
    ) -> tuple[str, ...]:
        return _split_csv(value)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "DiscordSettings",
    "PepperSettings",
    "RedisSettings",
    "get_settings",
]
