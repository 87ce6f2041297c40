"""
Factory functions to provide shared clients and services as FastAPI dependencies.

Process-wide resources (the Redis pool, the Discord client) are cached; the
per-request services on top of them are cheap wrappers built from injected
dependencies so tests can override any layer.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from redis.asyncio import Redis

from settings_sync.clients import DiscordOAuthClient, RedisStore, create_redis_client
from settings_sync.core.config import get_settings
from settings_sync.services import (
    AuthenticationGate,
    IdentityStore,
    OAuthExchangeService,
    SettingsStore,
)

from .config import AppSettingsDep


@lru_cache()
def get_redis_client() -> Redis:
    """Create the process-wide Redis client and connection pool."""
    return create_redis_client(get_settings().redis)


def get_redis_store(client: Annotated[Redis, Depends(get_redis_client)]) -> RedisStore:
    """Wrap the shared Redis client with the store operations."""
    return RedisStore(client)


@lru_cache()
def get_discord_oauth_client() -> DiscordOAuthClient:
    """Create a singleton Discord OAuth client."""
    return DiscordOAuthClient(get_settings().discord)


def get_identity_store(
    store: Annotated[RedisStore, Depends(get_redis_store)],
    settings: AppSettingsDep,
) -> IdentityStore:
    """Provide the secrets namespace keyed by the secrets pepper."""
    return IdentityStore(store, pepper=settings.peppers.secrets.get_secret_value())


def get_settings_store(
    store: Annotated[RedisStore, Depends(get_redis_store)],
    settings: AppSettingsDep,
) -> SettingsStore:
    """Provide the settings namespace keyed by the settings pepper."""
    return SettingsStore(
        store,
        pepper=settings.peppers.settings.get_secret_value(),
        size_limit=settings.size_limit,
    )


def get_oauth_exchange_service(
    oauth_client: Annotated[DiscordOAuthClient, Depends(get_discord_oauth_client)],
    identity_store: Annotated[IdentityStore, Depends(get_identity_store)],
) -> OAuthExchangeService:
    return OAuthExchangeService(oauth_client, identity_store)


def get_authentication_gate(
    identity_store: Annotated[IdentityStore, Depends(get_identity_store)],
) -> AuthenticationGate:
    return AuthenticationGate(identity_store)


__all__ = [
    "get_authentication_gate",
    "get_discord_oauth_client",
    "get_identity_store",
    "get_oauth_exchange_service",
    "get_redis_client",
    "get_redis_store",
    "get_settings_store",
]
