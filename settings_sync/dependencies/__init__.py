"""Expose dependency helpers for FastAPI routers."""

from .auth import CurrentUser, get_current_user
from .clients import (
    get_authentication_gate,
    get_discord_oauth_client,
    get_identity_store,
    get_oauth_exchange_service,
    get_redis_client,
    get_redis_store,
    get_settings_store,
)
from .config import AppSettingsDep, get_app_settings

__all__ = [
    "CurrentUser",
    "AppSettingsDep",
    "get_app_settings",
    "get_authentication_gate",
    "get_current_user",
    "get_discord_oauth_client",
    "get_identity_store",
    "get_oauth_exchange_service",
    "get_redis_client",
    "get_redis_store",
    "get_settings_store",
]
