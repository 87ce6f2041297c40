"""Expose constructed client wrappers."""

from .discord_auth import DiscordOAuthClient
from .redis_store import RedisStore, close_redis_client, create_redis_client

__all__ = [
    "DiscordOAuthClient",
    "RedisStore",
    "close_redis_client",
    "create_redis_client",
]
