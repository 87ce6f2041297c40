"""Redis-backed key-value storage shared by the identity and settings stores."""

from __future__ import annotations

import inspect
from typing import Any, Dict, Optional

from redis.asyncio import Redis

from settings_sync.core.config import RedisSettings


def create_redis_client(redis_settings: RedisSettings) -> Redis:
    """Build a pooled asyncio Redis client returning raw bytes."""
    return Redis.from_url(
        redis_settings.uri,
        decode_responses=False,
        socket_timeout=redis_settings.socket_timeout,
    )


# KEYS[1] = record key; ARGV[1] = value; ARGV[2] = candidate written (ms).
_REPLACE_VERSIONED_RECORD = """
local previous = tonumber(redis.call("HGET", KEYS[1], "written") or "0")
local written = tonumber(ARGV[2])
if written <= previous then
    written = previous + 1
end
redis.call("DEL", KEYS[1])
redis.call("HSET", KEYS[1], "value", ARGV[1], "written", string.format("%d", written))
return written
"""


async def close_redis_client(client: Any) -> None:
    """Close a client and disconnect its pool."""
    close_fn = getattr(client, "aclose", None) or getattr(client, "close", None)
    if callable(close_fn):
        result = close_fn()
        if inspect.isawaitable(result):
            await result

    pool = getattr(client, "connection_pool", None)
    disconnect_fn = getattr(pool, "disconnect", None)
    if callable(disconnect_fn):
        result = disconnect_fn()
        if inspect.isawaitable(result):
            await result


class RedisStore:
    """Thin wrapper exposing the handful of atomic operations the services need.

    Every method is a single Redis command or server-side script, so a reader
    never observes a partially replaced record.
    """

    def __init__(self, client: Redis) -> None:
        self._client = client
        self._replace_versioned = client.register_script(_REPLACE_VERSIONED_RECORD)

    async def get_string(self, key: str) -> Optional[str]:
        raw = await self._client.get(key)
        if raw is None:
            return None
        return raw.decode("utf-8") if isinstance(raw, bytes) else raw

    async def set_string(self, key: str, value: str) -> None:
        await self._client.set(key, value)

    async def get_field(self, key: str, field: str) -> Optional[bytes]:
        return await self._client.hget(key, field)

    async def get_record(self, key: str) -> Dict[str, bytes]:
        """Return every field of a hash in one round trip; empty when absent."""
        raw = await self._client.hgetall(key)
        return {
            (name.decode("utf-8") if isinstance(name, bytes) else name): value
            for name, value in raw.items()
        }

    async def replace_versioned_record(self, key: str, value: bytes, written: int) -> int:
        """Replace the hash at ``key`` with ``value`` and a strictly newer ``written``.

        The stored marker is ``max(written, previous + 1)``; it is returned.
        """
        result = await self._replace_versioned(keys=[key], args=[value, written])
        return int(result)

    async def delete(self, key: str) -> None:
        await self._client.delete(key)


__all__ = ["RedisStore", "close_redis_client", "create_redis_client"]
