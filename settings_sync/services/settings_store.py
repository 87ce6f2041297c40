"""Durable storage of one settings blob per authenticated identity."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from settings_sync.clients.redis_store import RedisStore
from settings_sync.core.errors import NotFound, PayloadTooLarge, UnsupportedMediaType
from settings_sync.core.security import SETTINGS_NAMESPACE, storage_key

logger = logging.getLogger(__name__)

SETTINGS_MEDIA_TYPE = "application/octet-stream"


def now_ms() -> int:
    """Wall-clock milliseconds since the epoch."""
    return int(time.time() * 1000)


def check_media_type(content_type: str | None) -> None:
    """Reject anything but ``application/octet-stream``; parameters are ignored."""
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if media_type != SETTINGS_MEDIA_TYPE:
        raise UnsupportedMediaType()


@dataclass(frozen=True, slots=True)
class SettingsVersion:
    """Version marker of a stored blob; doubles as its ETag."""

    written: int

    @property
    def etag(self) -> str:
        return str(self.written)


@dataclass(frozen=True, slots=True)
class SettingsRecord:
    value: bytes
    written: int

    @property
    def version(self) -> SettingsVersion:
        return SettingsVersion(written=self.written)


class SettingsStore:
    """Peek, read, write and delete ``settings:<hash>`` records.

    Records are Redis hashes with ``value`` and ``written`` fields. Writes
    replace the whole hash in one server-side script that also keeps
    ``written`` strictly increasing per record; overwrites are otherwise
    unconditional, so the last writer wins.
    """

    def __init__(
        self,
        store: RedisStore,
        *,
        pepper: str,
        size_limit: int,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._store = store
        self._pepper = pepper
        self._size_limit = size_limit
        self._clock = clock

    @property
    def size_limit(self) -> int:
        return self._size_limit

    def key_for(self, identity: str) -> str:
        return storage_key(SETTINGS_NAMESPACE, self._pepper, identity)

    async def peek(self, identity: str) -> SettingsVersion:
        written = await self._store.get_field(self.key_for(identity), "written")
        if written is None:
            raise NotFound()
        return SettingsVersion(written=int(written))

    async def read(self, identity: str) -> SettingsRecord:
        record = await self._store.get_record(self.key_for(identity))
        value = record.get("value")
        written = record.get("written")
        if value is None or written is None:
            raise NotFound()
        return SettingsRecord(value=bytes(value), written=int(written))

    async def write(
        self, identity: str, value: bytes, *, content_type: str | None
    ) -> SettingsVersion:
        check_media_type(content_type)
        if len(value) > self._size_limit:
            raise PayloadTooLarge()

        written = await self._store.replace_versioned_record(
            self.key_for(identity), value, self._clock()
        )
        logger.info("Stored %d bytes of settings (written=%d)", len(value), written)
        return SettingsVersion(written=written)

    async def delete(self, identity: str) -> None:
        await self._store.delete(self.key_for(identity))
        logger.info("Deleted settings record")


__all__ = [
    "SETTINGS_MEDIA_TYPE",
    "SettingsRecord",
    "SettingsStore",
    "SettingsVersion",
    "check_media_type",
    "now_ms",
]
