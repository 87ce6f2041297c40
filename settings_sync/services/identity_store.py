"""Mapping from peppered Discord identities to issued user secrets."""

from __future__ import annotations

from typing import Optional

from settings_sync.clients.redis_store import RedisStore
from settings_sync.core.security import SECRETS_NAMESPACE, storage_key


class IdentityStore:
    """Reads and writes ``secrets:<hash>`` entries."""

    def __init__(self, store: RedisStore, *, pepper: str) -> None:
        self._store = store
        self._pepper = pepper

    def key_for(self, identity: str) -> str:
        return storage_key(SECRETS_NAMESPACE, self._pepper, identity)

    async def get_secret(self, identity: str) -> Optional[str]:
        return await self._store.get_string(self.key_for(identity))

    async def set_secret(self, identity: str, secret: str) -> None:
        await self._store.set_string(self.key_for(identity), secret)


__all__ = ["IdentityStore"]
