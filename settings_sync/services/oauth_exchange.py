"""
Turn a Discord authorization code into the caller's stable sync secret.
"""

from __future__ import annotations

import logging
from typing import Callable

from settings_sync.clients.discord_auth import (
    DiscordOAuthClient,
    OAuthIdentityLookupError,
    OAuthProviderUnavailableError,
    OAuthTokenExchangeError,
)
from settings_sync.core.errors import BadRequest, InvalidCode, UpstreamUnavailable
from settings_sync.core.security import generate_secret
from settings_sync.services.identity_store import IdentityStore

logger = logging.getLogger(__name__)


class OAuthExchangeService:
    """Resolve codes through Discord and issue one secret per identity.

    Issuance is idempotent: an identity that already holds a secret gets the
    same one back and nothing is written.
    """

    def __init__(
        self,
        oauth_client: DiscordOAuthClient,
        identity_store: IdentityStore,
        *,
        secret_factory: Callable[[], str] = generate_secret,
    ) -> None:
        self._oauth = oauth_client
        self._identities = identity_store
        self._secret_factory = secret_factory

    async def exchange(self, code: str | None) -> str:
        if not code:
            raise BadRequest("Missing code")

        try:
            access_token = await self._oauth.exchange_authorization_code(code)
        except OAuthTokenExchangeError as exc:
            raise InvalidCode() from exc
        except OAuthProviderUnavailableError as exc:
            logger.warning("Discord token endpoint unreachable: %s", exc)
            raise UpstreamUnavailable() from exc

        try:
            identity = await self._oauth.fetch_user_id(access_token)
        except (OAuthIdentityLookupError, OAuthProviderUnavailableError) as exc:
            raise UpstreamUnavailable() from exc

        return await self.issue_secret(identity)

    async def issue_secret(self, identity: str) -> str:
        """Return the stored secret for ``identity``, minting one on first use."""
        secret = await self._identities.get_secret(identity)
        if secret:
            return secret

        secret = self._secret_factory()
        await self._identities.set_secret(identity, secret)
        logger.info(
            "Issued new secret for %s",
            self._identities.key_for(identity)[: len("secrets:") + 8],
        )
        return secret


__all__ = ["OAuthExchangeService"]
