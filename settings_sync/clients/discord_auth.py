"""
Discord OAuth utilities.

These helpers build the consent URL and resolve an authorization code into a
Discord account id. Each call is attempted once with a bounded timeout.
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import urlencode

import httpx

from settings_sync.core.config import DiscordSettings

logger = logging.getLogger(__name__)


class OAuthTokenExchangeError(Exception):
    """Raised when the token endpoint rejects an authorization code."""


class OAuthIdentityLookupError(Exception):
    """Raised when the identity endpoint cannot resolve the bearer token."""


class OAuthProviderUnavailableError(Exception):
    """Raised when Discord could not be reached at all."""


class DiscordOAuthClient:
    """Build Discord authorization URLs and exchange authorization codes."""

    AUTHORIZE_PATH = "/oauth2/authorize"
    TOKEN_PATH = "/oauth2/token"
    IDENTITY_PATH = "/users/@me"

    def __init__(
        self,
        discord_settings: DiscordSettings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._discord = discord_settings
        self._base_url = discord_settings.api_base_url.rstrip("/")
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._discord.http_timeout_seconds,
            transport=self._transport,
        )

    def build_authorization_url(self) -> str:
        """Construct the Discord OAuth consent URL."""
        params = {
            "client_id": self._discord.client_id,
            "redirect_uri": str(self._discord.redirect_uri),
            "response_type": "code",
            "scope": " ".join(self._discord.scopes),
        }
        return f"{self._base_url}{self.AUTHORIZE_PATH}?{urlencode(params)}"

    async def exchange_authorization_code(self, code: str) -> str:
        """Exchange an authorization code for a bearer access token."""
        payload = {
            "client_id": self._discord.client_id,
            "client_secret": self._discord.client_secret.get_secret_value(),
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": str(self._discord.redirect_uri),
        }

        try:
            async with self._client() as client:
                response = await client.post(f"{self._base_url}{self.TOKEN_PATH}", data=payload)
        except httpx.HTTPError as exc:
            raise OAuthProviderUnavailableError(str(exc)) from exc

        if not response.is_success:
            logger.info("Discord rejected authorization code (status %s)", response.status_code)
            raise OAuthTokenExchangeError(response.text)

        access_token = _json_field(response, "access_token")
        if not isinstance(access_token, str) or not access_token:
            raise OAuthTokenExchangeError("Token payload returned by Discord has no access_token.")
        return access_token

    async def fetch_user_id(self, access_token: str) -> str:
        """Return the Discord account id that owns ``access_token``."""
        try:
            async with self._client() as client:
                response = await client.get(
                    f"{self._base_url}{self.IDENTITY_PATH}",
                    headers={"Authorization": f"Bearer {access_token}"},
                )
        except httpx.HTTPError as exc:
            raise OAuthProviderUnavailableError(str(exc)) from exc

        if not response.is_success:
            logger.warning("Discord identity lookup failed (status %s)", response.status_code)
            raise OAuthIdentityLookupError(response.text)

        user_id = _json_field(response, "id")
        if not user_id:
            raise OAuthIdentityLookupError("Identity payload returned by Discord has no id.")
        return str(user_id)


def _json_field(response: httpx.Response, name: str) -> Any:
    """Return ``name`` from a JSON object body, or ``None`` when the body is not one."""
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    return payload.get(name)


__all__ = [
    "DiscordOAuthClient",
    "OAuthIdentityLookupError",
    "OAuthProviderUnavailableError",
    "OAuthTokenExchangeError",
]
