from __future__ import annotations

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from settings_sync.clients.discord_auth import (
    DiscordOAuthClient,
    OAuthIdentityLookupError,
    OAuthProviderUnavailableError,
    OAuthTokenExchangeError,
)
from settings_sync.core.config import DiscordSettings


def _settings() -> DiscordSettings:
    return DiscordSettings(
        DISCORD_CLIENT_ID="client",
        DISCORD_CLIENT_SECRET="shh",
        DISCORD_REDIRECT_URI="https://sync.example.com/callback",
        DISCORD_API_BASE="https://discord.test/api",
    )


class RecordingHandler:
    def __init__(self, token_response: httpx.Response, user_response: httpx.Response) -> None:
        self.token_response = token_response
        self.user_response = user_response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/oauth2/token"):
            return self.token_response
        if request.url.path.endswith("/users/@me"):
            return self.user_response
        return httpx.Response(404)


def test_authorization_url_requests_identify_scope() -> None:
    client = DiscordOAuthClient(_settings())

    url = urlparse(client.build_authorization_url())
    params = parse_qs(url.query)

    assert url.netloc == "discord.test"
    assert url.path == "/api/oauth2/authorize"
    assert params == {
        "client_id": ["client"],
        "redirect_uri": ["https://sync.example.com/callback"],
        "response_type": ["code"],
        "scope": ["identify"],
    }


@pytest.mark.anyio
async def test_exchange_posts_form_credentials_and_returns_token() -> None:
    handler = RecordingHandler(
        httpx.Response(200, json={"access_token": "bearer-1", "token_type": "Bearer"}),
        httpx.Response(200, json={"id": "42"}),
    )
    client = DiscordOAuthClient(_settings(), transport=httpx.MockTransport(handler))

    token = await client.exchange_authorization_code("abc")

    assert token == "bearer-1"
    request = handler.requests[0]
    assert request.method == "POST"
    assert request.headers["content-type"] == "application/x-www-form-urlencoded"
    form = parse_qs(request.content.decode())
    assert form["code"] == ["abc"]
    assert form["client_secret"] == ["shh"]
    assert form["grant_type"] == ["authorization_code"]
    assert form["redirect_uri"] == ["https://sync.example.com/callback"]


@pytest.mark.anyio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(400, json={"error": "invalid_grant"}),
        httpx.Response(200, json={"token_type": "Bearer"}),
        httpx.Response(200, text="<html>Bad Gateway</html>"),
        httpx.Response(200, json=["bearer-1"]),
        httpx.Response(200, json={"access_token": 12345}),
    ],
)
async def test_exchange_rejects_bad_codes(response: httpx.Response) -> None:
    handler = RecordingHandler(response, httpx.Response(200, json={"id": "42"}))
    client = DiscordOAuthClient(_settings(), transport=httpx.MockTransport(handler))

    with pytest.raises(OAuthTokenExchangeError):
        await client.exchange_authorization_code("expired")


@pytest.mark.anyio
async def test_fetch_user_id_sends_bearer_token() -> None:
    handler = RecordingHandler(
        httpx.Response(200, json={"access_token": "bearer-1"}),
        httpx.Response(200, json={"id": 42, "username": "someone"}),
    )
    client = DiscordOAuthClient(_settings(), transport=httpx.MockTransport(handler))

    user_id = await client.fetch_user_id("bearer-1")

    assert user_id == "42"
    assert handler.requests[0].headers["authorization"] == "Bearer bearer-1"


@pytest.mark.anyio
async def test_fetch_user_id_raises_on_provider_error() -> None:
    handler = RecordingHandler(
        httpx.Response(200, json={"access_token": "bearer-1"}),
        httpx.Response(401, json={"message": "401: Unauthorized"}),
    )
    client = DiscordOAuthClient(_settings(), transport=httpx.MockTransport(handler))

    with pytest.raises(OAuthIdentityLookupError):
        await client.fetch_user_id("bearer-1")


@pytest.mark.anyio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="not json"),
        httpx.Response(200, json=[{"id": "42"}]),
        httpx.Response(200, json={"username": "someone"}),
    ],
)
async def test_fetch_user_id_rejects_unusable_payloads(response: httpx.Response) -> None:
    handler = RecordingHandler(httpx.Response(200, json={"access_token": "bearer-1"}), response)
    client = DiscordOAuthClient(_settings(), transport=httpx.MockTransport(handler))

    with pytest.raises(OAuthIdentityLookupError):
        await client.fetch_user_id("bearer-1")


@pytest.mark.anyio
async def test_transport_failures_surface_as_unavailable() -> None:
    def broken(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    client = DiscordOAuthClient(_settings(), transport=httpx.MockTransport(broken))

    with pytest.raises(OAuthProviderUnavailableError):
        await client.exchange_authorization_code("abc")
    with pytest.raises(OAuthProviderUnavailableError):
        await client.fetch_user_id("bearer-1")
