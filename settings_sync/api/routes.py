"""
FastAPI routes for the settings sync service.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Header, Query, Request, Response
from fastapi.responses import HTMLResponse, RedirectResponse

from settings_sync.clients import DiscordOAuthClient
from settings_sync.core.errors import PayloadTooLarge
from settings_sync.dependencies import (
    CurrentUser,
    get_discord_oauth_client,
    get_oauth_exchange_service,
    get_settings_store,
)
from settings_sync.schemas import SecretResponse, WrittenResponse
from settings_sync.services import OAuthExchangeService, SettingsStore
from settings_sync.services.settings_store import SETTINGS_MEDIA_TYPE, check_media_type

router = APIRouter()

SettingsStoreDep = Annotated[SettingsStore, Depends(get_settings_store)]
IfNoneMatch = Annotated[Optional[str], Header()]

ABOUT = """
<h1>Settings Sync API</h1>
<p>This service stores an opaque settings blob so it can be synchronized
between your devices. Requests only reach it because you opted
into settings sync, and you can turn that off at any point.</p>
<p>Your account id is never stored directly: every record is keyed by a
peppered hash, and the secret used to sign in is issued only after you
authorize with Discord.</p>
""".strip()


async def _read_capped_body(request: Request, limit: int) -> bytes:
    """Read the request body, refusing to buffer more than ``limit`` bytes."""
    declared = request.headers.get("content-length", "").strip()
    if declared.isdigit() and int(declared) > limit:
        raise PayloadTooLarge()

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise PayloadTooLarge()
    return bytes(body)


def _etag_matches(if_none_match: Optional[str], etag: str) -> bool:
    """Equality check of ``If-None-Match`` candidates against ``etag``."""
    if not if_none_match:
        return False
    for candidate in if_none_match.split(","):
        candidate = candidate.strip()
        if candidate == "*":
            return True
        if candidate.startswith("W/"):
            candidate = candidate[2:]
        if candidate.strip('"') == etag:
            return True
    return False


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def about() -> HTMLResponse:
    return HTMLResponse(content=ABOUT)


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.get("/authorize")
async def start_discord_oauth_flow(
    oauth_client: Annotated[DiscordOAuthClient, Depends(get_discord_oauth_client)],
) -> RedirectResponse:
    """Send the browser to the Discord consent screen."""
    return RedirectResponse(
        url=oauth_client.build_authorization_url(),
        status_code=HTTPStatus.FOUND,
    )


@router.get("/callback", status_code=HTTPStatus.OK, response_model=SecretResponse)
async def handle_discord_oauth_callback(
    exchange: Annotated[OAuthExchangeService, Depends(get_oauth_exchange_service)],
    code: Optional[str] = Query(
        default=None,
        description="Authorization code returned by Discord.",
    ),
) -> SecretResponse:
    """Complete the OAuth exchange and return the caller's sync secret."""
    secret = await exchange.exchange(code)
    return SecretResponse(secret=secret)


@router.head("/settings")
async def peek_settings(
    user: CurrentUser,
    store: SettingsStoreDep,
    if_none_match: IfNoneMatch = None,
) -> Response:
    version = await store.peek(user.identity)
    status_code = (
        HTTPStatus.NOT_MODIFIED
        if _etag_matches(if_none_match, version.etag)
        else HTTPStatus.OK
    )
    return Response(status_code=status_code, headers={"ETag": version.etag})


@router.get(
    "/settings",
    response_class=Response,
    responses={200: {"content": {SETTINGS_MEDIA_TYPE: {}}}},
)
async def read_settings(
    user: CurrentUser,
    store: SettingsStoreDep,
    if_none_match: IfNoneMatch = None,
) -> Response:
    record = await store.read(user.identity)
    etag = record.version.etag
    if _etag_matches(if_none_match, etag):
        return Response(status_code=HTTPStatus.NOT_MODIFIED, headers={"ETag": etag})
    return Response(
        content=record.value,
        media_type=SETTINGS_MEDIA_TYPE,
        headers={"ETag": etag},
    )


@router.put("/settings", status_code=HTTPStatus.OK, response_model=WrittenResponse)
async def write_settings(
    request: Request,
    user: CurrentUser,
    store: SettingsStoreDep,
) -> WrittenResponse:
    content_type = request.headers.get("content-type")
    check_media_type(content_type)
    body = await _read_capped_body(request, store.size_limit)
    version = await store.write(user.identity, body, content_type=content_type)
    return WrittenResponse(written=version.written)


@router.delete("/settings", status_code=HTTPStatus.NO_CONTENT)
async def delete_settings(user: CurrentUser, store: SettingsStoreDep) -> Response:
    await store.delete(user.identity)
    return Response(status_code=HTTPStatus.NO_CONTENT)


__all__ = ["router"]
