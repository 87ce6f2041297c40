"""
Error taxonomy for the settings sync service.

Every failure is raised as a ``SettingsSyncError`` subclass at the point it is
detected and rendered as ``{"error": message}``. Redis failures that escape
the services are logged and rendered the same way as a 503.
"""

from __future__ import annotations

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class SettingsSyncError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class BadRequest(SettingsSyncError):
    status_code = HTTPStatus.BAD_REQUEST
    message = "Missing code"


class Unauthorized(SettingsSyncError):
    """Credentials were missing, malformed or did not match.

    ``reason`` is kept for logging only; malformed and invalid credentials
    share a message so callers cannot tell which check failed.
    """

    status_code = HTTPStatus.UNAUTHORIZED

    MISSING = "missing"
    MALFORMED = "malformed"
    INVALID = "invalid"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        message = (
            "Missing authorization" if reason == self.MISSING else "Invalid authorization"
        )
        super().__init__(message)


class InvalidCode(SettingsSyncError):
    status_code = HTTPStatus.BAD_REQUEST
    message = "Invalid code"


class UpstreamUnavailable(SettingsSyncError):
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    message = "Failed to get user"


class UnsupportedMediaType(SettingsSyncError):
    status_code = HTTPStatus.UNSUPPORTED_MEDIA_TYPE
    message = "Content type must be `application/octet-stream`"


class PayloadTooLarge(SettingsSyncError):
    status_code = HTTPStatus.REQUEST_ENTITY_TOO_LARGE
    message = "Settings are too large"


class NotFound(SettingsSyncError):
    status_code = HTTPStatus.NOT_FOUND
    message = "No settings currently synchronized"


class StorageUnavailable(SettingsSyncError):
    status_code = HTTPStatus.SERVICE_UNAVAILABLE
    message = "Storage unavailable"


async def _settings_sync_error_handler(
    request: Request, exc: SettingsSyncError
) -> JSONResponse:
    """Render a domain error as a small JSON object."""
    if exc.status_code >= HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=int(exc.status_code), content={"error": exc.message})


async def _redis_error_handler(request: Request, exc: RedisError) -> JSONResponse:
    """Surface an unreachable or failing store as a JSON 503."""
    logger.error(
        "%s %s failed: redis error %s: %s",
        request.method,
        request.url.path,
        type(exc).__name__,
        exc,
    )
    return await _settings_sync_error_handler(request, StorageUnavailable())


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the domain and storage error handlers to the application."""
    app.add_exception_handler(SettingsSyncError, _settings_sync_error_handler)
    app.add_exception_handler(RedisError, _redis_error_handler)


__all__ = [
    "BadRequest",
    "InvalidCode",
    "NotFound",
    "PayloadTooLarge",
    "SettingsSyncError",
    "StorageUnavailable",
    "Unauthorized",
    "UnsupportedMediaType",
    "UpstreamUnavailable",
    "register_exception_handlers",
]
