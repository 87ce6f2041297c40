"""
Resolve inbound ``Authorization`` headers to a Discord identity.

The header carries ``base64("<identity>:<secret>")``. Every settings operation
receives the resulting ``AuthenticatedUser`` explicitly.
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass

from settings_sync.core.errors import Unauthorized
from settings_sync.core.security import secure_compare
from settings_sync.services.identity_store import IdentityStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AuthenticatedUser:
    """Identity resolved for the current request."""

    identity: str


def parse_credentials(header: str | None) -> tuple[str, str]:
    """Split an authorization header into ``(identity, secret)``."""
    if not header:
        raise Unauthorized(Unauthorized.MISSING)

    try:
        decoded = base64.b64decode(header.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise Unauthorized(Unauthorized.MALFORMED) from exc

    identity, sep, secret = decoded.partition(":")
    if not sep or not identity or not secret:
        raise Unauthorized(Unauthorized.MALFORMED)
    return identity, secret


class AuthenticationGate:
    """Check credentials against the identity store."""

    def __init__(self, identity_store: IdentityStore) -> None:
        self._identities = identity_store

    async def authenticate(self, header: str | None) -> AuthenticatedUser:
        try:
            identity, supplied = parse_credentials(header)
        except Unauthorized as exc:
            logger.info("Rejected credentials: %s", exc.reason)
            raise

        stored = await self._identities.get_secret(identity)
        if stored is None or not secure_compare(stored, supplied):
            logger.info("Rejected credentials: %s", Unauthorized.INVALID)
            raise Unauthorized(Unauthorized.INVALID)

        return AuthenticatedUser(identity=identity)


__all__ = ["AuthenticatedUser", "AuthenticationGate", "parse_credentials"]
