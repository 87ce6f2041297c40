"""Authentication dependency guarding every settings route."""

from typing import Annotated, Optional

from fastapi import Depends, Header

from settings_sync.services import AuthenticatedUser, AuthenticationGate

from .clients import get_authentication_gate


async def get_current_user(
    gate: Annotated[AuthenticationGate, Depends(get_authentication_gate)],
    authorization: Annotated[Optional[str], Header()] = None,
) -> AuthenticatedUser:
    """Resolve the ``Authorization`` header or fail with 401."""
    return await gate.authenticate(authorization)


CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]

__all__ = ["CurrentUser", "get_current_user"]
