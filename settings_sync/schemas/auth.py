"""Schemas related to the OAuth flow."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SecretResponse(BaseModel):
    """Returned once the OAuth callback exchange completes."""

    secret: str = Field(..., description="Opaque sync secret bound to the Discord account.")


__all__ = ["SecretResponse"]
