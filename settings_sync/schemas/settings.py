"""Schemas for settings sync responses."""

from __future__ import annotations

from pydantic import BaseModel, Field


class WrittenResponse(BaseModel):
    written: int = Field(
        ...,
        description="Write timestamp in ms since the epoch; also served as the ETag.",
    )


__all__ = ["WrittenResponse"]
