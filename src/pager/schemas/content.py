"""Content outline models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Heading(BaseModel):
    """A heading collected while walking the content fragment."""

    model_config = ConfigDict(frozen=True)

    level: int = Field(..., ge=1, le=6)
    id: str
    text: str
