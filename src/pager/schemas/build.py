"""Build output model."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class BuildResult(BaseModel):
    """Files written by a successful build."""

    output_path: Path
    markdown_path: Path | None = None
    stylesheets: list[str] = Field(default_factory=list)
