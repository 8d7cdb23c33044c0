"""Site configuration model."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class SiteConfig(BaseModel):
    """Settings read from ``pager.yaml``.

    Attributes:
        title: Page title, also used for social cards.
        description: Meta description.
        favicon: Path or URL of the favicon.
        card: Path or URL of the social card image.
        domain: Site domain or base URL (``base_url`` is accepted as an alias).
        css: Stylesheet paths or URLs, in link order.
        inline_css: If True, local stylesheets are inlined into ``<style>`` blocks.
        inject: Raw HTML inserted into the page head.
        syntax_theme: Pygments style used for ``<syntax>`` blocks.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    title: str = ""
    description: str = ""
    favicon: str = ""
    card: str = ""
    domain: str = Field(default="", validation_alias=AliasChoices("domain", "base_url"))
    css: list[str] = Field(default_factory=list)
    inline_css: bool = False
    inject: str = ""
    syntax_theme: str = ""

    @model_validator(mode="before")
    @classmethod
    def drop_null_values(cls, data: Any) -> Any:
        """Treat YAML nulls (``title:`` with no value) as unset and accept a lone ``css`` string."""
        if isinstance(data, dict):
            data = {key: value for key, value in data.items() if value is not None}
            if isinstance(data.get("css"), str):
                data["css"] = [data["css"]]
        return data

    @property
    def unknown_fields(self) -> list[str]:
        """Keys present in the file that are not recognised settings."""
        return sorted(self.model_extra or {})

    @property
    def site_url(self) -> str:
        """The domain as an absolute URL, ``https://`` assumed."""
        if not self.domain:
            return ""
        if self.domain.startswith(("http://", "https://")):
            return self.domain
        return f"https://{self.domain}"
