"""Tests for stylesheet planning."""

from __future__ import annotations

import hashlib
from pathlib import Path

from pager.assets import hash_file, plan_stylesheets
from pager.schemas import SiteConfig

CSS = b"body { color: black; }\n"
CSS_HASH = hashlib.sha256(CSS).hexdigest()[:8]


class TestHashFile:
    """Tests for hash_file."""

    def test_matches_sha256_prefix(self, tmp_path: Path) -> None:
        """The hash is the first eight hex digits of the SHA-256."""
        path = tmp_path / "style.css"
        path.write_bytes(CSS)
        assert hash_file(path) == CSS_HASH


class TestPlanStylesheets:
    """Tests for plan_stylesheets."""

    def test_development_links_are_versioned(self, tmp_path: Path) -> None:
        """Local stylesheets get a ?v= query; remote ones are untouched."""
        (tmp_path / "style.css").write_bytes(CSS)
        config = SiteConfig(css=["https://cdn.example.com/base.css", "style.css"])
        plan = plan_stylesheets(config, tmp_path)
        assert plan.links == ["https://cdn.example.com/base.css", f"style.css?v={CSS_HASH}"]
        assert plan.inline == []

    def test_missing_local_stylesheet_is_linked_as_is(self, tmp_path: Path) -> None:
        """A stylesheet that cannot be hashed keeps its plain reference."""
        plan = plan_stylesheets(SiteConfig(css=["gone.css"]), tmp_path)
        assert plan.links == ["gone.css"]

    def test_production_writes_hashed_copy(self, tmp_path: Path) -> None:
        """Production builds link a content-hashed copy next to the original."""
        (tmp_path / "css").mkdir()
        (tmp_path / "css" / "site.css").write_bytes(CSS)
        plan = plan_stylesheets(SiteConfig(css=["css/site.css"]), tmp_path, production=True)
        assert plan.links == [f"css/site.{CSS_HASH}.css"]
        assert (tmp_path / "css" / f"site.{CSS_HASH}.css").read_bytes() == CSS

    def test_inline_css(self, tmp_path: Path) -> None:
        """inline_css embeds local stylesheets and keeps remote ones as links."""
        (tmp_path / "style.css").write_bytes(CSS)
        config = SiteConfig(css=["style.css", "https://cdn.example.com/x.css"], inline_css=True)
        plan = plan_stylesheets(config, tmp_path)
        assert plan.inline == [CSS.decode()]
        assert plan.links == ["https://cdn.example.com/x.css"]
