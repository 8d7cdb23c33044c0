"""Tests for element id derivation."""

from __future__ import annotations

import re

import pytest

from pager.ids import IdentifierRegistry, slugify

_SLUG_RE = re.compile(r"^(?:[^\W_]+(?:-[^\W_]+)*)?$")


class TestSlugify:
    """Tests for slugify."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Introduction", "introduction"),
            ("Getting Started", "getting-started"),
            ("  Spaces   everywhere  ", "spaces-everywhere"),
            ("snake_case_name", "snake-case-name"),
            ("What's new?", "whats-new"),
            ("1.2 Release notes", "12-release-notes"),
            ("--leading and trailing--", "leading-and-trailing"),
            ("Émigré café", "émigré-café"),
            ("C++ & Rust", "c-rust"),
            ("!!!", ""),
            ("", ""),
        ],
    )
    def test_examples(self, text: str, expected: str) -> None:
        """Known headings map to the expected ids."""
        assert slugify(text) == expected

    @pytest.mark.parametrize(
        "text",
        ["A -- B", "__init__", "tab\tand\nnewline", "x - - y", "Ünïcödé ☃ snow", "2024-01-01"],
    )
    def test_result_has_no_edge_or_repeated_hyphens(self, text: str) -> None:
        """Slugs never start or end with a hyphen and never contain two in a row."""
        slug = slugify(text)
        assert not slug.startswith("-")
        assert not slug.endswith("-")
        assert "--" not in slug
        assert slug == slug.lower()
        assert _SLUG_RE.match(slug)

    def test_is_idempotent(self) -> None:
        """Slugifying a slug leaves it unchanged."""
        slug = slugify("Some Heading: Part 2")
        assert slugify(slug) == slug


class TestIdentifierRegistry:
    """Tests for IdentifierRegistry."""

    def test_repeated_candidates_get_numeric_suffixes(self) -> None:
        """The same candidate three times yields intro, intro-1, intro-2."""
        registry = IdentifierRegistry()
        assigned = [registry.reserve("intro") for _ in range(3)]
        assert assigned == ["intro", "intro-1", "intro-2"]

    def test_suffix_skips_identifiers_already_taken(self) -> None:
        """A literal ``intro-1`` reserved earlier pushes the next duplicate to ``intro-2``."""
        registry = IdentifierRegistry()
        registry.reserve("intro")
        registry.reserve("intro-1")
        assert registry.reserve("intro") == "intro-2"

    def test_membership_and_length(self) -> None:
        """Reserved ids are visible through ``in`` and ``len``."""
        registry = IdentifierRegistry()
        registry.reserve("a")
        registry.reserve("a")
        assert "a" in registry
        assert "a-1" in registry
        assert "b" not in registry
        assert len(registry) == 2
        assert list(registry) == ["a", "a-1"]
