"""Tests for the content pipeline."""

from __future__ import annotations

import logging
from pathlib import Path

from bs4 import BeautifulSoup, ParserRejectedMarkup

from pager.pipeline import TOC_PLACEHOLDER, process_content


class TestProcessContent:
    """Tests for process_content."""

    def test_toc_tag_is_replaced_with_heading_list(self, tmp_path: Path) -> None:
        """<toc/> becomes a list linking every heading, including later ones."""
        html = process_content("<toc/><h2>One</h2><h3>Two</h3><h2>Three</h2>", tmp_path)
        soup = BeautifulSoup(html, "html.parser")
        assert [a["href"] for a in soup.ul.find_all("a")] == ["#one", "#two", "#three"]
        assert TOC_PLACEHOLDER not in html
        assert "<toc" not in html

    def test_toc_tag_with_closing_tag(self, tmp_path: Path) -> None:
        """The <toc></toc> spelling is accepted too."""
        html = process_content("<toc></toc><h2>Only</h2>", tmp_path)
        assert '<a href="#only">Only</a>' in html

    def test_toc_without_headings_is_empty(self, tmp_path: Path) -> None:
        """With no headings the placeholder disappears."""
        assert process_content("<p>x</p><toc/>", tmp_path) == "<p>x</p>"

    def test_content_without_toc_has_no_placeholder(self, tmp_path: Path) -> None:
        """Headings still get ids when there is no <toc/>."""
        html = process_content("<h2>Alpha</h2>", tmp_path)
        assert html == '<h2 id="alpha">Alpha</h2>'

    def test_missing_anchor_warns_and_output_is_unaltered(self, tmp_path: Path, caplog) -> None:
        """A dangling in-page link yields one warning and no markup change."""
        source = '<p><a href="#missing">x</a></p>'
        with caplog.at_level(logging.WARNING, logger="pager"):
            html = process_content(source, tmp_path)
        assert html == source
        assert [r.getMessage() for r in caplog.records] == [
            '<a href="#missing"> references missing id'
        ]

    def test_links_may_point_forward(self, tmp_path: Path, caplog) -> None:
        """Anchors resolve against ids assigned anywhere in the document."""
        with caplog.at_level(logging.WARNING, logger="pager"):
            process_content('<a href="#later">go</a><h2>Later</h2>', tmp_path)
        assert caplog.records == []

    def test_each_call_starts_with_fresh_ids(self, tmp_path: Path) -> None:
        """Processing the same content twice assigns the same ids."""
        source = "<h2>Intro</h2><h2>Intro</h2>"
        first = process_content(source, tmp_path)
        second = process_content(source, tmp_path)
        assert first == second
        assert 'id="intro-1"' in second
        assert 'id="intro-2"' not in second

    def test_converted_markdown_feeds_the_toc(self, tmp_path: Path) -> None:
        """Headings from included Markdown get ids and TOC entries."""
        (tmp_path / "notes.md").write_text("## From Markdown\n\nBody text.\n", encoding="utf-8")
        html = process_content('<toc/><convert src="notes.md"/>', tmp_path)
        assert '<h2 id="from-markdown">From Markdown</h2>' in html
        assert '<a href="#from-markdown">From Markdown</a>' in html

    def test_text_and_entities_survive(self, tmp_path: Path) -> None:
        """Plain content passes through the parse and serialize round trip."""
        source = "<p>Fish &amp; chips <!-- note --> are <em>good</em>.</p>"
        assert process_content(source, tmp_path) == source

    def test_unparseable_content_is_returned_after_expansion(
        self, tmp_path: Path, monkeypatch, caplog
    ) -> None:
        """When the parser rejects the fragment, the expanded text comes back with a warning."""
        (tmp_path / "notes.md").write_text("Hello\n", encoding="utf-8")

        def reject(html: str):
            raise ParserRejectedMarkup("cannot parse")

        monkeypatch.setattr("pager.pipeline.parse_fragment", reject)
        with caplog.at_level(logging.WARNING, logger="pager"):
            html = process_content('<h2>A</h2><convert src="notes.md"/><toc/>', tmp_path)

        assert html == f"<h2>A</h2><p>Hello</p>{TOC_PLACEHOLDER}"
        assert "content could not be parsed" in caplog.text
