"""Test setup for pager."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for pytest.

    This allows running integration tests selectively:
        pytest -m integration       # run only integration tests
        pytest -m "not integration" # skip integration tests
    """
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (real file watching and sockets)",
    )


SITE_CONFIG = """\
title: Test Page
description: A page used by the test suite.
domain: example.com
favicon: favicon.svg
css:
  - style.css
"""

SITE_CONTENT = """\
<nav><toc/></nav>
<h2>Introduction</h2>
<p>See <a href="#usage">usage</a> and <a href="https://example.org">the docs</a>.</p>
<h2>Usage</h2>
<p>Run it.</p>
"""


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """A complete content directory that builds without warnings."""
    (tmp_path / "pager.yaml").write_text(SITE_CONFIG, encoding="utf-8")
    (tmp_path / "content.html").write_text(SITE_CONTENT, encoding="utf-8")
    (tmp_path / "style.css").write_text("body { margin: 0; }\n", encoding="utf-8")
    (tmp_path / "favicon.svg").write_text("<svg xmlns='http://www.w3.org/2000/svg'/>", encoding="utf-8")
    return tmp_path


@pytest.fixture
def make_image(tmp_path: Path):
    """Factory writing a PNG of the given size into ``tmp_path``."""
    from PIL import Image

    def _make(name: str, width: int, height: int) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", (width, height), color=(200, 80, 40)).save(path, format="PNG")
        return path

    return _make
