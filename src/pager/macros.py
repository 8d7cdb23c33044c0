"""Expand ``<convert>`` and ``<syntax>`` tags into literal HTML."""

from __future__ import annotations

import csv
import io
import logging
import re
from html import escape
from pathlib import Path

import markdown
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, guess_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)

_CONVERT_RE = re.compile(r'<convert\s+src="([^"]*)"\s*/?>(?:</convert>)?')
_SYNTAX_RE = re.compile(r'<syntax\s+src="([^"]*)"\s*/?>(?:</syntax>)?')
_MARKDOWN_EXTENSIONS = ["extra", "fenced_code", "tables"]
_HIGHLIGHT_CLASS = "highlight"


def expand_macros(content: str, base_dir: Path) -> str:
    """Replace include tags with converted file contents.

    Failures never abort: the tag expands to an empty string and a warning
    is logged.
    """
    content = _CONVERT_RE.sub(lambda match: convert_file(match.group(1), base_dir), content)
    return _SYNTAX_RE.sub(lambda match: syntax_file(match.group(1), base_dir), content)


def convert_file(src: str, base_dir: Path) -> str:
    """Convert a ``.md`` or ``.csv`` file to HTML."""
    text = _read_source("convert", src, base_dir)
    if text is None:
        return ""

    extension = Path(src).suffix.lower()
    if extension == ".md":
        return markdown.markdown(text, extensions=_MARKDOWN_EXTENSIONS)
    if extension == ".csv":
        return csv_to_table(text, src)
    logger.warning('<convert src="%s"> unsupported extension "%s" (use .md or .csv)', src, extension)
    return ""


def syntax_file(src: str, base_dir: Path) -> str:
    """Render a source file as a highlighted code block."""
    text = _read_source("syntax", src, base_dir)
    if text is None:
        return ""
    return highlight_code(text, src)


def csv_to_table(text: str, src: str) -> str:
    """Render CSV text as a table whose first row is the header."""
    try:
        records = [row for row in csv.reader(io.StringIO(text)) if row]
    except csv.Error as exc:
        logger.warning('<convert src="%s"> failed to parse CSV: %s', src, exc)
        return ""
    if not records:
        return ""

    header, *rows = records
    lines = ["<table>", "<thead>"]
    lines.append("<tr>" + "".join(f"<th>{escape(cell)}</th>" for cell in header) + "</tr>")
    lines.extend(["</thead>", "<tbody>"])
    for row in rows:
        lines.append("<tr>" + "".join(f"<td>{escape(cell)}</td>" for cell in row) + "</tr>")
    lines.extend(["</tbody>", "</table>"])
    return "\n".join(lines)


def highlight_code(code: str, filename: str) -> str:
    """Highlight ``code`` with a lexer picked from ``filename`` and its contents."""
    try:
        lexer = guess_lexer_for_filename(filename, code)
    except ClassNotFound:
        lexer = TextLexer()
    return highlight(code, lexer, HtmlFormatter(cssclass=_HIGHLIGHT_CLASS))


def syntax_theme_css(theme: str) -> str:
    """Return CSS rules for a Pygments style, or an empty string if unknown."""
    try:
        get_style_by_name(theme)
    except ClassNotFound:
        return ""
    return HtmlFormatter(style=theme).get_style_defs(f".{_HIGHLIGHT_CLASS}")


def _read_source(tag_name: str, src: str, base_dir: Path) -> str | None:
    if not src:
        logger.warning("<%s> has empty src attribute", tag_name)
        return None
    try:
        return (base_dir / src).read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.warning('<%s src="%s"> references missing file', tag_name, src)
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning('<%s src="%s"> could not be read: %s', tag_name, src, exc)
    return None
