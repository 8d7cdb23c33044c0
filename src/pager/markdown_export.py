"""Convert the final content HTML to Markdown for ``index.md``."""

from __future__ import annotations

import re
from typing import Callable

import yaml

try:
    from bs4 import BeautifulSoup
    from bs4.element import Comment, NavigableString, PageElement, Tag
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML parsing (pip install beautifulsoup4)."
    ) from exc

from pager.html_utils import HEADING_TAGS
from pager.schemas import SiteConfig

_DROPPED_TAGS = ["script", "style", "noscript", "template", "link", "meta", "svg"]
_TRANSPARENT_TAGS = frozenset(
    {"section", "article", "main", "div", "span", "header", "footer", "aside", "nav", "body", "html"}
)
_HIGHLIGHT_CLASS = "highlight"
_WHITESPACE_RE = re.compile(r"\s+")
_INLINE_SPACE_RE = re.compile(r"[ \t]+")
_LINE_BREAK_RE = re.compile(r" *\n *")


def render_markdown_document(config: SiteConfig, content_html: str) -> str:
    """Front matter with title, description and domain, then the Markdown body."""
    front_matter = yaml.safe_dump(
        {
            "title": config.title,
            "description": config.description,
            "domain": config.domain,
        },
        sort_keys=False,
        allow_unicode=True,
    )
    return f"---\n{front_matter}---\n\n{convert_html_to_markdown(content_html)}\n"


def convert_html_to_markdown(html: str) -> str:
    """Convert an HTML fragment into Markdown.

    Parameters
    ----------
    html : str
        Content HTML after augmentation. Scripts, styles and comments are
        dropped; unknown elements contribute their children.
    """
    soup = BeautifulSoup(html, "lxml")
    for tag in soup.find_all(_DROPPED_TAGS):
        tag.decompose()
    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()
    return "\n\n".join(_blocks(soup)).strip()


def _blocks(container: Tag) -> list[str]:
    blocks: list[str] = []
    for child in container.children:
        if isinstance(child, Tag):
            blocks.extend(_block(child))
        elif isinstance(child, NavigableString):
            text = _squash(str(child))
            if text:
                blocks.append(text)
    return [block for block in blocks if block]


def _block(tag: Tag) -> list[str]:
    if _is_highlight(tag):
        return [_code_block(tag)]
    if tag.name in _TRANSPARENT_TAGS:
        return _blocks(tag)
    if tag.name in HEADING_TAGS:
        title = _squash(_inline_children(tag))
        return [f"{'#' * int(tag.name[1])} {title}"] if title else []
    handler = _BLOCK_HANDLERS.get(tag.name)
    if handler is not None:
        rendered = handler(tag)
        return [rendered] if rendered else []
    if tag.name in _INLINE_HANDLERS:
        text = _tidy(_inline(tag))
        return [text] if text else []
    return _blocks(tag)


def _paragraph(tag: Tag) -> str:
    return _tidy(_inline_children(tag))


def _list(tag: Tag, depth: int = 0) -> str:
    lines: list[str] = []
    start = _int_attr(tag, "start", 1)
    for offset, item in enumerate(tag.find_all("li", recursive=False)):
        marker = f"{start + offset}." if tag.name == "ol" else "-"
        text_parts: list[str] = []
        sublists: list[Tag] = []
        for child in item.children:
            if isinstance(child, Tag) and child.name in ("ul", "ol"):
                sublists.append(child)
            else:
                text_parts.append(_inline(child))
        text = _tidy("".join(text_parts)).replace("\n", " ")
        lines.append(f"{'  ' * depth}{marker} {text}".rstrip())
        lines.extend(_list(sublist, depth + 1) for sublist in sublists)
    return "\n".join(line for line in lines if line)


def _code_block(tag: Tag) -> str:
    code = tag.find("code")
    language = ""
    for candidate in (code, tag):
        if candidate is None:
            continue
        for cls in _classes(candidate):
            if cls.startswith("language-"):
                language = cls.removeprefix("language-")
                break
        if language:
            break
    body = tag.get_text().rstrip("\n")
    fence = "````" if "```" in body else "```"
    return f"{fence}{language}\n{body}\n{fence}"


def _blockquote(tag: Tag) -> str:
    inner = "\n\n".join(_blocks(tag))
    return "\n".join(f"> {line}" if line else ">" for line in inner.splitlines())


def _table(tag: Tag) -> str:
    rows: list[list[str]] = []
    for row in tag.find_all("tr"):
        cells = row.find_all(["th", "td"], recursive=False)
        if cells:
            rows.append([_table_cell(cell) for cell in cells])
    if not rows:
        return ""

    width = max(len(row) for row in rows)
    header, *body = [row + [""] * (width - len(row)) for row in rows]
    lines = [_table_row(header), _table_row(["---"] * width)]
    lines.extend(_table_row(row) for row in body)
    return "\n".join(lines)


def _table_cell(cell: Tag) -> str:
    return _tidy(_inline_children(cell)).replace("\n", "<br>").replace("|", "\\|")


def _table_row(cells: list[str]) -> str:
    return "| " + " | ".join(cells) + " |"


def _figure(tag: Tag) -> str:
    parts: list[str] = []
    image = tag.find("img")
    if image is not None:
        parts.append(_image(image))
    caption = tag.find("figcaption")
    if caption is not None:
        text = _squash(_inline_children(caption))
        if text:
            parts.append(f"*{text}*")
    return "\n\n".join(part for part in parts if part)


def _definition_list(tag: Tag) -> str:
    lines: list[str] = []
    for child in tag.find_all(["dt", "dd"], recursive=False):
        text = _tidy(_inline_children(child)).replace("\n", " ")
        lines.append(f"**{text}**" if child.name == "dt" else f": {text}")
    return "\n".join(lines)


_BLOCK_HANDLERS: dict[str, Callable[[Tag], str]] = {
    "p": _paragraph,
    "ul": _list,
    "ol": _list,
    "pre": _code_block,
    "blockquote": _blockquote,
    "table": _table,
    "figure": _figure,
    "dl": _definition_list,
    "hr": lambda tag: "---",
    "br": lambda tag: "",
}


def _inline(node: PageElement) -> str:
    if isinstance(node, Comment):
        return ""
    if isinstance(node, NavigableString):
        return str(node)
    if not isinstance(node, Tag):
        return ""
    handler = _INLINE_HANDLERS.get(node.name)
    if handler is not None:
        return handler(node)
    return _inline_children(node)


def _inline_children(tag: Tag) -> str:
    return "".join(_inline(child) for child in tag.children)


def _link(tag: Tag) -> str:
    text = _inline_children(tag).strip()
    href = tag.get("href", "")
    if not href:
        return text
    return f"[{text or href}]({href})"


def _image(tag: Tag) -> str:
    src = tag.get("src", "")
    return f"![{tag.get('alt', '')}]({src})" if src else ""


def _wrap(marker: str) -> Callable[[Tag], str]:
    def render(tag: Tag) -> str:
        text = _inline_children(tag)
        return f"{marker}{text}{marker}" if text.strip() else text

    return render


_INLINE_HANDLERS: dict[str, Callable[[Tag], str]] = {
    "a": _link,
    "img": _image,
    "em": _wrap("*"),
    "i": _wrap("*"),
    "strong": _wrap("**"),
    "b": _wrap("**"),
    "del": _wrap("~~"),
    "s": _wrap("~~"),
    "code": lambda tag: f"`{tag.get_text()}`",
    "br": lambda tag: "\n",
}


def _is_highlight(tag: Tag) -> bool:
    return tag.name == "div" and _HIGHLIGHT_CLASS in _classes(tag)


def _classes(tag: Tag) -> list[str]:
    value = tag.get("class", [])
    return value.split() if isinstance(value, str) else list(value)


def _int_attr(tag: Tag, name: str, default: int) -> int:
    try:
        return int(tag.get(name, default))
    except (TypeError, ValueError):
        return default


def _tidy(text: str) -> str:
    text = _INLINE_SPACE_RE.sub(" ", text)
    return _LINE_BREAK_RE.sub("\n", text).strip()


def _squash(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()
