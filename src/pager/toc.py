"""Table of contents construction."""

from __future__ import annotations

from html import escape
from typing import Sequence

from pager.schemas import Heading

_INDENT = "  "


def build_toc(headings: Sequence[Heading]) -> str:
    """Render headings as a nested ``<ul>`` mirroring their levels.

    Levels are shifted so the shallowest heading sits at depth 1. A jump of
    more than one level opens one nested list per level; every nested list
    sits inside an ``<li>``, so intermediate levels get an unlabelled item.
    Returns an empty string when there are no headings.
    """
    if not headings:
        return ""

    offset = min(heading.level for heading in headings) - 1
    levels = [heading.level - offset for heading in headings]

    lines: list[str] = ["<ul>"]
    depth = 1
    item_open = False

    for index, heading in enumerate(headings):
        level = levels[index]

        while depth < level:
            if not item_open:
                lines.append(_INDENT * depth + "<li>")
            lines.append(_INDENT * depth + "<ul>")
            depth += 1
            item_open = False

        if depth > level:
            while depth > level:
                depth -= 1
                lines.append(_INDENT * depth + "</ul>")
                lines.append(_INDENT * depth + "</li>")
            item_open = False

        link = (
            f'<li><a href="#{escape(heading.id)}">'
            f"{escape(heading.text, quote=False)}</a>"
        )
        has_children = index + 1 < len(levels) and levels[index + 1] > level
        lines.append(_INDENT * depth + (link if has_children else link + "</li>"))
        item_open = has_children

    while depth > 1:
        depth -= 1
        lines.append(_INDENT * depth + "</ul>")
        lines.append(_INDENT * depth + "</li>")
    lines.append("</ul>")
    return "\n".join(lines)
