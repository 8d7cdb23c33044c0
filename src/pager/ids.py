"""Element identifier derivation and collision handling."""

from __future__ import annotations

import re
from typing import Iterator

_HYPHEN_RUN_RE = re.compile(r"-{2,}")


def slugify(text: str) -> str:
    """Derive an element id from heading text.

    Letters and digits are kept (lower-cased), whitespace, hyphens and
    underscores become hyphens, everything else is dropped. Repeated hyphens
    collapse and leading/trailing hyphens are trimmed.
    """
    chars: list[str] = []
    for char in text.lower():
        if char.isalpha() or char.isdecimal():
            chars.append(char)
        elif char.isspace() or char in "-_":
            chars.append("-")
    return _HYPHEN_RUN_RE.sub("-", "".join(chars)).strip("-")


class IdentifierRegistry:
    """Ids assigned during one pass over a document."""

    def __init__(self) -> None:
        self._used: set[str] = set()

    def reserve(self, candidate: str) -> str:
        """Reserve ``candidate``, or the first free ``candidate-N`` if it is taken."""
        if candidate not in self._used:
            self._used.add(candidate)
            return candidate
        suffix = 1
        while f"{candidate}-{suffix}" in self._used:
            suffix += 1
        assigned = f"{candidate}-{suffix}"
        self._used.add(assigned)
        return assigned

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._used

    def __len__(self) -> int:
        return len(self._used)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._used))
