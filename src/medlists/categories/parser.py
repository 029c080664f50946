"""Heuristic parsing of a free-text category listing."""

from __future__ import annotations

import re

from medlists.models import CategoryCount

_COUNTED = re.compile(r"^(.+?)[:\-]\s*(\d+)$")
_LEADING_MARKERS = re.compile(r"^(?:#{1,6}\s*|[*\-+]\s+|\d+[.)]\s+)+")
_BOLD = re.compile(r"\*\*(.+?)\*\*")


def clean_line(line: str) -> str:
    """Strip heading/list markers and bold markup from one reply line."""
    line = _LEADING_MARKERS.sub("", line.strip())
    return _BOLD.sub(r"\1", line).strip()


def parse_category_reply(text: str) -> list[CategoryCount]:
    """Parse ``Category Name: count`` lines; uncounted names get count 0.

    >>> parse_category_reply("Medications: 3\\n### Allergies")
    [CategoryCount(category='Medications', count=3), CategoryCount(category='Allergies', count=0)]
    """
    categories: list[CategoryCount] = []
    for raw in text.splitlines():
        line = clean_line(raw)
        if not line:
            continue
        m = _COUNTED.match(line)
        if m and m.group(1).strip():
            categories.append(CategoryCount(category=m.group(1).strip(), count=int(m.group(2))))
        else:
            categories.append(CategoryCount(category=line, count=0))
    return categories
