"""Header/footer removal by known patterns and line frequency."""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterable, Pattern, Sequence

from medlists.segmentation.patterns import BOILERPLATE_PATTERNS

DEFAULT_LETTERHEADS: tuple[str, ...] = (r"^Apple\s+Health",)
DEFAULT_REPEAT_THRESHOLD = 5

_WHITESPACE = re.compile(r"\s+")


def normalize_line(line: str) -> str:
    """Trim, lower-case and collapse whitespace so repeats compare equal."""
    return _WHITESPACE.sub(" ", line.strip().lower())


def compile_letterheads(patterns: Iterable[str]) -> list[Pattern[str]]:
    return [re.compile(p, re.IGNORECASE) for p in patterns]


def line_frequencies(lines: Iterable[str]) -> Counter[str]:
    return Counter(normalize_line(line) for line in lines if line.strip())


def is_known_boilerplate(line: str, letterheads: Sequence[Pattern[str]] = ()) -> bool:
    trimmed = line.strip()
    return any(p.search(trimmed) for p in BOILERPLATE_PATTERNS) or any(
        p.search(trimmed) for p in letterheads
    )


def filter_boilerplate(
    text: str,
    *,
    repeat_threshold: int = DEFAULT_REPEAT_THRESHOLD,
    letterhead_patterns: Iterable[str] = DEFAULT_LETTERHEADS,
) -> str:
    """Drop header/footer lines from one section of text.

    A line is dropped when it matches a known boilerplate pattern or when
    its normalized form occurs more than ``repeat_threshold`` times in the
    section.  Blank lines are always kept and line order is preserved, so
    running the filter on its own output removes nothing further.
    """
    lines = text.split("\n")
    frequencies = line_frequencies(lines)
    letterheads = compile_letterheads(letterhead_patterns)

    kept: list[str] = []
    for line in lines:
        if not line.strip():
            kept.append(line)
            continue
        if is_known_boilerplate(line, letterheads):
            continue
        if frequencies[normalize_line(line)] > repeat_threshold:
            continue
        kept.append(line)
    return "\n".join(kept)
