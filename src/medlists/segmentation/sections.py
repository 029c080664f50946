"""Locate topical sections (e.g. ``### Medication Records``) in document text."""

from __future__ import annotations

import logging
import re
from typing import Sequence

from medlists.models import SectionSpan
from medlists.segmentation.patterns import TOP_LEVEL_HEADING

log = logging.getLogger(__name__)

# Two heading variants can match the same physical line.
_DUPLICATE_DISTANCE = 10


def heading_pattern(label: str) -> re.Pattern[str]:
    return re.compile(rf"^#{{1,3}}[ \t]*(?:{label})s?[ \t]*$", re.IGNORECASE | re.MULTILINE)


def _heading_matches(text: str, labels: Sequence[str]) -> list[re.Match[str]]:
    accepted: list[re.Match[str]] = []
    for label in labels:
        for match in heading_pattern(label).finditer(text):
            if any(abs(m.start() - match.start()) < _DUPLICATE_DISTANCE for m in accepted):
                continue
            accepted.append(match)
    accepted.sort(key=lambda m: m.start())
    return accepted


def locate_sections(text: str, labels: Sequence[str]) -> list[SectionSpan]:
    """Return the span of every section headed by one of ``labels``.

    Spans are in document order and do not overlap.  Each span starts right
    after its heading line and ends at the next matching heading; the last
    span ends at the next ``#``/``##`` heading or at the end of the text.
    """
    matches = _heading_matches(text, labels)
    spans: list[SectionSpan] = []

    for i, match in enumerate(matches):
        start = match.end()
        if start < len(text) and text[start] == "\n":
            start += 1

        if i + 1 < len(matches):
            end = matches[i + 1].start()
        else:
            boundary = TOP_LEVEL_HEADING.search(text, start)
            end = boundary.start() if boundary else len(text)

        spans.append(SectionSpan(start=start, end=max(start, end)))

    log.debug("Located %d section(s) for %s", len(spans), "|".join(labels))
    return spans
