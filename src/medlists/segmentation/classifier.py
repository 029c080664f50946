"""Single-line classification for the record segmenter.

``classify_line`` is pure: it looks at one line only.  Whether a tag
matters (e.g. a name-only line while a record is already open) is decided
by the segmenter's current state.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from medlists.segmentation.patterns import (
    DATE_LINE_MAX_LENGTH,
    DATE_PATTERNS,
    HEADER_FOOTER_PATTERN,
    INVALID_NAME_PATTERNS,
    LOCATION_PATTERN,
    MAX_LINE_LENGTH,
    MIN_LINE_LENGTH,
    MIN_NAME_LENGTH,
    PAGE_MARKER_PATTERN,
    RECORD_NAME_ONLY_PATTERN,
    RECORD_WITH_VALUE_PATTERN,
    VALUE_PATTERN,
)


class LineTag(str, Enum):
    """Line categories, listed in classification priority order."""

    DATE = "date"
    LOCATION = "location"
    PAGE_MARKER = "page_marker"
    HEADER_FOOTER = "header_footer"
    TOO_SHORT_OR_LONG = "too_short_or_long"
    RECORD_WITH_VALUE = "record_with_value"
    RECORD_NAME_ONLY = "record_name_only"
    CONTINUATION = "continuation"


def is_date_line(line: str) -> bool:
    trimmed = line.strip()
    return len(trimmed) < DATE_LINE_MAX_LENGTH and starts_with_date(trimmed)


def starts_with_date(line: str) -> bool:
    return any(p.match(line) for p in DATE_PATTERNS)


def match_date(line: str) -> Optional[str]:
    """Return the leading date text of ``line``, if any."""
    for pattern in DATE_PATTERNS:
        m = pattern.match(line.strip())
        if m:
            return m.group(0)
    return None


def match_record_with_value(line: str) -> Optional[tuple[str, str]]:
    """Split ``"Aspirin 81 mg"`` into ``("Aspirin", "81 mg")``."""
    m = RECORD_WITH_VALUE_PATTERN.match(line.strip())
    if not m:
        return None
    return m.group(1).strip(), m.group(2).strip()


def match_record_name(line: str) -> Optional[str]:
    m = RECORD_NAME_ONLY_PATTERN.match(line.strip())
    return m.group(1).strip() if m else None


def match_value(line: str) -> Optional[str]:
    m = VALUE_PATTERN.search(line)
    return m.group(1).strip() if m else None


def is_valid_record_name(name: str) -> bool:
    """Reject page/continuation artifacts, bare numbers and bare initials."""
    name = name.strip()
    if len(name) < MIN_NAME_LENGTH or name.isdigit():
        return False
    return not any(p.search(name) for p in INVALID_NAME_PATTERNS)


def classify_line(line: str) -> LineTag:
    trimmed = line.strip()

    if is_date_line(trimmed):
        return LineTag.DATE
    if LOCATION_PATTERN.search(trimmed):
        return LineTag.LOCATION
    if PAGE_MARKER_PATTERN.search(trimmed):
        return LineTag.PAGE_MARKER
    if HEADER_FOOTER_PATTERN.search(trimmed):
        return LineTag.HEADER_FOOTER
    if len(trimmed) < MIN_LINE_LENGTH or len(trimmed) > MAX_LINE_LENGTH:
        return LineTag.TOO_SHORT_OR_LONG
    if RECORD_WITH_VALUE_PATTERN.match(trimmed):
        return LineTag.RECORD_WITH_VALUE
    if RECORD_NAME_ONLY_PATTERN.match(trimmed):
        return LineTag.RECORD_NAME_ONLY
    return LineTag.CONTINUATION
