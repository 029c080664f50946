"""Regex patterns for clinical-record segmentation.

The patterns are tuned for the tabular record layout produced by patient
portal exports (date line, facility line, entry line) and deliberately trade
recall for precision.
"""

from __future__ import annotations

import re
from typing import Pattern

# ── Section headings ─────────────────────────────────────────────────
# Label fragments are substituted into ``^#{1,3}\s*<label>\s*$``.

MEDICATION_HEADINGS: tuple[str, ...] = (r"Medication\s+Records?", r"Medications")
CLINICAL_NOTES_HEADINGS: tuple[str, ...] = (r"Clinical\s+Notes",)

# A following ``#`` or ``##`` heading closes the last section; ``###`` does not.
TOP_LEVEL_HEADING = re.compile(r"\n#{1,2}\s")

# ── Boilerplate ──────────────────────────────────────────────────────

BOILERPLATE_PATTERNS: list[Pattern[str]] = [
    re.compile(r"^Page\s+\d+", re.IGNORECASE),
    re.compile(r"^\d+\s*$"),
    re.compile(r"^\d{4}-\d{2}-\d{2}(?:[T\s]\d{1,2}:\d{2}(?::\d{2})?(?:\s*[AP]M)?)?\s*$", re.IGNORECASE),
    re.compile(r"^Generated\s+on", re.IGNORECASE),
    re.compile(r"^Exported\s+on", re.IGNORECASE),
]

# ── Line classification ──────────────────────────────────────────────

DATE_PATTERNS: list[Pattern[str]] = [
    re.compile(r"^(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*\.?\s+\d{1,2},?\s+\d{4}", re.IGNORECASE),
    re.compile(r"^\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}"),
    re.compile(r"^\d{4}[/\-]\d{1,2}[/\-]\d{1,2}"),
]
DATE_LINE_MAX_LENGTH = 50

LOCATION_PATTERN = re.compile(
    r"mass\s+general|brigham|hospital|medical\s+center|clinic|health\s+center",
    re.IGNORECASE,
)

PAGE_MARKER_PATTERN = re.compile(
    r"(?:^|\s)(?:##\s*)?Page\s+\d+|Continued\s+(?:on|from)\s+Page\s+\d+|Page\s+\d+\s+of",
    re.IGNORECASE,
)

HEADER_FOOTER_PATTERN = re.compile(
    r"Health\s+Page|Date\s+of\s+Birth|Patient\s+(?:Name|ID)\b|Medical\s+Record\s+(?:Number|No\b)"
    r"|Chart\s+Number|\bMRN\b|Account\s+Number"
    r"|^(?:Account|Chart|Record\s+Date|Printed|Generated|Confidential)\b",
    re.IGNORECASE,
)

MIN_LINE_LENGTH = 3
MAX_LINE_LENGTH = 200

_UNIT = r"(?:mg|mcg|units?|ml|tablets?|IU|MEQ)"
VALUE_FRAGMENT = rf"\d+\.?\d*(?:\s*{_UNIT}\b)?(?:\s+[a-z]+)?"

RECORD_WITH_VALUE_PATTERN = re.compile(rf"^(.+?)\s+({VALUE_FRAGMENT})", re.IGNORECASE)
RECORD_NAME_ONLY_PATTERN = re.compile(r"^([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)")
VALUE_PATTERN = re.compile(rf"({VALUE_FRAGMENT})", re.IGNORECASE)

INVALID_NAME_PATTERNS: list[Pattern[str]] = [
    re.compile(r"^Page\s+\d+", re.IGNORECASE),
    re.compile(r"^##\s*Page", re.IGNORECASE),
    re.compile(r"Continued\s+(?:on|from)", re.IGNORECASE),
    re.compile(r"Date\s+of\s+Birth", re.IGNORECASE),
    re.compile(r"Health\s+Page", re.IGNORECASE),
    re.compile(r"^[A-Z][a-z]+\s+Page", re.IGNORECASE),
    re.compile(r"^\d+\s*$"),
    re.compile(r"^[A-Z]{1,3}\s*$", re.IGNORECASE),
]
MIN_NAME_LENGTH = 2

# ── Clinical notes ───────────────────────────────────────────────────

NOTE_CREATED_PATTERN = re.compile(r"^Created:\s+", re.IGNORECASE)
NOTE_FIELD_PATTERNS: dict[str, Pattern[str]] = {
    "note_type": re.compile(r"^Type:\s*(.+)$", re.IGNORECASE),
    "category": re.compile(r"^Category:\s*(.+)$", re.IGNORECASE),
    "author": re.compile(r"^Author:\s*(.+)$", re.IGNORECASE),
    "created": re.compile(r"^Created:\s*(.+)$", re.IGNORECASE),
}
CREATED_DATE_PATTERN = re.compile(r"^(.+?)(?:\s+at\s+|$)", re.IGNORECASE)
DATE_ONLY_MAX_LENGTH = 30
PAGE_NUMBER_LINE = re.compile(r"^(?:Page\s+\d+|\d+)$", re.IGNORECASE)

MARKDOWN_SYNTAX: list[tuple[Pattern[str], str]] = [
    (re.compile(r"^#{1,6}\s+", re.MULTILINE), ""),
    (re.compile(r"\*\*(.+?)\*\*"), r"\1"),
    (re.compile(r"\*(.+?)\*"), r"\1"),
    (re.compile(r"\[(.+?)\]\(.+?\)"), r"\1"),
    (re.compile(r"`(.+?)`"), r"\1"),
]
