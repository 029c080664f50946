"""Clinical-note extraction.

Portal exports list notes under ``### Clinical Notes`` headings.  Every
``Created:`` line marks one note; the note itself begins a few lines
earlier at its date header (shared headers are fine, each ``Created:`` is
still a separate note).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from medlists.core.config import SegmentationConfig
from medlists.models import PageBlock, Record, SectionSpan
from medlists.segmentation.boilerplate import filter_boilerplate
from medlists.segmentation.classifier import match_date, starts_with_date
from medlists.segmentation.pages import anchor_for, locate_page
from medlists.segmentation.patterns import (
    CLINICAL_NOTES_HEADINGS,
    CREATED_DATE_PATTERN,
    DATE_ONLY_MAX_LENGTH,
    LOCATION_PATTERN,
    MARKDOWN_SYNTAX,
    NOTE_CREATED_PATTERN,
    NOTE_FIELD_PATTERNS,
    PAGE_NUMBER_LINE,
)
from medlists.segmentation.sections import locate_sections

log = logging.getLogger(__name__)

CLINICAL_NOTES_CATEGORY = "Clinical Notes"
DEFAULT_NOTE_NAME = "Clinical Note"


@dataclass
class NoteFields:
    note_type: str = ""
    category: str = ""
    author: str = ""
    created: str = ""
    date: str = ""
    location: str = ""


def find_note_starts(lines: Sequence[str], lookback: int = 20) -> list[int]:
    """Line index where each note begins, in ascending order."""
    starts: list[int] = []
    for i, raw in enumerate(lines):
        if not NOTE_CREATED_PATTERN.match(raw.strip()):
            continue
        start = i
        for j in range(i - 1, max(0, i - lookback) - 1, -1):
            previous = lines[j].strip()
            if not previous:
                continue
            if NOTE_CREATED_PATTERN.match(previous):
                break
            if starts_with_date(previous):
                start = j
                break
        starts.append(start)
    return sorted(starts)


def created_date(created: str) -> str:
    """``"Aug 16, 2022 at 5:00 PM"`` -> ``"Aug 16, 2022"``."""
    m = CREATED_DATE_PATTERN.match(created)
    return m.group(1).strip() if m else created


def strip_markdown(text: str) -> str:
    for pattern, replacement in MARKDOWN_SYNTAX:
        text = pattern.sub(replacement, text)
    return text.strip()


def _is_date_only(line: str) -> bool:
    return len(line) < DATE_ONLY_MAX_LENGTH and starts_with_date(line)


def clean_note(lines: Sequence[str]) -> tuple[str, NoteFields]:
    """Lift labelled fields out of a note and drop date-only and page-number lines."""
    fields = NoteFields()
    kept: list[str] = []

    for raw in lines:
        line = raw.strip()
        if not line:
            kept.append("")
            continue

        lifted = False
        for name, pattern in NOTE_FIELD_PATTERNS.items():
            m = pattern.match(line)
            if m:
                setattr(fields, name, m.group(1).strip())
                if name == "created":
                    fields.date = created_date(fields.created)
                lifted = True
                break
        if lifted:
            continue

        if not _is_date_only(line) and not PAGE_NUMBER_LINE.match(line):
            kept.append(raw)

        if not fields.date:
            fields.date = match_date(line) or ""
        location = LOCATION_PATTERN.search(line)
        if location:
            fields.location = location.group(0)

    return "\n".join(kept).strip(), fields


def extract_clinical_notes(
    full_markdown: str,
    blocks: Sequence[PageBlock],
    source_file: str = "",
    config: Optional[SegmentationConfig] = None,
) -> list[Record]:
    config = config or SegmentationConfig()
    spans = locate_sections(full_markdown, CLINICAL_NOTES_HEADINGS)
    if not spans:
        log.info("No clinical notes section found in %s", source_file or "document")
        return []

    notes: list[Record] = []
    for span in spans:
        notes.extend(
            _notes_in_section(full_markdown, span, spans, blocks, source_file, config, len(notes))
        )

    log.info("Extracted %d clinical note(s) from %d section(s)", len(notes), len(spans))
    return notes


def _notes_in_section(
    full_markdown: str,
    span: SectionSpan,
    spans: Sequence[SectionSpan],
    blocks: Sequence[PageBlock],
    source_file: str,
    config: SegmentationConfig,
    offset: int,
) -> list[Record]:
    filtered = filter_boilerplate(
        full_markdown[span.start:span.end],
        repeat_threshold=config.repeat_threshold,
        letterhead_patterns=config.letterhead_patterns,
    )
    lines = filtered.split("\n")
    starts = find_note_starts(lines, config.note_lookback_lines)

    notes: list[Record] = []
    for i, start in enumerate(starts):
        end = starts[i + 1] if i + 1 < len(starts) else len(lines)
        note_lines = lines[start:end]
        text, fields = clean_note(note_lines)
        if len(text) < config.min_note_length:
            continue

        index = offset + len(notes) + 1
        anchor = anchor_for("\n".join(note_lines), config.anchor_length)
        notes.append(
            Record(
                id=f"{source_file}-note-{index}",
                name=fields.note_type or fields.category or DEFAULT_NOTE_NAME,
                value=fields.author,
                date=fields.date,
                source_file=source_file,
                page=locate_page(anchor, spans, full_markdown, blocks),
                category=fields.category or CLINICAL_NOTES_CATEGORY,
                raw_content=strip_markdown(text),
                raw_markdown=text,
                note_type=fields.note_type,
                author=fields.author,
                created=fields.created,
                location=fields.location,
                note_index=index,
            )
        )
    return notes
