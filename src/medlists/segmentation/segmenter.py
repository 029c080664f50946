"""Record segmenter: a small state machine folded over classified lines.

States::

    SEEKING_DATE ──date──▶ HAVE_DATE_NO_RECORD ──record line──▶ HAVE_RECORD
         ▲                        │                                 │
         └──── >N lines / page marker / header-footer ──────────────┘

A date line always flushes the open record and starts over.  A page marker
or header-footer line drops the open record unemitted.  The state is
an immutable value threaded through ``step`` so the machine can be driven
directly with synthetic ``(line, tag)`` sequences.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Optional

from medlists.segmentation.boilerplate import (
    DEFAULT_LETTERHEADS,
    DEFAULT_REPEAT_THRESHOLD,
    filter_boilerplate,
)
from medlists.segmentation.classifier import (
    LineTag,
    classify_line,
    is_valid_record_name,
    match_date,
    match_record_name,
    match_record_with_value,
    match_value,
)

DEFAULT_MAX_LINES_AFTER_DATE = 5


class Phase(str, Enum):
    SEEKING_DATE = "seeking_date"
    HAVE_DATE_NO_RECORD = "have_date_no_record"
    HAVE_RECORD = "have_record"


@dataclass(frozen=True)
class RecordDraft:
    """A record still being assembled from consecutive lines."""

    name: str
    date: str
    value: str = ""
    lines: tuple[str, ...] = field(default_factory=tuple)

    def append(self, line: str, *, value: Optional[str] = None) -> RecordDraft:
        return replace(self, lines=self.lines + (line,), value=value or self.value)

    @property
    def content(self) -> str:
        return "\n".join(self.lines)


@dataclass(frozen=True)
class SegmenterState:
    phase: Phase = Phase.SEEKING_DATE
    date: str = ""
    draft: Optional[RecordDraft] = None
    lines_since_date: int = 0


_SKIPPED = frozenset({LineTag.LOCATION, LineTag.TOO_SHORT_OR_LONG})
_ABANDONING = frozenset({LineTag.PAGE_MARKER, LineTag.HEADER_FOOTER})


def step(
    state: SegmenterState,
    line: str,
    tag: LineTag,
    *,
    max_lines_after_date: int = DEFAULT_MAX_LINES_AFTER_DATE,
) -> tuple[SegmenterState, Optional[RecordDraft]]:
    """Advance the machine by one line. Returns ``(new_state, emitted)``."""
    line = line.strip()
    if not line:
        return state, None

    if tag is LineTag.DATE:
        date = match_date(line) or line
        return SegmenterState(phase=Phase.HAVE_DATE_NO_RECORD, date=date), state.draft

    if state.phase is Phase.SEEKING_DATE:
        return state, None

    counter = state.lines_since_date + 1
    if state.phase is Phase.HAVE_DATE_NO_RECORD and counter > max_lines_after_date:
        return SegmenterState(), None
    state = replace(state, lines_since_date=counter)

    if tag in _SKIPPED:
        return state, None
    if tag in _ABANDONING:
        return SegmenterState(), None

    if state.phase is Phase.HAVE_DATE_NO_RECORD:
        return _open_record(state, line, tag)

    draft = state.draft
    if draft is None:
        return SegmenterState(), None
    if not draft.value:
        return replace(state, draft=draft.append(line, value=match_value(line))), None
    return replace(state, draft=draft.append(line)), None


def _open_record(
    state: SegmenterState, line: str, tag: LineTag
) -> tuple[SegmenterState, Optional[RecordDraft]]:
    if tag is LineTag.RECORD_WITH_VALUE:
        matched = match_record_with_value(line)
        if matched is None:
            return state, None
        name, value = matched
    elif tag is LineTag.RECORD_NAME_ONLY:
        name = match_record_name(line) or ""
        value = ""
    else:
        return state, None

    if not is_valid_record_name(name):
        return state, None

    draft = RecordDraft(name=name, date=state.date, value=value, lines=(line,))
    opened = SegmenterState(phase=Phase.HAVE_RECORD, date=state.date, draft=draft)
    return opened, state.draft


def finish(state: SegmenterState) -> Optional[RecordDraft]:
    """Flush the open record at the end of a section."""
    if state.draft is not None and state.draft.name:
        return state.draft
    return None


def segment_lines(
    lines: Iterable[str],
    *,
    max_lines_after_date: int = DEFAULT_MAX_LINES_AFTER_DATE,
) -> list[RecordDraft]:
    """Classify and fold ``lines``, returning drafts in date-line order."""
    state = SegmenterState()
    drafts: list[RecordDraft] = []
    for line in lines:
        state, emitted = step(
            state, line, classify_line(line), max_lines_after_date=max_lines_after_date
        )
        if emitted is not None:
            drafts.append(emitted)
    last = finish(state)
    if last is not None:
        drafts.append(last)
    return drafts


def segment_section(
    section_text: str,
    *,
    repeat_threshold: int = DEFAULT_REPEAT_THRESHOLD,
    letterhead_patterns: Iterable[str] = DEFAULT_LETTERHEADS,
    max_lines_after_date: int = DEFAULT_MAX_LINES_AFTER_DATE,
) -> list[RecordDraft]:
    """Filter boilerplate out of one section, then segment it into drafts."""
    filtered = filter_boilerplate(
        section_text,
        repeat_threshold=repeat_threshold,
        letterhead_patterns=letterhead_patterns,
    )
    return segment_lines(filtered.split("\n"), max_lines_after_date=max_lines_after_date)
