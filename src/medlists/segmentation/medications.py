"""Medication record extraction from the full document markdown."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from medlists.core.config import SegmentationConfig
from medlists.models import PageBlock, Record
from medlists.segmentation.pages import assign_pages
from medlists.segmentation.patterns import MEDICATION_HEADINGS
from medlists.segmentation.sections import locate_sections
from medlists.segmentation.segmenter import segment_section

log = logging.getLogger(__name__)

MEDICATIONS_CATEGORY = "Medications"


def extract_medication_records(
    full_markdown: str,
    blocks: Sequence[PageBlock],
    source_file: str = "",
    config: Optional[SegmentationConfig] = None,
) -> list[Record]:
    """Segment every medication section into dated ``Record``s.

    Record ids are ``{source_file}-med-{section}-{n}`` where ``n`` restarts
    at zero in each section.  No located section means an empty list.
    """
    config = config or SegmentationConfig()
    spans = locate_sections(full_markdown, MEDICATION_HEADINGS)
    if not spans:
        log.info("No medication section found in %s", source_file or "document")
        return []

    records: list[Record] = []
    for section_index, span in enumerate(spans):
        drafts = segment_section(
            full_markdown[span.start:span.end],
            repeat_threshold=config.repeat_threshold,
            letterhead_patterns=config.letterhead_patterns,
            max_lines_after_date=config.max_lines_after_date,
        )
        for n, draft in enumerate(drafts):
            records.append(
                Record(
                    id=f"{source_file}-med-{section_index}-{n}",
                    name=draft.name,
                    value=draft.value,
                    date=draft.date,
                    source_file=source_file,
                    category=MEDICATIONS_CATEGORY,
                    raw_content=draft.content,
                    raw_markdown=draft.content,
                )
            )

    log.info(
        "Extracted %d medication record(s) from %d section(s)", len(records), len(spans)
    )
    return assign_pages(records, spans, full_markdown, blocks, anchor_length=config.anchor_length)
