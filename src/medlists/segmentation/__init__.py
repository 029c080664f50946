"""Section location, boilerplate filtering and record segmentation."""

from __future__ import annotations

from medlists.segmentation.boilerplate import filter_boilerplate
from medlists.segmentation.classifier import LineTag, classify_line
from medlists.segmentation.clinical_notes import extract_clinical_notes
from medlists.segmentation.medications import extract_medication_records
from medlists.segmentation.observations import CategorySummary, build_category_files
from medlists.segmentation.pages import (
    assign_pages,
    build_page_blocks,
    locate_page,
    page_for_offset,
    render_full_markdown,
)
from medlists.segmentation.sections import locate_sections
from medlists.segmentation.segmenter import RecordDraft, segment_lines, segment_section

__all__ = [
    "filter_boilerplate",
    "LineTag",
    "classify_line",
    "locate_sections",
    "RecordDraft",
    "segment_lines",
    "segment_section",
    "render_full_markdown",
    "build_page_blocks",
    "page_for_offset",
    "locate_page",
    "assign_pages",
    "extract_medication_records",
    "extract_clinical_notes",
    "CategorySummary",
    "build_category_files",
]
