"""Tests for medication record extraction."""

from __future__ import annotations

from medlists.core.config import SegmentationConfig
from medlists.models import PageContent
from medlists.segmentation.medications import MEDICATIONS_CATEGORY, extract_medication_records
from medlists.segmentation.pages import build_page_blocks, render_full_markdown


def _extract(pages, **kwargs):
    return extract_medication_records(
        render_full_markdown(pages), build_page_blocks(pages), "visit.pdf", **kwargs
    )


class TestExtractMedicationRecords:
    def test_sample_document(self, sample_pages):
        records = _extract(sample_pages)

        assert [(r.name, r.value, r.date) for r in records] == [
            ("Aspirin", "81 mg", "Oct 27, 2025"),
            ("Lisinopril", "10 mg tablets", "Nov 3, 2025"),
        ]
        assert all(r.page == 2 for r in records)
        assert all(r.category == MEDICATIONS_CATEGORY for r in records)
        assert records[0].raw_content == "Aspirin 81 mg\nTake once daily"
        assert records[0].id == "visit.pdf-med-0-0"
        assert records[1].id == "visit.pdf-med-0-1"

    def test_ids_restart_per_section(self):
        pages = [
            PageContent(page_number=1, markdown="### Medications\nOct 1, 2025\nAspirin 81 mg"),
            PageContent(page_number=2, markdown="### Medication Records\nNov 3, 2025\nLisinopril 10 mg"),
        ]
        records = _extract(pages)

        assert [r.id for r in records] == ["visit.pdf-med-0-0", "visit.pdf-med-1-0"]
        assert [r.page for r in records] == [1, 2]

    def test_no_medication_section(self):
        pages = [PageContent(page_number=1, markdown="### Allergies\nPenicillin")]
        assert _extract(pages) == []

    def test_config_threads_through(self):
        pages = [PageContent(page_number=1, markdown="### Medications\nOct 1, 2025\nsee notes\nAspirin 81 mg")]
        assert len(_extract(pages)) == 1
        assert _extract(pages, config=SegmentationConfig(max_lines_after_date=1)) == []
