"""Tests for full-document rendering and page mapping."""

from __future__ import annotations

from medlists.models import PageBlock, PageContent, SectionSpan
from medlists.segmentation.pages import (
    anchor_for,
    build_page_blocks,
    locate_page,
    page_for_offset,
    render_full_markdown,
)


def _pages(*markdowns: str) -> list[PageContent]:
    return [PageContent(page_number=i + 1, markdown=md) for i, md in enumerate(markdowns)]


class TestRender:
    def test_render_full_markdown(self):
        assert render_full_markdown(_pages("a", "b")) == "## Page 1\n\na\n\n---\n\n## Page 2\n\nb"

    def test_block_lengths_cover_the_document(self, sample_pages):
        full = render_full_markdown(sample_pages)
        blocks = build_page_blocks(sample_pages)
        assert sum(b.rendered_length for b in blocks) == len(full)
        assert [b.page_number for b in blocks] == [1, 2, 3]

    def test_empty_document(self):
        assert render_full_markdown([]) == ""
        assert build_page_blocks([]) == []


class TestPageForOffset:
    def test_boundaries(self):
        blocks = [PageBlock(page_number=1, rendered_length=10), PageBlock(page_number=2, rendered_length=5)]
        assert page_for_offset(0, blocks) == 1
        assert page_for_offset(9, blocks) == 1
        assert page_for_offset(10, blocks) == 2
        assert page_for_offset(14, blocks) == 2

    def test_out_of_range_defaults_to_first_page(self):
        blocks = [PageBlock(page_number=1, rendered_length=10)]
        assert page_for_offset(99, blocks) == 1


class TestLocatePage:
    def test_anchor_on_third_page(self):
        pages = _pages("cover", "intro", "### Medications\nOct 1, 2025\nAspirin 81 mg")
        full = render_full_markdown(pages)
        span = SectionSpan(start=0, end=len(full))
        assert locate_page("Aspirin 81 mg", [span], full, build_page_blocks(pages)) == 3

    def test_anchor_outside_every_span(self):
        pages = _pages("### Medications\nOct 1, 2025", "Aspirin 81 mg")
        full = render_full_markdown(pages)
        span = SectionSpan(start=0, end=full.index("## Page 2"))
        assert locate_page("Aspirin 81 mg", [span], full, build_page_blocks(pages)) == 1

    def test_empty_anchor(self):
        assert locate_page("", [SectionSpan(start=0, end=5)], "hello", []) == 1


def test_anchor_for_uses_first_line_only():
    assert anchor_for("  Aspirin 81 mg\nTake daily") == "Aspirin 81 mg"
    assert anchor_for("abcdefghij", anchor_length=4) == "abcd"
