"""Full-document rendering and offset-to-page mapping.

Pages are rendered as ``## Page N`` blocks joined by a ``---`` rule.  The
segmenters work on filtered, re-joined text whose offsets no longer line up
with the full document, so records are re-located by an anchor substring
(the start of their raw content) and the anchor's offset is mapped back to
a page through the rendered block lengths.
"""

from __future__ import annotations

from typing import Sequence

from medlists.models import PageBlock, PageContent, Record, SectionSpan

PAGE_SEPARATOR = "\n\n---\n\n"
DEFAULT_PAGE = 1


def page_header(page_number: int) -> str:
    return f"## Page {page_number}\n\n"


def render_full_markdown(pages: Sequence[PageContent]) -> str:
    return PAGE_SEPARATOR.join(f"{page_header(p.page_number)}{p.markdown}" for p in pages)


def build_page_blocks(pages: Sequence[PageContent]) -> list[PageBlock]:
    """Rendered length of every page, separator included except for the last."""
    blocks: list[PageBlock] = []
    for i, page in enumerate(pages):
        length = len(page_header(page.page_number)) + len(page.markdown)
        if i < len(pages) - 1:
            length += len(PAGE_SEPARATOR)
        blocks.append(PageBlock(page_number=page.page_number, rendered_length=length))
    return blocks


def page_for_offset(offset: int, blocks: Sequence[PageBlock]) -> int:
    accumulated = 0
    for block in blocks:
        if accumulated <= offset < accumulated + block.rendered_length:
            return block.page_number
        accumulated += block.rendered_length
    return DEFAULT_PAGE


def locate_page(
    anchor: str,
    spans: Sequence[SectionSpan],
    text: str,
    blocks: Sequence[PageBlock],
) -> int:
    """Page of the first section occurrence of ``anchor``; page 1 if none."""
    if not anchor:
        return DEFAULT_PAGE
    for span in spans:
        position = text.find(anchor, span.start, span.end)
        if position != -1:
            return page_for_offset(position, blocks)
    return DEFAULT_PAGE


def assign_pages(
    records: Sequence[Record],
    spans: Sequence[SectionSpan],
    text: str,
    blocks: Sequence[PageBlock],
    *,
    anchor_length: int = 50,
) -> list[Record]:
    return [
        r.model_copy(update={"page": locate_page(anchor_for(r.raw_content, anchor_length), spans, text, blocks)})
        for r in records
    ]


def anchor_for(content: str, anchor_length: int = 50) -> str:
    """Leading ``anchor_length`` characters of ``content``, cut at the first line break.

    Segmented content is stripped and re-joined line by line, so only its
    first line is guaranteed to appear verbatim in the source text.
    """
    return content.strip()[:anchor_length].split("\n", 1)[0].strip()
