"""Per-category observation summaries.

A document's ``### Category`` blocks are split into observations, each one
starting at a ``Mon D, YYYY <place>`` line.  Every category is rendered as
a small markdown file listing one formatted line per observation with its
date and page, e.g.::

    # Medications
    **Total Observations:** 2
    **Date:** Oct 27, 2025 | **Page:** 3
    Oct 27, 2025 **Aspirin** **81 mg**
    ---
    ...
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

OBSERVATION_START = re.compile(r"^([A-Z][a-z]{2}\s+\d{1,2},\s+\d{4})\s+\S+", re.IGNORECASE)
CATEGORY_HEADER = "### "
PAGE_HEADER = re.compile(r"^##\s+Page\s+(\d+)$")


@dataclass
class CategoryBlock:
    """Lines ``[start, end]`` (inclusive) under one ``### Category`` header."""

    start: int
    end: int


@dataclass
class Observation:
    date: str
    display: str
    page: int
    out_of_range: list[str] = field(default_factory=list)


@dataclass
class CategorySummary:
    category: str
    observations: list[Observation]

    @property
    def file_name(self) -> str:
        return f"{sanitize_category(self.category)}.md"

    def render(self) -> str:
        body = "\n---\n".join(_render_observation(o) for o in self.observations)
        return f"# {self.category}\n**Total Observations:** {len(self.observations)}\n{body}"


def sanitize_category(name: str) -> str:
    name = re.sub(r"[^a-zA-Z0-9\s-]", "", name)
    return re.sub(r"\s+", "_", name).lower()


def _render_observation(obs: Observation) -> str:
    parts = []
    if obs.date:
        parts.append(f"**Date:** {obs.date}")
    if obs.page:
        parts.append(f"**Page:** {obs.page}")
    text = (" | ".join(parts) + "\n" if parts else "") + obs.display
    if obs.out_of_range:
        text += " | **Out of Range:** " + "; ".join(line.strip() for line in obs.out_of_range)
    return text


def _page_numbers(lines: list[str]) -> list[int]:
    """Page each line falls on, from the ``## Page N`` headers seen so far."""
    pages = []
    page = 1
    for line in lines:
        m = PAGE_HEADER.match(line.strip())
        if m:
            page = int(m.group(1))
        pages.append(page)
    return pages


def category_blocks(lines: list[str]) -> dict[str, list[CategoryBlock]]:
    """Group ``### Category`` blocks by category name, in first-seen order."""
    blocks: dict[str, list[CategoryBlock]] = {}
    headers = [
        (i, line.strip()[len(CATEGORY_HEADER):].strip())
        for i, line in enumerate(lines)
        if line.strip().startswith(CATEGORY_HEADER)
    ]
    for n, (start, name) in enumerate(headers):
        end = headers[n + 1][0] - 1 if n + 1 < len(headers) else len(lines) - 1
        blocks.setdefault(name, []).append(CategoryBlock(start=start, end=end))
    return blocks


# ── Formatting ───────────────────────────────────────────────────────


def _is_capitalized(line: str) -> bool:
    first = line[:1]
    return first.isalpha() and first.isupper()


def _format_allergies(date: str, lines: list[str]) -> str:
    entries = []
    for line in lines:
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("###") or trimmed.startswith("## "):
            continue
        if not _is_capitalized(trimmed):
            continue
        first, _, rest = trimmed.partition(" ")
        entries.append(f"**{first}** {rest}" if rest else f"**{first}**")
    if not entries:
        return date
    joined = " ".join(entries)
    return f"{date} {joined}" if date else joined


def _second_line(lines: list[str]) -> str:
    return lines[1].strip() if len(lines) > 1 else ""


def format_observation(
    category: str, date: str, lines: list[str], line_count: Optional[int] = None
) -> str:
    """One-line display for an observation. ``lines[0]`` is its start line."""
    lower = category.lower()

    if "allerg" in lower:
        return _format_allergies(date, lines)

    if "medication" in lower:
        if len(lines) < 2:
            return date
        name, _, dose = _second_line(lines).partition(" ")
        dose = dose.strip()
        if dose:
            return f"{date} **{name}** **{dose}**"
        return f"{date} **{_second_line(lines)}**"

    if "clinical notes" in lower:
        if len(lines) >= 3:
            type_line, author_line = lines[1].strip(), lines[2].strip()
            note_type = re.sub(r"^Type:\s*", "", type_line, flags=re.IGNORECASE).strip() or type_line
            author = re.sub(r"^Author:\s*", "", author_line, flags=re.IGNORECASE).strip() or author_line
            return f"{date} **{note_type or 'N/A'}** by **{author or 'N/A'}**"
        if len(lines) == 2:
            return f"{date} **{_second_line(lines) or 'N/A'}** by **N/A**"
        return date

    if any(k in lower for k in ("procedure", "condition", "immunization")):
        if len(lines) < 2:
            return date
        detail = _second_line(lines)
        if "procedure" in lower and detail.startswith("## "):
            detail = detail[3:].strip()
        return f"{date} **{detail}**"

    if "clinical vitals" in lower or "lab result" in lower:
        count = line_count if line_count is not None else len(lines)
        return f"{date} ({count} line{'' if count == 1 else 's'})"

    return date


def _is_out_of_range(line: str) -> bool:
    return "OUT" in line and "OF" in line and "RANG" in line


# ── Extraction ───────────────────────────────────────────────────────


def summarize_category(
    category: str, blocks: list[CategoryBlock], lines: list[str], pages: list[int]
) -> CategorySummary:
    lower = category.lower()
    merge_by_date = "clinical vitals" in lower or "lab result" in lower
    is_lab = "lab result" in lower

    observations: list[Observation] = []
    merged: dict[str, Observation] = {}
    merged_counts: dict[str, int] = {}
    starts_seen = 0

    for block in blocks:
        starts = [
            (i, m.group(1))
            for i in range(block.start + 1, block.end + 1)
            if (m := OBSERVATION_START.match(lines[i].strip()))
        ]
        starts_seen += len(starts)
        for n, (start, date) in enumerate(starts):
            end = starts[n + 1][0] if n + 1 < len(starts) else block.end + 1
            obs_lines = lines[start:end]
            page = pages[start]

            if merge_by_date:
                out_of_range = [l for l in obs_lines if _is_out_of_range(l)] if is_lab else []
                if date in merged:
                    merged_counts[date] += len(obs_lines)
                    merged[date].out_of_range.extend(out_of_range)
                else:
                    merged[date] = Observation(date=date, display="", page=page, out_of_range=out_of_range)
                    merged_counts[date] = len(obs_lines)
                continue

            display = format_observation(category, date, obs_lines)
            if display:
                observations.append(Observation(date=date, display=display, page=page))

    for date, obs in merged.items():
        obs.display = format_observation(category, date, [], merged_counts[date])
        observations.append(obs)

    if "allerg" in lower and starts_seen == 0:
        for block in blocks:
            block_lines = lines[block.start:block.end + 1]
            display = format_observation(category, "", block_lines)
            if display and len(block_lines) > 1:
                observations.append(Observation(date="", display=display, page=pages[block.start]))

    return CategorySummary(category=category, observations=observations)


def build_category_files(full_markdown: str) -> list[CategorySummary]:
    """Summaries for every category with at least one observation."""
    lines = full_markdown.split("\n")
    pages = _page_numbers(lines)
    summaries = []
    for category, blocks in category_blocks(lines).items():
        summary = summarize_category(category, blocks, lines, pages)
        if summary.observations:
            summaries.append(summary)
    return summaries
