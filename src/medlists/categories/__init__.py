"""Document category extraction."""

from __future__ import annotations

from medlists.categories.extractor import CategoryExtraction, CategoryExtractor
from medlists.categories.parser import parse_category_reply
from medlists.categories.prompts import CATEGORY_PROMPT, build_category_prompt

__all__ = [
    "CATEGORY_PROMPT",
    "build_category_prompt",
    "parse_category_reply",
    "CategoryExtraction",
    "CategoryExtractor",
]
