"""Prompt used to enumerate a document's top-level categories."""

from __future__ import annotations

CATEGORY_PROMPT = """List the top-level (### ....) markdown categories and the number of occurrences of that heading in the file.

Here is the markdown file:

{markdown}

Please provide a list of all top-level markdown categories (### headings) and the count of each one. Format your response as a simple list, one category per line, with the format: "Category Name: count\""""


def build_category_prompt(markdown: str) -> str:
    return CATEGORY_PROMPT.format(markdown=markdown)
