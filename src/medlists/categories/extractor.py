"""Category extraction via the text-generation delegate.

Failures never propagate: the pipeline continues with no categories and
the reason recorded on the result.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from pydantic import BaseModel, Field

from medlists.categories.parser import parse_category_reply
from medlists.categories.prompts import build_category_prompt
from medlists.llm.protocols import ITextGenerator
from medlists.models import CategoryCount

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120.0


class CategoryExtraction(BaseModel):
    categories: list[CategoryCount] = Field(default_factory=list)
    error: Optional[str] = None


class CategoryExtractor:
    """Ask the delegate for a document's top-level headings and counts."""

    def __init__(self, generator: ITextGenerator, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._generator = generator
        self._timeout = timeout

    async def extract(self, markdown: str) -> CategoryExtraction:
        try:
            reply = await asyncio.wait_for(
                self._generator.generate(build_category_prompt(markdown)),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            log.warning("Category extraction timed out after %.0fs", self._timeout)
            return CategoryExtraction(error=f"Category extraction timed out after {self._timeout:.0f}s")
        except asyncio.CancelledError:
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            log.warning("Category extraction call was cancelled")
            return CategoryExtraction(error="Category extraction was cancelled")
        except Exception as e:
            log.warning("Category extraction failed: %s", e)
            return CategoryExtraction(error=str(e) or type(e).__name__)

        if not reply or not reply.strip():
            log.warning("Category extraction returned an empty reply")
            return CategoryExtraction(error="Empty response from text generator")

        categories = parse_category_reply(reply)
        log.info("Extracted %d categories", len(categories))
        return CategoryExtraction(categories=categories)
