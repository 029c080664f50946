"""Text-generation protocol used by the category extractor."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ITextGenerator(Protocol):
    """Anything that turns a prompt into free text."""

    async def generate(self, prompt: str) -> str:
        """Return the completion text for ``prompt``."""
        ...
