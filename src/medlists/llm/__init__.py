"""Text-generation delegate (LiteLLM-backed)."""

from __future__ import annotations

from medlists.llm.client import LLMClient
from medlists.llm.protocols import ITextGenerator

__all__ = ["ITextGenerator", "LLMClient"]
