"""Async text-generation client routed through LiteLLM.

Supports ``anthropic/``, ``bedrock/``, ``openai/`` model prefixes
transparently; ``base_url`` points it at any OpenAI-compatible endpoint.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any

from medlists.core.config import LLMConfig
from medlists.core.exceptions import NonRetryableError, RetryableError

log = logging.getLogger(__name__)


class LLMClient:
    """Async LLM client using LiteLLM with retry and back-off."""

    def __init__(self, config: LLMConfig) -> None:
        self._config = config

    @property
    def model(self) -> str:
        return self._config.model

    @staticmethod
    def _is_retryable(exc: Exception) -> bool:
        """Classify whether an LLM API error should be retried.

        Non-retryable: AuthenticationError, BadRequestError, NotFoundError (4xx non-429).
        Retryable (default): everything else including rate limits, timeouts, 5xx.
        """
        from litellm.exceptions import (
            AuthenticationError,
            BadRequestError,
            NotFoundError,
        )

        return not isinstance(exc, (AuthenticationError, BadRequestError, NotFoundError))

    async def generate(self, prompt: str) -> str:
        return await self.complete(prompt)

    async def complete(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        temperature: float | None = None,
    ) -> str:
        """Single completion, returns the content string."""
        from litellm import acompletion

        messages: list[dict[str, Any]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        kwargs: dict[str, Any] = {
            "model": self._config.model,
            "messages": messages,
            "temperature": temperature if temperature is not None else self._config.temperature,
            "timeout": self._config.timeout,
        }
        if self._config.base_url:
            kwargs["api_base"] = self._config.base_url
        if self._config.api_key:
            kwargs["api_key"] = self._config.api_key

        max_retries = max(1, self._config.max_retries)
        last_error: Exception | None = None
        for attempt in range(max_retries):
            try:
                response = await acompletion(**kwargs)
                return response.choices[0].message.content or ""

            except Exception as e:
                last_error = e
                if not self._is_retryable(e):
                    raise NonRetryableError(f"Non-retryable LLM error: {e}") from e

                base_wait = min(2**attempt, self._config.retry_max_delay)
                wait = base_wait + random.uniform(0, base_wait * self._config.retry_jitter_factor)

                log.warning(
                    "LLM retry %d/%d: %s (wait=%.1fs)",
                    attempt + 1, max_retries, e, wait,
                )
                if attempt < max_retries - 1:
                    await asyncio.sleep(wait)

        raise RetryableError(
            f"LLM API failed after {max_retries} retries: {last_error}"
        ) from last_error

    async def close(self) -> None:
        """No-op; LiteLLM manages its own connection pooling."""
