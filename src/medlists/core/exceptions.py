"""Exception hierarchy for medlists.

Soft conditions (category extraction failure, cache write failure) never
raise; they are logged and annotated on the returned result.  Only the
exceptions below propagate to callers.
"""

from __future__ import annotations


class MedListsError(Exception):
    """Base exception for all medlists errors."""


class SourceNotFoundError(MedListsError):
    """Raised when the referenced source document does not exist."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Source document not found: {key}")
        self.key = key


class IndexUnavailableError(MedListsError):
    """Raised when the search index is not configured or not reachable."""


class SearchIndexError(MedListsError):
    """Raised when a search index request fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UnsupportedCategoryError(MedListsError):
    """Raised when a category has no record segmenter."""


class PersistenceError(MedListsError):
    """Raised when a persistence backend operation fails."""


class LLMClientError(MedListsError):
    """Raised when LLM API calls fail after exhausting retries."""


class RetryableError(LLMClientError):
    """Rate limits, timeouts and 5xx responses; should be retried."""


class NonRetryableError(LLMClientError):
    """Auth errors and other 4xx (non-429) responses; fail immediately."""


__all__ = [
    "MedListsError",
    "SourceNotFoundError",
    "IndexUnavailableError",
    "SearchIndexError",
    "UnsupportedCategoryError",
    "PersistenceError",
    "LLMClientError",
    "RetryableError",
    "NonRetryableError",
]
