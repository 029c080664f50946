"""Stand-in used when no search index is configured."""

from __future__ import annotations

from typing import NoReturn, Sequence

from medlists.core.exceptions import IndexUnavailableError
from medlists.models import Record

NOT_CONFIGURED = "Clinical notes search is not configured (no search index endpoint)"


class UnavailableSearchIndex:
    """Every operation raises ``IndexUnavailableError``."""

    def __init__(self, reason: str = NOT_CONFIGURED) -> None:
        self.reason = reason

    def _unavailable(self) -> NoReturn:
        raise IndexUnavailableError(self.reason)

    def bulk_index(self, owner: str, records: Sequence[Record]) -> NoReturn:
        self._unavailable()

    def delete_by_file(self, owner: str, file_name: str) -> NoReturn:
        self._unavailable()

    def query(self, owner: str, query) -> NoReturn:
        self._unavailable()

    def categories(self, owner: str) -> NoReturn:
        self._unavailable()

    def delete_all(self, owner: str) -> NoReturn:
        self._unavailable()
