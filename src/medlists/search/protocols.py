"""Search index protocol for clinical-note records."""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from medlists.models import BulkIndexResult, CategoryCount, NoteQuery, QueryResult, Record


@runtime_checkable
class ISearchIndex(Protocol):
    """Per-owner document index. Every operation is scoped to ``owner``."""

    def bulk_index(self, owner: str, records: Sequence[Record]) -> BulkIndexResult:
        """Index ``records`` for ``owner``; re-indexing a record overwrites it."""
        ...

    def delete_by_file(self, owner: str, file_name: str) -> int:
        """Delete every record of ``owner`` from ``file_name``. Returns the count."""
        ...

    def query(self, owner: str, query: NoteQuery) -> QueryResult:
        """Search ``owner``'s records."""
        ...

    def categories(self, owner: str) -> list[CategoryCount]:
        """Record counts per category for ``owner``."""
        ...

    def delete_all(self, owner: str) -> int:
        """Delete every record of ``owner``. Returns the count."""
        ...
