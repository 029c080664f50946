"""Search index wrapper that records the order of calls."""

from __future__ import annotations

from typing import Sequence

from medlists.models import BulkIndexResult, CategoryCount, NoteQuery, QueryResult, Record
from medlists.search.protocols import ISearchIndex


class RecordingSearchIndex:
    """Delegates to a real index and logs ``(operation, owner, detail)`` tuples."""

    def __init__(self, inner: ISearchIndex) -> None:
        self._inner = inner
        self.calls: list[tuple[str, str, object]] = []

    def bulk_index(self, owner: str, records: Sequence[Record]) -> BulkIndexResult:
        self.calls.append(("bulk_index", owner, len(records)))
        return self._inner.bulk_index(owner, records)

    def delete_by_file(self, owner: str, file_name: str) -> int:
        self.calls.append(("delete_by_file", owner, file_name))
        return self._inner.delete_by_file(owner, file_name)

    def query(self, owner: str, query: NoteQuery) -> QueryResult:
        self.calls.append(("query", owner, query))
        return self._inner.query(owner, query)

    def categories(self, owner: str) -> list[CategoryCount]:
        self.calls.append(("categories", owner, None))
        return self._inner.categories(owner)

    def delete_all(self, owner: str) -> int:
        self.calls.append(("delete_all", owner, None))
        return self._inner.delete_all(owner)

    @property
    def operations(self) -> list[str]:
        return [op for op, _, _ in self.calls]
