"""In-memory search index for tests and single-process deployments."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Sequence

from medlists.models import (
    BulkIndexResult,
    CategoryCount,
    NoteQuery,
    QueryHit,
    QueryResult,
    Record,
)
from medlists.search.documents import document_id, to_document

log = logging.getLogger(__name__)


class InMemorySearchIndex:
    """Dict-backed index: ``owner -> {doc_id: document}``."""

    def __init__(self) -> None:
        self._indices: dict[str, dict[str, dict[str, Any]]] = {}

    def bulk_index(self, owner: str, records: Sequence[Record]) -> BulkIndexResult:
        if not owner:
            raise ValueError("owner is required for indexing")
        docs = self._indices.setdefault(owner, {})
        for record in records:
            docs[document_id(owner, record)] = to_document(owner, record)
        return BulkIndexResult(indexed=len(records))

    def _delete_where(self, owner: str, predicate) -> int:
        docs = self._indices.get(owner, {})
        doomed = [doc_id for doc_id, doc in docs.items() if predicate(doc)]
        for doc_id in doomed:
            del docs[doc_id]
        return len(doomed)

    def delete_by_file(self, owner: str, file_name: str) -> int:
        if not owner or not file_name:
            raise ValueError("owner and file_name are required")
        return self._delete_where(owner, lambda doc: doc["fileName"] == file_name)

    def delete_all(self, owner: str) -> int:
        if not owner:
            raise ValueError("owner is required")
        return self._delete_where(owner, lambda doc: True)

    def _matches(self, doc: dict[str, Any], query: NoteQuery) -> bool:
        if query.category and doc["category"] != query.category:
            return False
        if query.file_name and doc["fileName"] != query.file_name:
            return False
        if query.page is not None and doc["page"] != query.page:
            return False
        if query.query and query.query != "*":
            needle = query.query.lower()
            haystack = " ".join((doc["content"], doc["markdown"], doc["category"])).lower()
            return needle in haystack
        return True

    def query(self, owner: str, query: NoteQuery) -> QueryResult:
        if not owner:
            raise ValueError("owner is required for searching")
        matched = sorted(
            (
                (doc_id, doc)
                for doc_id, doc in self._indices.get(owner, {}).items()
                if doc["userId"] == owner and self._matches(doc, query)
            ),
            key=lambda item: (item[1]["fileName"], item[1]["page"]),
        )
        window = matched[query.offset:query.offset + query.size]
        return QueryResult(
            total=len(matched),
            hits=[QueryHit(id=doc_id, source=doc) for doc_id, doc in window],
        )

    def categories(self, owner: str) -> list[CategoryCount]:
        counts = Counter(doc["category"] for doc in self._indices.get(owner, {}).values())
        return [CategoryCount(category=c, count=n) for c, n in counts.most_common()]
