"""OpenSearch REST client for clinical-note records.

Each owner gets a separate index (``{owner}-clinical-notes``) and every
query and delete additionally filters on the ``userId`` term.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Sequence

import requests

from medlists.core.exceptions import IndexUnavailableError, SearchIndexError
from medlists.models import (
    BulkIndexResult,
    CategoryCount,
    NoteQuery,
    QueryHit,
    QueryResult,
    Record,
)
from medlists.search.documents import INDEX_MAPPING, document_id, index_name, to_document

log = logging.getLogger(__name__)


class OpenSearchIndex:
    """Synchronous OpenSearch client built on ``requests``."""

    def __init__(
        self,
        endpoint: str,
        *,
        username: str = "",
        password: str = "",
        timeout: float = 30.0,
        verify_tls: bool = True,
        index_suffix: str = "clinical-notes",
        session: Optional[requests.Session] = None,
    ) -> None:
        if not endpoint:
            raise ValueError("OpenSearch endpoint is required")
        self._endpoint = endpoint.rstrip("/")
        self._timeout = timeout
        self._suffix = index_suffix
        self._session = session or requests.Session()
        self._session.verify = verify_tls
        if username and password:
            self._session.auth = (username, password)
        self._known_indices: set[str] = set()

    def index_name(self, owner: str) -> str:
        return index_name(owner, self._suffix)

    # ── HTTP plumbing ────────────────────────────────────────────────

    def _request(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        data: Optional[str] = None,
        content_type: str = "application/json",
        allow_status: tuple[int, ...] = (),
    ) -> requests.Response:
        url = f"{self._endpoint}/{path.lstrip('/')}"
        if body is not None:
            data = json.dumps(body)
        try:
            response = self._session.request(
                method,
                url,
                data=data,
                headers={"Content-Type": content_type},
                timeout=self._timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as e:
            raise IndexUnavailableError(f"Search index unreachable at {self._endpoint}: {e}") from e
        except requests.RequestException as e:
            raise SearchIndexError(f"{method} {path} failed: {e}") from e

        if response.ok or response.status_code in allow_status:
            return response
        raise SearchIndexError(
            f"{method} {path} failed: {response.status_code} - {response.text[:500]}",
            status_code=response.status_code,
        )

    def _refresh(self, name: str) -> None:
        try:
            self._request("POST", f"{name}/_refresh")
        except (SearchIndexError, IndexUnavailableError) as e:
            log.warning("Refresh of %s failed: %s", name, e)

    def ensure_index(self, owner: str) -> str:
        """Create the owner's index with its mapping if it does not exist yet."""
        name = self.index_name(owner)
        if name in self._known_indices:
            return name

        head = self._request("HEAD", name, allow_status=(404,))
        if head.status_code == 404:
            created = self._request("PUT", name, body=INDEX_MAPPING, allow_status=(400,))
            if created.status_code == 400:
                if "resource_already_exists_exception" not in created.text:
                    raise SearchIndexError(
                        f"Failed to create index {name}: {created.text[:500]}", status_code=400
                    )
            else:
                log.info("Created index %s", name)
        self._known_indices.add(name)
        return name

    # ── Operations ───────────────────────────────────────────────────

    def bulk_index(self, owner: str, records: Sequence[Record]) -> BulkIndexResult:
        if not owner:
            raise ValueError("owner is required for indexing")
        if not records:
            return BulkIndexResult()

        name = self.ensure_index(owner)
        lines: list[str] = []
        for record in records:
            lines.append(json.dumps({"index": {"_index": name, "_id": document_id(owner, record)}}))
            lines.append(json.dumps(to_document(owner, record)))

        response = self._request(
            "POST", "_bulk", data="\n".join(lines) + "\n", content_type="application/x-ndjson"
        )
        result = response.json()
        items = result.get("items", [])
        errors: list[str] = []
        for item in items:
            error = item.get("index", {}).get("error")
            if error:
                errors.append(error if isinstance(error, str) else json.dumps(error))
        self._refresh(name)

        log.info("Bulk indexed %d record(s) into %s (%d error(s))", len(items), name, len(errors))
        return BulkIndexResult(indexed=len(items) - len(errors), errors=errors)

    def _delete_by_query(self, owner: str, must: list[dict[str, Any]]) -> int:
        name = self.index_name(owner)
        response = self._request(
            "POST",
            f"{name}/_delete_by_query",
            body={"query": {"bool": {"must": must}}},
            allow_status=(404,),
        )
        if response.status_code == 404:
            return 0
        deleted = int(response.json().get("deleted", 0))
        self._refresh(name)
        return deleted

    def delete_by_file(self, owner: str, file_name: str) -> int:
        if not owner or not file_name:
            raise ValueError("owner and file_name are required")
        deleted = self._delete_by_query(
            owner, [{"term": {"userId": owner}}, {"term": {"fileName": file_name}}]
        )
        log.info("Deleted %d indexed record(s) for %s", deleted, file_name)
        return deleted

    def delete_all(self, owner: str) -> int:
        if not owner:
            raise ValueError("owner is required")
        return self._delete_by_query(owner, [{"term": {"userId": owner}}])

    def query(self, owner: str, query: NoteQuery) -> QueryResult:
        if not owner:
            raise ValueError("owner is required for searching")

        must: list[dict[str, Any]] = [{"term": {"userId": owner}}]
        if query.category:
            must.append({"term": {"category": query.category}})
        if query.file_name:
            must.append({"term": {"fileName": query.file_name}})
        if query.page is not None:
            must.append({"term": {"page": query.page}})
        if query.query and query.query != "*":
            must.append({
                "multi_match": {
                    "query": query.query,
                    "fields": ["content^2", "markdown", "category"],
                    "type": "best_fields",
                    "fuzziness": "AUTO",
                }
            })

        body = {
            "query": {"bool": {"must": must}},
            "size": query.size,
            "from": query.offset,
            "sort": [{"fileName": {"order": "asc"}}, {"page": {"order": "asc"}}],
        }
        response = self._request(
            "POST", f"{self.index_name(owner)}/_search", body=body, allow_status=(404,)
        )
        if response.status_code == 404:
            return QueryResult()

        hits = response.json().get("hits", {})
        total = hits.get("total", 0)
        if isinstance(total, dict):
            total = total.get("value", 0)
        return QueryResult(
            total=int(total or 0),
            hits=[
                QueryHit(id=h["_id"], score=h.get("_score"), source=h.get("_source", {}))
                for h in hits.get("hits", [])
            ],
        )

    def categories(self, owner: str) -> list[CategoryCount]:
        if not owner:
            raise ValueError("owner is required")
        body = {
            "query": {"term": {"userId": owner}},
            "size": 0,
            "aggs": {"categories": {"terms": {"field": "category", "size": 1000}}},
        }
        response = self._request(
            "POST", f"{self.index_name(owner)}/_search", body=body, allow_status=(404,)
        )
        if response.status_code == 404:
            return []
        buckets = response.json().get("aggregations", {}).get("categories", {}).get("buckets", [])
        return [CategoryCount(category=b["key"], count=b["doc_count"]) for b in buckets]
