"""Pydantic data models for medlists.

Records, list artifacts and source documents are persisted as JSON through
``model_dump_json`` / ``model_validate_json``; everything else is in-memory.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Document / page models ───────────────────────────────────────────


class PageContent(BaseModel):
    """A single decoded page of a source document."""

    page_number: int = Field(ge=1)
    text: str = ""
    markdown: str = ""


class PageBlock(BaseModel):
    """Length of one page as rendered into the full document markdown."""

    page_number: int = Field(ge=1)
    rendered_length: int = Field(ge=0)


class SectionSpan(BaseModel):
    """Half-open ``[start, end)`` character range of a located section."""

    start: int = Field(ge=0)
    end: int = Field(ge=0)

    @property
    def length(self) -> int:
        return self.end - self.start


class CategoryCount(BaseModel):
    """A top-level heading and how often it occurs in a document."""

    category: str
    count: int = 0


class SourceDocument(BaseModel):
    """Persisted processing results for one source file."""

    file_name: str
    total_pages: int = 0
    pages: list[PageContent] = Field(default_factory=list)
    categories: list[CategoryCount] = Field(default_factory=list)
    full_markdown: str = ""
    category_error: Optional[str] = None
    processed_at: datetime = Field(default_factory=utcnow)
    source_processed_at: datetime = Field(default_factory=utcnow)


# ── Record / list models ─────────────────────────────────────────────


class Record(BaseModel):
    """One structured entry (medication or clinical note) from a section."""

    id: str
    name: str
    value: str = ""
    date: str = ""  # raw matched text, parsed only at presentation time
    source_file: str = ""
    page: int = Field(default=1, ge=1)
    category: str = ""
    raw_content: str = ""
    raw_markdown: str = ""

    # Clinical-note fields
    note_type: str = ""
    author: str = ""
    created: str = ""
    location: str = ""
    note_index: int = 0

    @field_validator("name")
    @classmethod
    def _name_is_meaningful(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("record name must not be empty")
        if value.isdigit():
            raise ValueError("record name must not be purely numeric")
        return value


class IndexResult(BaseModel):
    """Outcome of forwarding records to the search index for one file."""

    total: int = 0
    indexed: int = 0
    errors: list[str] = Field(default_factory=list)
    deleted: int = 0


class ListArtifact(BaseModel):
    """A processed record list, cached per (owner, source file, category)."""

    category_name: str
    source_file: str
    records: list[Record] = Field(default_factory=list)
    index_result: IndexResult = Field(default_factory=IndexResult)
    processed_at: datetime = Field(default_factory=utcnow)
    source_processed_at: datetime


class ProcessCategoryResult(BaseModel):
    """What a category processing request hands back to the caller."""

    category_name: str
    records: list[Record] = Field(default_factory=list)
    index_result: IndexResult = Field(default_factory=IndexResult)
    processed_at: datetime
    from_cache: bool = False
    cache_error: Optional[str] = None


class ClearCacheResult(BaseModel):
    deleted_count: int = 0
    failed_keys: list[str] = Field(default_factory=list)


class CategoryFile(BaseModel):
    """A per-category observation summary written to the owner's folder."""

    category: str
    key: str
    observation_count: int


# ── Search index models ──────────────────────────────────────────────


class BulkIndexResult(BaseModel):
    indexed: int = 0
    errors: list[str] = Field(default_factory=list)


class NoteQuery(BaseModel):
    """Filters for a search index query. The owner is always enforced."""

    query: str = "*"
    category: Optional[str] = None
    file_name: Optional[str] = None
    page: Optional[int] = None
    size: int = 100
    offset: int = 0


class QueryHit(BaseModel):
    id: str
    score: Optional[float] = None
    source: dict[str, Any] = Field(default_factory=dict)


class QueryResult(BaseModel):
    total: int = 0
    hits: list[QueryHit] = Field(default_factory=list)
