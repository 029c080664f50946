"""List service: ingest source documents and serve per-category record lists.

Flow for one category request::

    results file ──▶ cached list fresh? ──yes──▶ return cached (from_cache)
                              │no
                              ▼
                     segment records ──▶ (clinical notes) delete + bulk index
                              │
                              ▼
                     write list artifact (best effort) ──▶ return
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import weakref
from enum import Enum
from typing import Optional, Sequence

from structlog.contextvars import bound_contextvars

from medlists.categories.extractor import CategoryExtractor
from medlists.core.config import AppSettings
from medlists.core.exceptions import PersistenceError, UnsupportedCategoryError
from medlists.llm.protocols import ITextGenerator
from medlists.models import (
    CategoryCount,
    CategoryFile,
    ClearCacheResult,
    IndexResult,
    ListArtifact,
    NoteQuery,
    PageContent,
    ProcessCategoryResult,
    QueryResult,
    Record,
    SourceDocument,
    utcnow,
)
from medlists.persistence.protocols import IPersistenceBackend
from medlists.search.protocols import ISearchIndex
from medlists.segmentation.clinical_notes import extract_clinical_notes
from medlists.segmentation.medications import extract_medication_records
from medlists.segmentation.observations import build_category_files
from medlists.segmentation.pages import build_page_blocks, render_full_markdown
from medlists.services.document_store import SourceDocumentStore
from medlists.services.keys import lists_folder
from medlists.services.list_cache import ListCache

log = logging.getLogger(__name__)

NO_NOTES_EXTRACTED = "No individual notes could be extracted from Clinical Notes section"


class CategoryKind(str, Enum):
    MEDICATIONS = "medications"
    CLINICAL_NOTES = "clinical_notes"


def category_kind(category_name: str) -> CategoryKind:
    """Map a user-facing category name to the segmenter that handles it."""
    lowered = category_name.lower()
    if "clinical notes" in lowered:
        return CategoryKind.CLINICAL_NOTES
    if "medication" in lowered:
        return CategoryKind.MEDICATIONS
    raise UnsupportedCategoryError(
        f"Only Clinical Notes and Medication Records categories are supported, got {category_name!r}"
    )


class ListService:
    """Owner-scoped ingestion, list caching and record indexing."""

    def __init__(
        self,
        backend: IPersistenceBackend,
        search_index: ISearchIndex,
        generator: Optional[ITextGenerator] = None,
        settings: Optional[AppSettings] = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._backend = backend
        self._documents = SourceDocumentStore(backend, self._settings.lists.folder)
        self._cache = ListCache(backend, self._settings.lists.folder)
        self._search = search_index
        self._extractor = (
            CategoryExtractor(generator, timeout=self._settings.llm.timeout)
            if generator is not None
            else None
        )
        self._locks: weakref.WeakValueDictionary[tuple[str, str, str], asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    @property
    def documents(self) -> SourceDocumentStore:
        return self._documents

    @property
    def cache(self) -> ListCache:
        return self._cache

    # ── Ingestion ────────────────────────────────────────────────────

    async def ingest_document(
        self,
        owner: str,
        file_name: str,
        pages: Sequence[PageContent],
        *,
        extract_categories: Optional[bool] = None,
    ) -> tuple[SourceDocument, Optional[str]]:
        """Render ``pages``, optionally extract categories, and persist the results.

        The owner's folder is emptied first so stale lists and results never
        outlive a new upload.  Returns the document and its results key; the
        key is ``None`` when the results could not be written.
        """
        if extract_categories is None:
            extract_categories = self._settings.lists.extract_categories

        with bound_contextvars(owner=owner, source_file=file_name):
            full_markdown = render_full_markdown(pages)

            categories: list[CategoryCount] = []
            category_error: Optional[str] = None
            if extract_categories:
                if self._extractor is None:
                    log.info("Category extraction requested but no text generator is configured")
                else:
                    extraction = await self._extractor.extract(full_markdown)
                    categories, category_error = extraction.categories, extraction.error

            try:
                self._cache.clear(owner)
            except PersistenceError as e:
                log.warning("Failed to clear folder before processing: %s", e)

            now = utcnow()
            document = SourceDocument(
                file_name=file_name,
                total_pages=len(pages),
                pages=list(pages),
                categories=categories,
                full_markdown=full_markdown,
                category_error=category_error,
                processed_at=now,
                source_processed_at=now,
            )

            try:
                key: Optional[str] = self._documents.save(owner, document)
            except PersistenceError as e:
                log.error("Failed to save processing results: %s", e)
                key = None

        return document, key

    async def reprocess_document(
        self,
        owner: str,
        results_key: str,
        pages: Sequence[PageContent],
        *,
        extract_categories: Optional[bool] = None,
    ) -> tuple[SourceDocument, Optional[str]]:
        """Re-ingest a known source; cached lists for the owner are dropped first."""
        previous = self._documents.load_owned(owner, results_key)
        try:
            self._cache.clear_lists(owner)
        except PersistenceError as e:
            log.warning("Failed to clear cached lists during re-process: %s", e)
        return await self.ingest_document(
            owner, previous.file_name, pages, extract_categories=extract_categories
        )

    def latest_results(self, owner: str) -> Optional[tuple[str, SourceDocument]]:
        return self._documents.latest(owner)

    # ── Category processing ──────────────────────────────────────────

    def _lock_for(self, owner: str, file_name: str, category_name: str):
        if not self._settings.lists.serialize_per_key:
            return contextlib.nullcontext()
        key = (owner, file_name, category_name.lower())
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    async def process_category(
        self, owner: str, results_key: str, category_name: str
    ) -> ProcessCategoryResult:
        """Return the record list for one category, recomputing it only when stale.

        Raises:
            UnsupportedCategoryError: no segmenter handles ``category_name``.
            SourceNotFoundError: ``results_key`` does not exist or is not in
                ``owner``'s folder.
            IndexUnavailableError: clinical notes requested without a search index.
        """
        kind = category_kind(category_name)
        source = self._documents.load_owned(owner, results_key)

        with bound_contextvars(owner=owner, source_file=source.file_name, category=category_name):
            async with self._lock_for(owner, source.file_name, category_name):
                cached = self._cache.load(owner, source.file_name, category_name)
                if cached is not None and not self._cache.is_stale(cached, source):
                    log.info("Returning cached list for %s", category_name)
                    return ProcessCategoryResult(
                        category_name=category_name,
                        records=cached.records,
                        index_result=cached.index_result,
                        processed_at=cached.processed_at,
                        from_cache=True,
                    )

                log.info("Processing %s category on demand", category_name)
                if kind is CategoryKind.CLINICAL_NOTES:
                    records, index_result = self._process_clinical_notes(owner, source)
                else:
                    records, index_result = self._process_medications(source)

                artifact = ListArtifact(
                    category_name=category_name,
                    source_file=source.file_name,
                    records=records,
                    index_result=index_result,
                    processed_at=utcnow(),
                    source_processed_at=source.source_processed_at,
                )
                cache_error: Optional[str] = None
                try:
                    self._cache.save(owner, artifact)
                except PersistenceError as e:
                    log.warning("Cache write failed, returning uncached list: %s", e)
                    cache_error = str(e)

                return ProcessCategoryResult(
                    category_name=category_name,
                    records=artifact.records,
                    index_result=artifact.index_result,
                    processed_at=artifact.processed_at,
                    from_cache=False,
                    cache_error=cache_error,
                )

    def _markdown_and_blocks(self, source: SourceDocument):
        full_markdown = source.full_markdown or render_full_markdown(source.pages)
        return full_markdown, build_page_blocks(source.pages)

    def _process_medications(self, source: SourceDocument) -> tuple[list[Record], IndexResult]:
        full_markdown, blocks = self._markdown_and_blocks(source)
        records = extract_medication_records(
            full_markdown, blocks, source.file_name, self._settings.segmentation
        )
        # Medication lists are not forwarded to the search index.
        return records, IndexResult(total=len(records), indexed=len(records))

    def _process_clinical_notes(
        self, owner: str, source: SourceDocument
    ) -> tuple[list[Record], IndexResult]:
        deleted = self._search.delete_by_file(owner, source.file_name)

        full_markdown, blocks = self._markdown_and_blocks(source)
        records = extract_clinical_notes(
            full_markdown, blocks, source.file_name, self._settings.segmentation
        )
        if not records:
            log.warning(NO_NOTES_EXTRACTED)
            return records, IndexResult(errors=[NO_NOTES_EXTRACTED], deleted=deleted)

        bulk = self._search.bulk_index(owner, records)
        return records, IndexResult(
            total=len(records), indexed=bulk.indexed, errors=bulk.errors, deleted=deleted
        )

    # ── Folder maintenance ───────────────────────────────────────────

    def clear_cache(self, owner: str) -> ClearCacheResult:
        """Remove every artifact and intermediate file in the owner's folder."""
        with bound_contextvars(owner=owner):
            return self._cache.clear(owner)

    def save_category_files(self, owner: str, results_key: str) -> list[CategoryFile]:
        """Write one ``<category>.md`` observation summary per document category."""
        source = self._documents.load_owned(owner, results_key)
        folder = lists_folder(owner, self._settings.lists.folder)

        saved: list[CategoryFile] = []
        for summary in build_category_files(source.full_markdown):
            key = f"{folder}{summary.file_name}"
            try:
                self._backend.delete(key)
                self._backend.save(key, summary.render())
            except Exception as e:
                raise PersistenceError(f"Failed to save {key}: {e}") from e
            saved.append(
                CategoryFile(
                    category=summary.category,
                    key=key,
                    observation_count=len(summary.observations),
                )
            )
        log.info("Saved %d category file(s) for %s", len(saved), source.file_name)
        return saved

    # ── Index queries ────────────────────────────────────────────────

    def search_notes(self, owner: str, query: Optional[NoteQuery] = None) -> QueryResult:
        return self._search.query(owner, query or NoteQuery())

    def note_categories(self, owner: str) -> list[CategoryCount]:
        return self._search.categories(owner)
