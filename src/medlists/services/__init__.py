"""Source document storage, list caching and the list service."""

from __future__ import annotations

from medlists.services.document_store import SourceDocumentStore
from medlists.services.list_cache import ListCache
from medlists.services.list_service import ListService, category_kind

__all__ = ["SourceDocumentStore", "ListCache", "ListService", "category_kind"]
