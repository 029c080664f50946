"""medlists: medication and clinical-note lists from paginated clinical records.

Typical use::

    from medlists import AppSettings, PageContent, create_list_service

    service = create_list_service(AppSettings())
    document, results_key = await service.ingest_document("owner-1", "chart.pdf", pages)
    result = await service.process_category("owner-1", results_key, "Medication Records")
"""

from __future__ import annotations

from medlists.core.config import AppSettings
from medlists.core.exceptions import (
    IndexUnavailableError,
    MedListsError,
    PersistenceError,
    SourceNotFoundError,
    UnsupportedCategoryError,
)
from medlists.factory import (
    create_list_service,
    create_persistence_backend,
    create_search_index,
    create_text_generator,
)
from medlists.models import (
    ClearCacheResult,
    IndexResult,
    ListArtifact,
    PageContent,
    ProcessCategoryResult,
    Record,
    SourceDocument,
)
from medlists.services.list_service import ListService

__all__ = [
    "AppSettings",
    "PageContent",
    "Record",
    "IndexResult",
    "ListArtifact",
    "SourceDocument",
    "ProcessCategoryResult",
    "ClearCacheResult",
    "ListService",
    "create_list_service",
    "create_persistence_backend",
    "create_search_index",
    "create_text_generator",
    "MedListsError",
    "SourceNotFoundError",
    "IndexUnavailableError",
    "UnsupportedCategoryError",
    "PersistenceError",
]
