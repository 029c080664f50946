"""Collaborator factories driven by ``AppSettings``.

Maps ``settings.persistence.backend`` and ``settings.search.endpoint`` to
concrete collaborators so the same service code runs against local files
in development and S3 + OpenSearch in production.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from medlists.core.config import AppSettings
from medlists.core.startup_checks import validate_settings
from medlists.llm.client import LLMClient
from medlists.persistence.file_backend import FilePersistenceBackend
from medlists.persistence.memory_backend import MemoryPersistenceBackend
from medlists.search.opensearch import OpenSearchIndex
from medlists.search.unavailable import UnavailableSearchIndex
from medlists.services.list_service import ListService

if TYPE_CHECKING:
    from medlists.llm.protocols import ITextGenerator
    from medlists.persistence.protocols import IPersistenceBackend
    from medlists.search.protocols import ISearchIndex


def create_persistence_backend(settings: AppSettings) -> IPersistenceBackend:
    """Instantiate the configured persistence backend.

    boto3 is imported lazily so only S3 deployments need it installed.
    """
    config = settings.persistence

    if config.backend == "file":
        return FilePersistenceBackend(config.store_path)

    if config.backend == "memory":
        return MemoryPersistenceBackend()

    if config.backend == "s3":
        from medlists.persistence.s3_backend import S3PersistenceBackend

        return S3PersistenceBackend(
            bucket=config.s3_bucket,
            prefix=config.s3_prefix,
            region=config.s3_region,
            tenant_id=config.tenant_id,
            kms_key_id=config.s3_kms_key_id,
            endpoint_url=config.s3_endpoint_url,
        )

    raise ValueError(f"Unknown persistence backend: {config.backend!r}")


def create_search_index(settings: AppSettings) -> ISearchIndex:
    """OpenSearch client, or an ``UnavailableSearchIndex`` when no endpoint is set."""
    config = settings.search
    if not config.endpoint:
        return UnavailableSearchIndex()
    return OpenSearchIndex(
        config.endpoint,
        username=config.username,
        password=config.password,
        timeout=config.timeout,
        verify_tls=config.verify_tls,
        index_suffix=config.index_suffix,
    )


def create_text_generator(settings: AppSettings) -> ITextGenerator:
    return LLMClient(settings.llm)


def create_list_service(
    settings: Optional[AppSettings] = None,
    *,
    backend: Optional[IPersistenceBackend] = None,
    search_index: Optional[ISearchIndex] = None,
    generator: Optional[ITextGenerator] = None,
) -> ListService:
    """Build a ``ListService``; explicit collaborators override the settings."""
    settings = settings or AppSettings()
    validate_settings(settings)
    return ListService(
        backend=backend or create_persistence_backend(settings),
        search_index=search_index or create_search_index(settings),
        generator=generator or create_text_generator(settings),
        settings=settings,
    )
