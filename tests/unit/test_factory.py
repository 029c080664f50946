"""Tests for collaborator factories."""

from __future__ import annotations

import pytest

from medlists.core.config import AppSettings, PersistenceConfig, SearchIndexConfig
from medlists.factory import (
    create_list_service,
    create_persistence_backend,
    create_search_index,
    create_text_generator,
)
from medlists.llm.client import LLMClient
from medlists.persistence.file_backend import FilePersistenceBackend
from medlists.persistence.memory_backend import MemoryPersistenceBackend
from medlists.search.opensearch import OpenSearchIndex
from medlists.search.unavailable import UnavailableSearchIndex
from medlists.services.list_service import ListService
from tests.fakes.fake_text_generator import FakeTextGenerator


class TestCreatePersistenceBackend:
    def test_file(self, tmp_path):
        settings = AppSettings(persistence=PersistenceConfig(backend="file", store_path=tmp_path))
        assert isinstance(create_persistence_backend(settings), FilePersistenceBackend)

    def test_memory(self):
        settings = AppSettings(persistence=PersistenceConfig(backend="memory"))
        assert isinstance(create_persistence_backend(settings), MemoryPersistenceBackend)

    def test_s3(self):
        pytest.importorskip("boto3")
        from medlists.persistence.s3_backend import S3PersistenceBackend

        settings = AppSettings(persistence=PersistenceConfig(
            backend="s3", s3_bucket="records", s3_prefix="lists/", tenant_id="acme",
        ))
        backend = create_persistence_backend(settings)
        assert isinstance(backend, S3PersistenceBackend)
        assert backend._full_key("a.json") == "acme/lists/a.json"


class TestCreateSearchIndex:
    def test_without_endpoint(self):
        assert isinstance(create_search_index(AppSettings()), UnavailableSearchIndex)

    def test_with_endpoint(self):
        settings = AppSettings(search=SearchIndexConfig(endpoint="http://search:9200/"))
        index = create_search_index(settings)
        assert isinstance(index, OpenSearchIndex)
        assert index.index_name("alice") == "alice-clinical-notes"


def test_create_text_generator():
    generator = create_text_generator(AppSettings())
    assert isinstance(generator, LLMClient)
    assert generator.model == AppSettings().llm.model


class TestCreateListService:
    def test_explicit_collaborators(self):
        settings = AppSettings(persistence=PersistenceConfig(backend="memory"))
        service = create_list_service(settings, generator=FakeTextGenerator())
        assert isinstance(service, ListService)

    def test_validates_settings(self):
        settings = AppSettings(persistence=PersistenceConfig(backend="s3"))
        with pytest.raises(ValueError):
            create_list_service(settings)
