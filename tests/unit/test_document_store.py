"""Tests for source document persistence and the list cache."""

from __future__ import annotations

from datetime import timedelta

import pytest

from medlists.core.exceptions import PersistenceError, SourceNotFoundError
from medlists.models import ListArtifact, Record, SourceDocument, utcnow
from medlists.persistence.memory_backend import MemoryPersistenceBackend
from medlists.services.document_store import SourceDocumentStore
from medlists.services.list_cache import ListCache
from tests.fakes.fake_persistence import FailingDeletesBackend, FailingWritesBackend


def _document(file_name: str = "visit.pdf", **kwargs) -> SourceDocument:
    return SourceDocument(file_name=file_name, full_markdown="## Page 1\n\nbody", total_pages=1, **kwargs)


def _artifact(source_processed_at, category: str = "Medication Records") -> ListArtifact:
    return ListArtifact(
        category_name=category,
        source_file="visit.pdf",
        records=[Record(id="visit.pdf-med-0-0", name="Aspirin", value="81 mg")],
        source_processed_at=source_processed_at,
    )


class TestSourceDocumentStore:
    def test_save_and_load(self):
        store = SourceDocumentStore(MemoryPersistenceBackend())
        key = store.save("alice", _document())

        assert key == "alice/Lists/visit_results.json"
        assert store.load(key).full_markdown == "## Page 1\n\nbody"

    def test_missing_source(self):
        store = SourceDocumentStore(MemoryPersistenceBackend())
        with pytest.raises(SourceNotFoundError) as exc_info:
            store.load("alice/Lists/nope_results.json")
        assert exc_info.value.key == "alice/Lists/nope_results.json"

    def test_load_owned(self):
        store = SourceDocumentStore(MemoryPersistenceBackend())
        key = store.save("alice", _document())

        assert store.load_owned("alice", key).file_name == "visit.pdf"
        assert store.load_owned("alice", "/" + key).file_name == "visit.pdf"

    @pytest.mark.parametrize(
        "owner, key",
        [
            ("bob", "alice/Lists/visit_results.json"),
            ("alice", "alice/Lists/../../bob/Lists/visit_results.json"),
            ("ali", "alice/Lists/visit_results.json"),
        ],
    )
    def test_load_owned_rejects_foreign_keys(self, owner, key):
        store = SourceDocumentStore(MemoryPersistenceBackend())
        store.save("alice", _document())
        store.save("bob", _document())

        with pytest.raises(SourceNotFoundError):
            store.load_owned(owner, key)

    def test_corrupt_source(self):
        backend = MemoryPersistenceBackend()
        backend.save("alice/Lists/bad_results.json", "{not json")
        with pytest.raises(PersistenceError):
            SourceDocumentStore(backend).load("alice/Lists/bad_results.json")

    def test_save_failure(self):
        store = SourceDocumentStore(FailingWritesBackend(fail_suffix="_results.json"))
        with pytest.raises(PersistenceError):
            store.save("alice", _document())

    def test_latest(self):
        backend = MemoryPersistenceBackend()
        store = SourceDocumentStore(backend)
        now = utcnow()
        store.save("alice", _document("old.pdf", processed_at=now - timedelta(days=1)))
        store.save("alice", _document("new.pdf", processed_at=now))
        backend.save("alice/Lists/broken_results.json", "garbage")

        key, document = store.latest("alice")
        assert key == "alice/Lists/new_results.json"
        assert document.file_name == "new.pdf"
        assert store.latest("bob") is None


class TestListCache:
    def test_save_and_load(self):
        cache = ListCache(MemoryPersistenceBackend())
        artifact = _artifact(utcnow())
        key = cache.save("alice", artifact)

        assert key == "alice/Lists/visit_medication_records_list.json"
        assert cache.load("alice", "visit.pdf", "Medication Records") == artifact

    def test_load_missing_or_corrupt(self):
        backend = MemoryPersistenceBackend()
        cache = ListCache(backend)
        assert cache.load("alice", "visit.pdf", "Clinical Notes") is None

        backend.save(cache.key("alice", "visit.pdf", "Clinical Notes"), "[]")
        assert cache.load("alice", "visit.pdf", "Clinical Notes") is None

    def test_save_failure(self):
        with pytest.raises(PersistenceError):
            ListCache(FailingWritesBackend()).save("alice", _artifact(utcnow()))

    def test_staleness(self):
        now = utcnow()
        artifact = _artifact(now)
        assert not ListCache.is_stale(artifact, _document(source_processed_at=now))
        assert ListCache.is_stale(artifact, _document(source_processed_at=now + timedelta(seconds=1)))
        assert not ListCache.is_stale(artifact, _document(source_processed_at=now - timedelta(seconds=1)))

    def test_clear_keeps_placeholders(self):
        backend = MemoryPersistenceBackend({
            "alice/Lists/.keep": "",
            "alice/Lists/a_results.json": "{}",
            "alice/Lists/a_x_list.json": "{}",
            "bob/Lists/b.json": "{}",
        })

        result = ListCache(backend).clear("alice")

        assert result.deleted_count == 2
        assert result.failed_keys == []
        assert backend.list_keys() == ["alice/Lists/.keep", "bob/Lists/b.json"]

    def test_clear_lists_only(self):
        backend = MemoryPersistenceBackend()
        for key in ("alice/Lists/a_results.json", "alice/Lists/a_x_list.json"):
            backend.save(key, "{}")

        assert ListCache(backend).clear_lists("alice").deleted_count == 1
        assert backend.list_keys() == ["alice/Lists/a_results.json"]

    def test_clear_collects_failures(self):
        backend = FailingDeletesBackend(undeletable={"alice/Lists/stuck.json"})
        backend.save("alice/Lists/stuck.json", "{}")
        backend.save("alice/Lists/ok.json", "{}")

        result = ListCache(backend).clear("alice")
        assert result.deleted_count == 1
        assert result.failed_keys == ["alice/Lists/stuck.json"]
