"""Cached record lists keyed by (owner, source file, category).

A cached list stays valid until its source document is processed again:
the list records the source's ``source_processed_at`` when it was built,
and a newer timestamp on the source makes it stale.
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from medlists.core.exceptions import PersistenceError
from medlists.models import ClearCacheResult, ListArtifact, SourceDocument
from medlists.persistence.protocols import IPersistenceBackend
from medlists.services.keys import DEFAULT_FOLDER, LIST_SUFFIX, PLACEHOLDER_SUFFIX, list_key, lists_folder

log = logging.getLogger(__name__)


class ListCache:
    def __init__(self, backend: IPersistenceBackend, folder: str = DEFAULT_FOLDER) -> None:
        self._backend = backend
        self._folder = folder

    def key(self, owner: str, file_name: str, category: str) -> str:
        return list_key(owner, file_name, category, self._folder)

    def load(self, owner: str, file_name: str, category: str) -> Optional[ListArtifact]:
        """Cached artifact, or ``None`` when absent or unreadable."""
        key = self.key(owner, file_name, category)
        try:
            raw = self._backend.load(key)
        except KeyError:
            log.debug("No cached list at %s", key)
            return None
        try:
            return ListArtifact.model_validate_json(raw)
        except ValidationError as e:
            log.warning("Ignoring unreadable cached list %s: %s", key, e)
            return None

    def save(self, owner: str, artifact: ListArtifact) -> str:
        """Write ``artifact``, overwriting any prior one. Raises ``PersistenceError``."""
        key = self.key(owner, artifact.source_file, artifact.category_name)
        try:
            self._backend.save(key, artifact.model_dump_json(indent=2))
        except Exception as e:
            raise PersistenceError(f"Failed to save {key}: {e}") from e
        log.info("Saved processed list to %s", key)
        return key

    @staticmethod
    def is_stale(artifact: ListArtifact, source: SourceDocument) -> bool:
        return source.source_processed_at > artifact.source_processed_at

    def _delete_matching(self, owner: str, predicate) -> ClearCacheResult:
        folder = lists_folder(owner, self._folder)
        try:
            keys = self._backend.list_keys(folder)
        except Exception as e:
            raise PersistenceError(f"Failed to list {folder}: {e}") from e

        result = ClearCacheResult()
        for key in keys:
            if not predicate(key):
                continue
            try:
                self._backend.delete(key)
            except Exception as e:
                log.warning("Failed to delete %s: %s", key, e)
                result.failed_keys.append(key)
                continue
            result.deleted_count += 1
            log.debug("Deleted %s", key)
        return result

    def clear(self, owner: str) -> ClearCacheResult:
        """Delete everything in the owner's folder except placeholder files."""
        result = self._delete_matching(owner, lambda key: not key.endswith(PLACEHOLDER_SUFFIX))
        log.info("Cleared %d file(s) for %s", result.deleted_count, owner)
        return result

    def clear_lists(self, owner: str) -> ClearCacheResult:
        """Delete only the cached ``*_list.json`` artifacts."""
        result = self._delete_matching(owner, lambda key: key.endswith(LIST_SUFFIX))
        log.info("Cleared %d cached list(s) for %s", result.deleted_count, owner)
        return result
