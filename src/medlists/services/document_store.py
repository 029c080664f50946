"""Persisted processing results (``*_results.json``) for source documents."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from medlists.core.exceptions import PersistenceError, SourceNotFoundError
from medlists.models import SourceDocument
from medlists.persistence.protocols import IPersistenceBackend
from medlists.services.keys import DEFAULT_FOLDER, RESULTS_SUFFIX, lists_folder, results_key

log = logging.getLogger(__name__)


class SourceDocumentStore:
    """Save and load ``SourceDocument`` JSON through a persistence backend."""

    def __init__(self, backend: IPersistenceBackend, folder: str = DEFAULT_FOLDER) -> None:
        self._backend = backend
        self._folder = folder

    def results_key(self, owner: str, file_name: str) -> str:
        return results_key(owner, file_name, self._folder)

    def save(self, owner: str, document: SourceDocument) -> str:
        """Persist ``document``, returning its key. Raises ``PersistenceError``."""
        key = self.results_key(owner, document.file_name)
        try:
            self._backend.save(key, document.model_dump_json(indent=2))
        except Exception as e:
            raise PersistenceError(f"Failed to save {key}: {e}") from e
        log.info("Saved processing results to %s", key)
        return key

    def load(self, key: str) -> SourceDocument:
        try:
            raw = self._backend.load(key)
        except KeyError:
            raise SourceNotFoundError(key) from None
        try:
            return SourceDocument.model_validate_json(raw)
        except ValidationError as e:
            raise PersistenceError(f"Corrupt processing results at {key}: {e}") from e

    def load_owned(self, owner: str, key: str) -> SourceDocument:
        """Load ``key`` only if it lies in ``owner``'s folder.

        A key outside the folder is reported as missing.
        """
        normalized = key.replace("\\", "/").lstrip("/")
        if not normalized.startswith(lists_folder(owner, self._folder)) or ".." in normalized.split("/"):
            log.warning("Rejected results key %s outside the folder of %s", key, owner)
            raise SourceNotFoundError(key)
        return self.load(normalized)

    def latest(self, owner: str) -> Optional[tuple[str, SourceDocument]]:
        """Most recently processed results file of ``owner``, if any."""
        newest: Optional[tuple[str, SourceDocument]] = None
        for key in self._backend.list_keys(lists_folder(owner, self._folder)):
            if not key.endswith(RESULTS_SUFFIX):
                continue
            try:
                document = self.load(key)
            except (SourceNotFoundError, PersistenceError) as e:
                log.warning("Skipping unreadable results file %s: %s", key, e)
                continue
            if newest is None or document.processed_at > newest[1].processed_at:
                newest = (key, document)
        return newest
