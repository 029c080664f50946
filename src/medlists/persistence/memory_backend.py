"""In-memory persistence backend for tests and single-process use."""

from __future__ import annotations

import logging
from typing import Mapping, Optional

log = logging.getLogger(__name__)


class MemoryPersistenceBackend:
    """Dict-backed store whose keys normalize the same way file paths do.

    ``"/alice/Lists/a.json"`` and ``"alice\\Lists\\a.json"`` address the
    same entry as ``"alice/Lists/a.json"``, matching ``FilePersistenceBackend``.
    """

    def __init__(self, initial: Optional[Mapping[str, str]] = None) -> None:
        self._store: dict[str, str] = {}
        for key, data in (initial or {}).items():
            self.save(key, data)

    @staticmethod
    def _normalize(key: str) -> str:
        normalized = key.replace("\\", "/").lstrip("/")
        if not normalized:
            raise ValueError(f"Invalid key: {key!r}")
        return normalized

    def __len__(self) -> int:
        return len(self._store)

    def save(self, key: str, data: str) -> None:
        self._store[self._normalize(key)] = data
        log.debug("Saved %s to memory store", key)

    def load(self, key: str) -> str:
        try:
            return self._store[self._normalize(key)]
        except KeyError:
            raise KeyError(f"Not found in memory store: {key}") from None

    def exists(self, key: str) -> bool:
        return self._normalize(key) in self._store

    def delete(self, key: str) -> None:
        self._store.pop(self._normalize(key), None)

    def list_keys(self, prefix: str = "") -> list[str]:
        prefix = prefix.replace("\\", "/").lstrip("/")
        return sorted(k for k in self._store if k.startswith(prefix))
