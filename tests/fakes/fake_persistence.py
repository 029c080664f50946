"""Persistence backends with injected failures for testing."""

from __future__ import annotations

from medlists.persistence.memory_backend import MemoryPersistenceBackend


class FailingWritesBackend(MemoryPersistenceBackend):
    """Memory backend whose ``save`` fails for keys ending in ``fail_suffix``."""

    def __init__(self, fail_suffix: str = "_list.json") -> None:
        super().__init__()
        self._fail_suffix = fail_suffix
        self.failed_saves: list[str] = []

    def save(self, key: str, data: str) -> None:
        if key.endswith(self._fail_suffix):
            self.failed_saves.append(key)
            raise OSError(f"disk full while writing {key}")
        super().save(key, data)


class FailingDeletesBackend(MemoryPersistenceBackend):
    """Memory backend whose ``delete`` fails for the listed keys."""

    def __init__(self, undeletable: set[str]) -> None:
        super().__init__()
        self._undeletable = undeletable

    def delete(self, key: str) -> None:
        if key in self._undeletable:
            raise OSError(f"permission denied: {key}")
        super().delete(key)
