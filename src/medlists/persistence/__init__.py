"""Pluggable persistence backends for source documents and cached lists."""

from __future__ import annotations

from medlists.persistence.file_backend import FilePersistenceBackend
from medlists.persistence.memory_backend import MemoryPersistenceBackend
from medlists.persistence.protocols import IPersistenceBackend

__all__ = ["IPersistenceBackend", "FilePersistenceBackend", "MemoryPersistenceBackend"]
