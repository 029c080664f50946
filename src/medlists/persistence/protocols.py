"""Persistence backend protocol: the contract every backend implements."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class IPersistenceBackend(Protocol):
    """Key/value text store (file, S3, memory).

    Keys are ``/``-separated paths such as ``"owner/Lists/a_results.json"``
    and carry their own extension.
    """

    def save(self, key: str, data: str) -> None:
        """Save serialized data under the given key."""
        ...

    def load(self, key: str) -> str:
        """Load serialized data by key. Raises KeyError if not found."""
        ...

    def exists(self, key: str) -> bool:
        """Check if a key exists in the store."""
        ...

    def delete(self, key: str) -> None:
        """Delete data by key (no-op if not found)."""
        ...

    def list_keys(self, prefix: str = "") -> list[str]:
        """List all keys matching the optional prefix."""
        ...
