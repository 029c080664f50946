"""File-based persistence backend: one file per key under a base directory."""

from __future__ import annotations

import logging
from pathlib import Path

log = logging.getLogger(__name__)


class FilePersistenceBackend:
    """Stores each key as a file; ``/`` in a key becomes a subdirectory."""

    def __init__(self, base_path: Path) -> None:
        self._base = Path(base_path).resolve()
        self._base.mkdir(parents=True, exist_ok=True)

    def _key_path(self, key: str) -> Path:
        path = (self._base / key.replace("\\", "/").lstrip("/")).resolve()
        if path == self._base or self._base not in path.parents:
            raise ValueError(f"Key escapes the store directory: {key!r}")
        return path

    def save(self, key: str, data: str) -> None:
        path = self._key_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(data, encoding="utf-8")
        log.debug("Saved %s to %s", key, path)

    def load(self, key: str) -> str:
        path = self._key_path(key)
        if not path.is_file():
            raise KeyError(f"Not found: {key} (path: {path})")
        return path.read_text(encoding="utf-8")

    def exists(self, key: str) -> bool:
        return self._key_path(key).is_file()

    def delete(self, key: str) -> None:
        path = self._key_path(key)
        if path.is_file():
            path.unlink()

    def list_keys(self, prefix: str = "") -> list[str]:
        keys = []
        for path in self._base.rglob("*"):
            if not path.is_file():
                continue
            key = path.relative_to(self._base).as_posix()
            if key.startswith(prefix):
                keys.append(key)
        return sorted(keys)
