"""Index naming, document ids and the stored document shape.

Field names follow the existing index mapping (``userId``, ``fileName``, ...)
so indices written by earlier deployments stay queryable.
"""

from __future__ import annotations

import base64
import hashlib
import re
from typing import Any

from medlists.models import Record, utcnow

MAX_DOC_ID_LENGTH = 100

INDEX_MAPPING: dict[str, Any] = {
    "mappings": {
        "properties": {
            "userId": {"type": "keyword"},
            "fileName": {"type": "keyword"},
            "page": {"type": "integer"},
            "category": {"type": "keyword"},
            "content": {"type": "text"},
            "markdown": {"type": "text"},
            "date": {"type": "keyword"},
            "location": {"type": "keyword"},
            "indexedAt": {"type": "date"},
        }
    },
    "settings": {"number_of_shards": 1, "number_of_replicas": 0},
}


def index_name(owner: str, suffix: str = "clinical-notes") -> str:
    """``"User@X"`` -> ``"user-x-clinical-notes"``."""
    safe_owner = re.sub(r"[^a-z0-9-]", "-", owner.lower())
    return f"{safe_owner}-{suffix}"


def document_id(owner: str, record: Record) -> str:
    """Deterministic id so re-indexing the same note overwrites it.

    A readable base64 prefix followed by the SHA-256 of the full identity,
    so long owners and file names never collapse two notes onto one id.
    """
    category = re.sub(r"[^a-zA-Z0-9-]", "-", record.category or "uncategorized")
    raw = f"{owner}-{record.source_file or 'unknown'}-{record.page}-{category}-{record.note_index}"
    digest = hashlib.sha256(raw.encode("utf-8")).hexdigest()
    encoded = base64.b64encode(raw.encode("utf-8")).decode("ascii")
    prefix = re.sub(r"[^a-zA-Z0-9]", "", encoded)[: MAX_DOC_ID_LENGTH - len(digest)]
    return f"{prefix}{digest}"


def to_document(owner: str, record: Record) -> dict[str, Any]:
    return {
        "userId": owner,
        "fileName": record.source_file,
        "page": record.page,
        "category": record.category,
        "content": record.raw_content,
        "markdown": record.raw_markdown,
        "date": record.date,
        "location": record.location,
        "type": record.note_type,
        "author": record.author,
        "created": record.created,
        "indexedAt": utcnow().isoformat(),
    }
