"""Nested pydantic-settings configuration for medlists.

Each sub-config reads its own ``MEDLISTS_<GROUP>_*`` env vars::

    export MEDLISTS_LLM_MODEL=openai/gpt-4o-mini
    export MEDLISTS_PERSISTENCE_BACKEND=s3
    export MEDLISTS_SEARCH_ENDPOINT=https://search.internal:9200
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class LLMConfig(BaseSettings):
    """Text-generation delegate used by the category extractor.

    Env vars use ``MEDLISTS_LLM_`` prefix.
    """

    model_config = {"env_prefix": "MEDLISTS_LLM_"}

    model: str = "openai/gpt-4o-mini"
    base_url: str = ""
    api_key: str = ""
    temperature: float = 0.0
    timeout: float = 120.0
    max_retries: int = 3
    retry_max_delay: float = 30.0
    retry_jitter_factor: float = 0.5


class PersistenceConfig(BaseSettings):
    """Persistence configuration.

    Env vars use ``MEDLISTS_PERSISTENCE_`` prefix.
    """

    model_config = {"env_prefix": "MEDLISTS_PERSISTENCE_"}

    backend: Literal["file", "s3", "memory"] = "file"
    store_path: Path = Path("./medlists-data")
    s3_bucket: str = ""
    s3_prefix: str = ""
    s3_region: str = "us-east-1"
    s3_endpoint_url: str = ""
    s3_kms_key_id: str = ""
    tenant_id: str = ""


class SearchIndexConfig(BaseSettings):
    """OpenSearch-compatible index holding clinical notes.

    Env vars use ``MEDLISTS_SEARCH_`` prefix.  An empty endpoint means the
    index is not configured and index-backed categories are unavailable.
    """

    model_config = {"env_prefix": "MEDLISTS_SEARCH_"}

    endpoint: str = ""
    username: str = ""
    password: str = ""
    timeout: float = 30.0
    verify_tls: bool = True
    index_suffix: str = "clinical-notes"


class SegmentationConfig(BaseSettings):
    """Heuristic thresholds for the segmentation pipeline.

    Env vars use ``MEDLISTS_SEGMENTATION_`` prefix.
    """

    model_config = {"env_prefix": "MEDLISTS_SEGMENTATION_"}

    repeat_threshold: int = Field(default=5, ge=1)
    max_lines_after_date: int = Field(default=5, ge=1)
    anchor_length: int = Field(default=50, ge=1)
    min_note_length: int = Field(default=30, ge=0)
    note_lookback_lines: int = Field(default=20, ge=1)
    letterhead_patterns: list[str] = Field(default_factory=lambda: [r"^Apple\s+Health"])


class ListsConfig(BaseSettings):
    """Per-owner list cache behaviour.

    Env vars use ``MEDLISTS_LISTS_`` prefix.
    """

    model_config = {"env_prefix": "MEDLISTS_LISTS_"}

    folder: str = "Lists"
    serialize_per_key: bool = True
    extract_categories: bool = True


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Env vars use ``MEDLISTS_OBSERVABILITY_`` prefix.
    """

    model_config = {"env_prefix": "MEDLISTS_OBSERVABILITY_"}

    log_level: str = "INFO"
    json_logs: bool | None = None


class AppSettings(BaseSettings):
    """Top-level application settings aggregating all sub-configs."""

    llm: LLMConfig = LLMConfig()
    persistence: PersistenceConfig = PersistenceConfig()
    search: SearchIndexConfig = SearchIndexConfig()
    segmentation: SegmentationConfig = SegmentationConfig()
    lists: ListsConfig = ListsConfig()
    observability: ObservabilityConfig = ObservabilityConfig()
