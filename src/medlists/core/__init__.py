"""Configuration, exceptions, logging and startup checks."""

from __future__ import annotations

from medlists.core.config import (
    AppSettings,
    LLMConfig,
    ListsConfig,
    ObservabilityConfig,
    PersistenceConfig,
    SearchIndexConfig,
    SegmentationConfig,
)
from medlists.core.logging_config import setup_logging
from medlists.core.startup_checks import validate_settings

__all__ = [
    "AppSettings",
    "LLMConfig",
    "ListsConfig",
    "ObservabilityConfig",
    "PersistenceConfig",
    "SearchIndexConfig",
    "SegmentationConfig",
    "setup_logging",
    "validate_settings",
]
