"""Startup validation: fail-fast on critical misconfigurations."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from medlists.core.config import AppSettings

log = logging.getLogger(__name__)


def validate_settings(settings: AppSettings) -> None:
    """Validate application settings. Raises ValueError on fatal misconfig."""
    _check_persistence(settings)
    _check_search(settings)


def _check_persistence(settings: AppSettings) -> None:
    if settings.persistence.backend == "s3" and not settings.persistence.s3_bucket:
        raise ValueError(
            "MEDLISTS_PERSISTENCE_BACKEND=s3 requires MEDLISTS_PERSISTENCE_S3_BUCKET."
        )

    is_container = bool(
        os.environ.get("ECS_CONTAINER_METADATA_URI")
        or os.environ.get("KUBERNETES_SERVICE_HOST")
    )
    if is_container and settings.persistence.backend == "file":
        log.warning(
            "MEDLISTS_PERSISTENCE_BACKEND=file in a container environment. "
            "Cached lists will be lost on container restart."
        )


def _check_search(settings: AppSettings) -> None:
    if not settings.search.endpoint:
        log.warning(
            "MEDLISTS_SEARCH_ENDPOINT is not set; clinical notes processing is unavailable."
        )
    elif bool(settings.search.username) != bool(settings.search.password):
        raise ValueError(
            "MEDLISTS_SEARCH_USERNAME and MEDLISTS_SEARCH_PASSWORD must be set together."
        )
