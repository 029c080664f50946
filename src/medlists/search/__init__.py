"""Search index collaborators for clinical-note records."""

from __future__ import annotations

from medlists.search.memory import InMemorySearchIndex
from medlists.search.opensearch import OpenSearchIndex
from medlists.search.protocols import ISearchIndex
from medlists.search.unavailable import UnavailableSearchIndex

__all__ = ["ISearchIndex", "OpenSearchIndex", "InMemorySearchIndex", "UnavailableSearchIndex"]
