"""Shared fixtures for medlists tests."""

from __future__ import annotations

import pytest

from medlists.core.config import AppSettings, ListsConfig
from medlists.models import PageContent
from medlists.persistence.memory_backend import MemoryPersistenceBackend
from medlists.search.memory import InMemorySearchIndex
from medlists.services.list_service import ListService
from tests.fakes.fake_search_index import RecordingSearchIndex
from tests.fakes.fake_text_generator import FakeTextGenerator

MEDICATION_PAGE = "\n".join([
    "### Medication Records",
    "",
    "Oct 27, 2025",
    "Mass General Hospital",
    "Aspirin 81 mg",
    "Take once daily",
    "",
    "Nov 3, 2025",
    "Brigham Clinic",
    "Lisinopril 10 mg tablets",
])

CLINICAL_NOTES_PAGE = "\n".join([
    "### Clinical Notes",
    "",
    "Aug 16, 2022",
    "Mass General Hospital",
    "Type: Progress Note",
    "Author: Dr. Jane Smith",
    "Created: Aug 16, 2022 at 5:00 PM",
    "Patient seen for follow-up of hypertension. Blood pressure well controlled.",
    "",
    "Created: Aug 16, 2022 at 6:15 PM",
    "Type: Telephone Encounter",
    "Author: Nurse Kim",
    "Called patient to review lab results and medication changes.",
])


@pytest.fixture
def sample_pages() -> list[PageContent]:
    """3-page portal export: allergies, medications, clinical notes."""
    markdowns = [
        "### Allergies\nPenicillin causes rash",
        MEDICATION_PAGE,
        CLINICAL_NOTES_PAGE,
    ]
    return [PageContent(page_number=i + 1, text=md, markdown=md) for i, md in enumerate(markdowns)]


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(lists=ListsConfig(extract_categories=False))


@pytest.fixture
def backend() -> MemoryPersistenceBackend:
    return MemoryPersistenceBackend()


@pytest.fixture
def search_index() -> RecordingSearchIndex:
    return RecordingSearchIndex(InMemorySearchIndex())


@pytest.fixture
def generator() -> FakeTextGenerator:
    return FakeTextGenerator("Medication Records: 1\nClinical Notes: 1\nAllergies: 1")


@pytest.fixture
def service(backend, search_index, generator, settings) -> ListService:
    return ListService(backend, search_index, generator, settings)
