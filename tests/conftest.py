"""Shared test fixtures and configuration."""

import os

import pytest

from corpus_search.adapters.corpus_repository import InMemoryCorpusRepository
from corpus_search.adapters.key_value_store import InMemoryKeyValueStore
from corpus_search.config import Settings
from corpus_search.domain.model import FactRecord, NarrationRecord, VerseRecord
from corpus_search.service_layer.preferences import SearchHistoryService
from corpus_search.service_layer.search_service import SearchService


# Environment that overrides every setting so a developer's .env never leaks in
TEST_ENV = {
    "MAX_RESULTS": "1000",
    "DEFAULT_PAGE_SIZE": "20",
    "SUGGESTION_LIMIT": "10",
    "HISTORY_LIMIT": "10",
    "LOG_LEVEL": "info",
    "LOG_JSON": "true",
    "LOGGER_LEVELS": "",
    "SERVICE_NAME": "corpus-search-test",
    "TRACING_ENABLED": "false",
}

_UNSET = ("CORPUS_DATA_DIR", "PREFERENCES_PATH")

for key, value in TEST_ENV.items():
    os.environ[key] = value
for key in _UNSET:
    os.environ.pop(key, None)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset settings-related environment variables before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    for key in _UNSET:
        monkeypatch.delenv(key, raising=False)


def make_fact(**overrides) -> FactRecord:
    payload = {"id": "f", "category": "health", "title": "Untitled", "notes": ""}
    payload.update(overrides)
    return FactRecord.model_validate(payload)


def make_verse(**overrides) -> VerseRecord:
    payload = {
        "id": "v",
        "chapter_number": 1,
        "chapter_name_en": "Al-Fatihah",
        "verse_number": 1,
        "translated_text": "",
        "place_of_revelation": "Meccan",
    }
    payload.update(overrides)
    return VerseRecord.model_validate(payload)


def make_narration(**overrides) -> NarrationRecord:
    payload = {"id": "n", "number": "1", "collection": "Sahih Bukhari", "chapter": "Revelation", "text": ""}
    payload.update(overrides)
    return NarrationRecord.model_validate(payload)


@pytest.fixture
def sample_facts() -> list[FactRecord]:
    return [
        make_fact(
            id="1",
            category="health",
            title="Honey and Healing",
            notes="Honey is a healing for people. Raw honey soothes the throat.",
            sources={"primary": "Quran 16:69", "source": "Quran"},
            status="verified",
        ),
        make_fact(
            id="2",
            category="prophecy",
            title="Victory of Rome",
            notes="The Romans will be victorious within a few years.",
            sources={"primary": "Quran 30:2-4"},
            fulfillment_status="fulfilled",
            claim_category="historical",
            year_revealed=615,
            year_fulfilled=627,
        ),
        make_fact(
            id="3",
            category="scientific",
            title="Expanding Universe",
            notes="The heaven we constructed with strength, and indeed we are its expander.",
            fulfillment_status="fulfilled",
            claim_category="cosmological",
            year_fulfilled=1929,
        ),
        make_fact(
            id="4",
            category="prophecy",
            title="Tall Buildings",
            notes="Barefoot shepherds competing in constructing tall buildings.",
            fulfillment_status="in-progress",
            claim_category="social",
            year_revealed=630,
        ),
    ]


@pytest.fixture
def sample_verses() -> list[VerseRecord]:
    return [
        make_verse(
            id="1",
            chapter_number=1,
            chapter_name_en="Al-Fatihah",
            verse_number=1,
            translated_text="In the name of Allah, the Entirely Merciful, the Especially Merciful.",
        ),
        make_verse(
            id="2",
            chapter_number=1,
            chapter_name_en="Al-Fatihah",
            verse_number=2,
            translated_text="All praise is due to Allah, Lord of the worlds.",
        ),
        make_verse(
            id="3",
            chapter_number=2,
            chapter_name_en="Al-Baqarah",
            verse_number=255,
            translated_text="There is no deity except Him, the Ever-Living, the Sustainer of existence.",
            place_of_revelation="Medinan",
        ),
        make_verse(
            id="4",
            chapter_number=7,
            chapter_name_en="Al-A'raf",
            verse_number=206,
            translated_text="Those who are near your Lord exalt Him, and to Him they prostrate.",
            prostration=True,
        ),
        make_verse(
            id="5",
            chapter_number=13,
            chapter_name_en="Ar-Ra'd",
            verse_number=15,
            translated_text="To Allah prostrates whoever is within the heavens and the earth.",
            place_of_revelation="Medinan",
            prostration=True,
        ),
        make_verse(
            id="6",
            chapter_number=16,
            chapter_name_en="An-Nahl",
            verse_number=69,
            translated_text="There emerges from their bellies a drink in which there is healing for people.",
        ),
    ]


@pytest.fixture
def sample_narrations() -> list[NarrationRecord]:
    return [
        make_narration(
            id="1",
            number="1",
            chapter="Revelation",
            narrator="Umar bin Al-Khattab",
            text="Actions are judged by intentions.",
        ),
        make_narration(
            id="2",
            number="2",
            chapter="Revelation",
            narrator="Aisha",
            text="The commencement of the Divine Inspiration was in the form of good dreams.",
        ),
        make_narration(
            id="5671",
            number="5671",
            chapter="Medicine",
            narrator="Ibn Abbas",
            text="Healing is in three things: a gulp of honey, cupping, and branding with fire.",
        ),
    ]


@pytest.fixture
def repository(sample_facts, sample_verses, sample_narrations) -> InMemoryCorpusRepository:
    return InMemoryCorpusRepository(sample_facts, sample_verses, sample_narrations)


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def preferences_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def search_service(repository, settings, preferences_store) -> SearchService:
    history = SearchHistoryService(preferences_store, limit=settings.history_limit)
    return SearchService(repository, settings=settings, history=history)


@pytest.fixture
def fact_factory():
    return make_fact


@pytest.fixture
def verse_factory():
    return make_verse


@pytest.fixture
def narration_factory():
    return make_narration
