"""Unit tests for source record validation and coercion."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from corpus_search.domain.model import (
    RECORD_TYPES,
    CorpusType,
    FactCategory,
    FactRecord,
    NarrationRecord,
    VerseRecord,
)


@pytest.mark.unit
class TestFactRecord:
    def test_accepts_store_field_names(self):
        fact = FactRecord.model_validate(
            {
                "id": 7,
                "type": "prophecy",
                "title": "Victory of Rome",
                "prophecyCategory": "historical",
                "fulfillmentStatus": "fulfilled",
                "yearRevealed": "615",
                "yearFulfilled": 627,
            }
        )

        assert fact.id == "7"
        assert fact.category == FactCategory.PROPHECY.value
        assert fact.claim_category == "historical"
        assert fact.fulfillment_status == "fulfilled"
        assert fact.year_revealed == 615
        assert fact.year_fulfilled == 627
        assert fact.corpus_type is CorpusType.FACT

    def test_malformed_fields_degrade(self):
        fact = FactRecord.model_validate({"title": None, "notes": 42, "year_revealed": "soon", "status": ""})

        assert fact.title == ""
        assert fact.notes == "42"
        assert fact.year_revealed is None
        assert fact.status is None

    def test_non_finite_years_are_dropped(self):
        fact = FactRecord(year_revealed=float("nan"), year_fulfilled=float("inf"))

        assert fact.year_revealed is None
        assert fact.year_fulfilled is None

    def test_unknown_category_is_kept(self):
        fact = FactRecord.model_validate({"category": "astronomy"})

        assert fact.category == "astronomy"

    def test_bare_reference_list_becomes_citation(self):
        fact = FactRecord.model_validate({"sources": ["Bukhari 5678", "", "Muslim 2204"]})

        assert fact.sources is not None
        assert fact.sources.references == ("Bukhari 5678", "Muslim 2204")
        assert fact.sources.primary == ""

    def test_records_are_immutable(self):
        fact = FactRecord(title="Honey")

        with pytest.raises(ValidationError):
            fact.title = "Milk"  # type: ignore[misc]


@pytest.mark.unit
class TestVerseRecord:
    def test_accepts_store_field_names(self):
        verse = VerseRecord.model_validate(
            {
                "surah_no": "7",
                "surah_name_en": "Al-A'raf",
                "ayah_no_surah": 206,
                "ayah_no_quran": 1160,
                "ayah_en": "to Him they prostrate",
                "ayah_ar": "وله يسجدون",
                "sajah_ayah": True,
                "place_of_revelation": "Meccan",
            }
        )

        assert verse.chapter_number == 7
        assert verse.chapter_name_en == "Al-A'raf"
        assert verse.verse_number == 206
        assert verse.global_verse_number == 1160
        assert verse.translated_text == "to Him they prostrate"
        assert verse.arabic_text == "وله يسجدون"
        assert verse.prostration is True

    @pytest.mark.parametrize("raw", ["abc", None, [1], ""])
    def test_malformed_integers_become_zero(self, raw):
        verse = VerseRecord.model_validate({"chapter_number": raw, "verse_number": raw})

        assert verse.chapter_number == 0
        assert verse.verse_number == 0

    @pytest.mark.parametrize("raw", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_floats_become_zero(self, raw):
        verse = VerseRecord(chapter_number=raw, verse_number=raw)

        assert (verse.chapter_number, verse.verse_number) == (0, 0)

    def test_prostration_flag_from_string(self):
        assert VerseRecord.model_validate({"sajah_ayah": "True"}).prostration is True
        assert VerseRecord.model_validate({"sajah_ayah": "no"}).prostration is False


@pytest.mark.unit
class TestNarrationRecord:
    def test_accepts_store_field_names(self):
        narration = NarrationRecord.model_validate({"number": 5678, "book": "Sahih Muslim", "english": "text"})

        assert narration.number == "5678"
        assert narration.collection == "Sahih Muslim"
        assert narration.text == "text"

    @pytest.mark.parametrize(
        ("number", "expected"),
        [("12", 12), (" 42 ", 42), ("12a", 12), ("a12", None), ("", None), ("1²", 1), ("²", None)],
    )
    def test_parsed_number_reads_leading_digits(self, number, expected):
        assert NarrationRecord(number=number).parsed_number() == expected


@pytest.mark.unit
def test_record_types_cover_every_corpus():
    assert set(RECORD_TYPES) == set(CorpusType)
    for corpus_type, record_type in RECORD_TYPES.items():
        assert record_type().corpus_type is corpus_type
