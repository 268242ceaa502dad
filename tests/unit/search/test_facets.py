"""Unit tests for filter options and the active-filter badge count."""

from __future__ import annotations

import pytest

from corpus_search.domain.model import CorpusType
from corpus_search.domain.search import DEFAULT_NARRATION_RANGE, FilterState, NumericRange
from corpus_search.search.facets import ChapterOption, FilterOptions, active_filter_count, build_filter_options


@pytest.fixture
def options(sample_facts, sample_verses, sample_narrations) -> FilterOptions:
    return build_filter_options(sample_facts, sample_verses, sample_narrations)


@pytest.mark.unit
def test_distinct_fact_values_in_first_seen_order(options):
    assert options.fact_types == ["health", "prophecy", "scientific"]
    assert options.statuses == ["verified"]
    assert options.fulfillment_statuses == ["fulfilled", "in-progress"]
    assert options.claim_categories == ["historical", "cosmological", "social"]


@pytest.mark.unit
def test_verse_options(options):
    assert options.verse_chapters == [
        ChapterOption(number=1, name="Al-Fatihah"),
        ChapterOption(number=2, name="Al-Baqarah"),
        ChapterOption(number=7, name="Al-A'raf"),
        ChapterOption(number=13, name="Ar-Ra'd"),
        ChapterOption(number=16, name="An-Nahl"),
    ]
    assert options.places_of_revelation == ["Meccan", "Medinan"]
    assert options.verse_bounds == NumericRange(min=1, max=255)


@pytest.mark.unit
def test_narration_options(options):
    assert options.narration_chapters == ["Medicine", "Revelation"]
    assert options.narration_bounds == NumericRange(min=1, max=5671)


@pytest.mark.unit
def test_empty_corpora_fall_back_to_default_bounds():
    options = build_filter_options([], [], [])

    assert options.verse_chapters == []
    assert options.narration_bounds == DEFAULT_NARRATION_RANGE


@pytest.mark.unit
def test_active_filter_count_defaults_to_zero(options):
    assert active_filter_count(FilterState()) == 0
    assert active_filter_count(FilterState(), options) == 0


@pytest.mark.unit
def test_active_filter_count_counts_each_dimension(options):
    filters = FilterState(
        corpora=[CorpusType.FACT, CorpusType.VERSE],
        types=["health"],
        prostration_only=True,
        narration_chapters=["Medicine"],
    )

    assert active_filter_count(filters, options) == 4


@pytest.mark.unit
def test_range_counts_when_narrower_than_loaded_data(options):
    assert active_filter_count(FilterState(verse_range=NumericRange(min=1, max=255)), options) == 0
    assert active_filter_count(FilterState(verse_range=NumericRange(min=1, max=100)), options) == 1
    assert active_filter_count(FilterState(verse_range=NumericRange(min=1, max=100))) == 1
