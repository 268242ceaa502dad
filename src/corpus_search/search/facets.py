"""Filter options derived from the loaded corpora.

Feeds the filter panel: the distinct values each selection can take, the numeric
bounds of the range sliders, and how many dimensions are currently narrowing.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from pydantic import BaseModel, ConfigDict, Field

from corpus_search.domain.model import FactRecord, NarrationRecord, VerseRecord
from corpus_search.domain.search import (
    DEFAULT_NARRATION_RANGE,
    DEFAULT_VERSE_RANGE,
    DEFAULT_YEAR_RANGE,
    FilterState,
    NumericRange,
)
from corpus_search.search.filters import is_range_active


ALL_CORPORA_COUNT = 3


class ChapterOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int
    name: str


class FilterOptions(BaseModel):
    """Distinct values and bounds available to each filter dimension."""

    model_config = ConfigDict(frozen=True)

    fact_types: list[str] = Field(default_factory=list)
    statuses: list[str] = Field(default_factory=list)
    fulfillment_statuses: list[str] = Field(default_factory=list)
    claim_categories: list[str] = Field(default_factory=list)
    verse_chapters: list[ChapterOption] = Field(default_factory=list)
    places_of_revelation: list[str] = Field(default_factory=list)
    verse_bounds: NumericRange = DEFAULT_VERSE_RANGE
    narration_chapters: list[str] = Field(default_factory=list)
    narration_bounds: NumericRange = DEFAULT_NARRATION_RANGE


def _distinct(values: Iterable[str | None]) -> list[str]:
    """First-seen order, blanks dropped."""
    return list(dict.fromkeys(value for value in values if value))


def _bounds(numbers: Sequence[int], default: NumericRange) -> NumericRange:
    if not numbers:
        return default
    return NumericRange(min=min(numbers), max=max(numbers))


def build_filter_options(
    facts: Sequence[FactRecord],
    verses: Sequence[VerseRecord],
    narrations: Sequence[NarrationRecord],
) -> FilterOptions:
    chapters: dict[int, str] = {}
    for verse in verses:
        chapters.setdefault(verse.chapter_number, verse.chapter_name_en)

    narration_numbers = [number for number in (n.parsed_number() for n in narrations) if number is not None]

    return FilterOptions(
        fact_types=_distinct(fact.category for fact in facts),
        statuses=_distinct(fact.status for fact in facts),
        fulfillment_statuses=_distinct(fact.fulfillment_status for fact in facts),
        claim_categories=_distinct(fact.claim_category for fact in facts),
        verse_chapters=[ChapterOption(number=number, name=name) for number, name in sorted(chapters.items())],
        places_of_revelation=_distinct(verse.place_of_revelation for verse in verses),
        verse_bounds=_bounds([verse.verse_number for verse in verses if verse.verse_number], DEFAULT_VERSE_RANGE),
        narration_chapters=sorted(_distinct(narration.chapter for narration in narrations)),
        narration_bounds=_bounds(narration_numbers, DEFAULT_NARRATION_RANGE),
    )


def _narrower_than(selected: NumericRange, bounds: NumericRange) -> bool:
    return selected.min > bounds.min or selected.max < bounds.max


def active_filter_count(filters: FilterState, options: FilterOptions | None = None) -> int:
    """Number of dimensions currently narrowing results, as shown on the filter badge.

    Range sliders count when they are narrower than the bounds of the loaded data,
    or than the default bounds when no options are given.
    """
    options = options or FilterOptions()
    flags = (
        bool(filters.types),
        bool(filters.statuses),
        bool(filters.search_fields),
        bool(filters.fulfillment_statuses),
        bool(filters.claim_categories),
        0 < len(filters.corpora) < ALL_CORPORA_COUNT,
        is_range_active(filters.year_range, DEFAULT_YEAR_RANGE),
        bool(filters.verse_chapters),
        _narrower_than(filters.verse_range, options.verse_bounds),
        bool(filters.places_of_revelation),
        filters.prostration_only,
        _narrower_than(filters.narration_range, options.narration_bounds),
        bool(filters.narration_chapters),
    )
    return sum(flags)
