"""Multi-dimensional filtering of normalized records.

Every predicate is defined for exactly one corpus and lets records of the other
corpora through untouched. All predicates are AND'd; an empty selection or a range
equal to its dimension default imposes no restriction. Applying the same filter
state twice is a no-op on the second pass.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
import logging

from corpus_search.domain.model import CorpusType, FactRecord, NarrationRecord, VerseRecord
from corpus_search.domain.search import (
    DEFAULT_NARRATION_RANGE,
    DEFAULT_VERSE_RANGE,
    DEFAULT_YEAR_RANGE,
    FilterState,
    NormalizedRecord,
    NumericRange,
)


logger = logging.getLogger(__name__)


def is_range_active(selected: NumericRange, default: NumericRange) -> bool:
    return selected != default


def _in_selection(value: str | None, selection: Sequence[str]) -> bool:
    if not selection:
        return True
    return bool(value) and value in selection


def fact_passes(record: FactRecord, filters: FilterState) -> bool:
    if not _in_selection(record.category, filters.types):
        return False
    if not _in_selection(record.status, filters.statuses):
        return False
    if not _in_selection(record.fulfillment_status, filters.fulfillment_statuses):
        return False
    if not _in_selection(record.claim_category, filters.claim_categories):
        return False
    if is_range_active(filters.year_range, DEFAULT_YEAR_RANGE):
        # A missing year counts as 0; either year landing in range is enough.
        revealed = record.year_revealed or 0
        fulfilled = record.year_fulfilled or 0
        if not (filters.year_range.contains(revealed) or filters.year_range.contains(fulfilled)):
            return False
    return True


def verse_passes(record: VerseRecord, filters: FilterState) -> bool:
    if filters.verse_chapters and str(record.chapter_number) not in filters.verse_chapters:
        return False
    if is_range_active(filters.verse_range, DEFAULT_VERSE_RANGE) and not filters.verse_range.contains(
        record.verse_number
    ):
        return False
    if not _in_selection(record.place_of_revelation, filters.places_of_revelation):
        return False
    if filters.prostration_only and not record.prostration:
        return False
    return True


def narration_passes(record: NarrationRecord, filters: FilterState) -> bool:
    if is_range_active(filters.narration_range, DEFAULT_NARRATION_RANGE):
        number = record.parsed_number()
        if number is None or not filters.narration_range.contains(number):
            return False
    if not _in_selection(record.chapter, filters.narration_chapters):
        return False
    return True


_PREDICATES: dict[CorpusType, Callable] = {
    CorpusType.FACT: fact_passes,
    CorpusType.VERSE: verse_passes,
    CorpusType.NARRATION: narration_passes,
}


def record_passes(record: NormalizedRecord, filters: FilterState) -> bool:
    if not filters.includes(record.corpus_type):
        return False
    return _PREDICATES[record.corpus_type](record.original_payload, filters)


def apply_filters(candidates: Iterable[NormalizedRecord], filters: FilterState) -> list[NormalizedRecord]:
    """Keep the candidates that satisfy every predicate defined for their corpus."""
    return [record for record in candidates if record_passes(record, filters)]


# Field names accepted in FilterState.search_fields, mapped to fact accessors.
SEARCH_FIELD_ACCESSORS: dict[str, Callable[[FactRecord], str | None]] = {
    "title": lambda fact: fact.title,
    "description": lambda fact: fact.notes,
    "notes": lambda fact: fact.notes,
    "source": lambda fact: fact.sources.source if fact.sources else None,
    "category": lambda fact: fact.category,
    "type": lambda fact: fact.category,
    "status": lambda fact: fact.status,
    "fulfillmentStatus": lambda fact: fact.fulfillment_status,
    "fulfillment_status": lambda fact: fact.fulfillment_status,
    "prophecyCategory": lambda fact: fact.claim_category,
    "claim_category": lambda fact: fact.claim_category,
}


def matches_search_fields(record: NormalizedRecord, tokens: Sequence[str], fields: Sequence[str]) -> bool:
    """Restrict query matching on facts to the selected fields.

    Passes when no query or no field selection is present, and for non-fact records.
    """
    if not tokens or not fields or record.corpus_type is not CorpusType.FACT:
        return True
    fact = record.original_payload
    accessors = [SEARCH_FIELD_ACCESSORS[name] for name in fields if name in SEARCH_FIELD_ACCESSORS]
    if not accessors:
        logger.debug("Ignoring unknown search fields: %s", ", ".join(fields))
        return True
    values = [(accessor(fact) or "").lower() for accessor in accessors]
    return any(token in value for token in tokens for value in values)


def has_active_filters(filters: FilterState) -> bool:
    """True when any dimension narrows the result set beyond corpus selection."""
    return any(
        (
            filters.types,
            filters.statuses,
            filters.fulfillment_statuses,
            filters.claim_categories,
            is_range_active(filters.year_range, DEFAULT_YEAR_RANGE),
            filters.verse_chapters,
            is_range_active(filters.verse_range, DEFAULT_VERSE_RANGE),
            filters.places_of_revelation,
            filters.prostration_only,
            is_range_active(filters.narration_range, DEFAULT_NARRATION_RANGE),
            filters.narration_chapters,
        )
    )
