"""Domain models for search functionality.

Following Cosmic Python principles:
- Value Objects are immutable (frozen=True)
- Domain logic lives in domain layer
- No infrastructure dependencies

FilterState is deliberately forgiving: invalid bounds, unknown sort keys and legacy
field names are coerced at construction so that transient UI input never raises.
"""

from enum import Enum
import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from corpus_search.domain.model import CorpusType, SourceRecord


class SearchError(Exception):
    """Base error for the search domain."""


class CorpusUnavailableError(SearchError):
    """Raised when a corpus read fails; the whole search call is considered failed."""

    def __init__(self, corpus_type: CorpusType, message: str | None = None) -> None:
        self.corpus_type = corpus_type
        super().__init__(message or f"Corpus unavailable: {corpus_type.value}")


class SortKey(str, Enum):
    TITLE = "title"
    TYPE = "type"
    SOURCE = "source"
    NUMBER = "number"
    RELEVANCE = "relevance"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SearchOutcome(str, Enum):
    """How a search call ended; distinguishes "nothing selected" from "no matches"."""

    COMPLETE = "complete"
    NO_CORPORA_SELECTED = "no_corpora_selected"
    SUPERSEDED = "superseded"


# Legacy names used by saved presets from the original client.
_CORPUS_ALIASES = {
    "islamic data": CorpusType.FACT,
    "quran": CorpusType.VERSE,
    "hadith": CorpusType.NARRATION,
}

_SORT_KEY_ALIASES = {
    "hadithNumber": SortKey.NUMBER,
    "narration_number": SortKey.NUMBER,
}


class NumericRange(BaseModel):
    """Inclusive integer range; bounds given out of order are swapped."""

    model_config = ConfigDict(frozen=True)

    min: int
    max: int

    @model_validator(mode="before")
    @classmethod
    def _order_bounds(cls, data: Any) -> Any:
        if isinstance(data, dict):
            low, high = data.get("min"), data.get("max")
            if isinstance(low, int) and isinstance(high, int) and low > high:
                return {**data, "min": high, "max": low}
        return data

    def contains(self, value: int) -> bool:
        return self.min <= value <= self.max


DEFAULT_YEAR_RANGE = NumericRange(min=0, max=2024)
DEFAULT_VERSE_RANGE = NumericRange(min=1, max=6236)
DEFAULT_NARRATION_RANGE = NumericRange(min=1, max=13143)

_RANGE_DEFAULTS = {
    "year_range": DEFAULT_YEAR_RANGE,
    "verse_range": DEFAULT_VERSE_RANGE,
    "narration_range": DEFAULT_NARRATION_RANGE,
}

_LEGACY_FIELD_NAMES = {
    "dataSources": "corpora",
    "fulfillmentStatus": "fulfillment_statuses",
    "prophecyCategories": "claim_categories",
    "searchFields": "search_fields",
    "yearRange": "year_range",
    "quranSurahs": "verse_chapters",
    "quranVerseRange": "verse_range",
    "quranPlaceOfRevelation": "places_of_revelation",
    "quranSajdahOnly": "prostration_only",
    "hadithNumberRange": "narration_range",
    "hadithCategories": "narration_chapters",
    "sortBy": "sort_by",
    "sortOrder": "sort_order",
}


def _coerce_bound(value: Any, fallback: int) -> int:
    if isinstance(value, bool):
        return fallback
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else fallback
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return fallback
    return fallback


def _coerce_range(value: Any, default: NumericRange) -> NumericRange:
    if isinstance(value, NumericRange):
        return value
    if isinstance(value, dict):
        low, high = value.get("min"), value.get("max")
    elif isinstance(value, (list, tuple)) and len(value) == 2:
        low, high = value
    else:
        return default
    return NumericRange(min=_coerce_bound(low, default.min), max=_coerce_bound(high, default.max))


def _as_str_tuple(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (str, int)):
        value = [value]
    if not isinstance(value, (list, tuple, set, frozenset)):
        return ()
    return tuple(
        str(item.value if isinstance(item, Enum) else item) for item in value if item is not None and item != ""
    )


class FilterState(BaseModel):
    """Every narrowing criterion the user can set, across all corpora.

    Empty selections and ranges equal to their dimension default impose no
    restriction. ``corpora`` is the exception: an empty tuple selects nothing.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    corpora: tuple[CorpusType, ...] = (CorpusType.FACT, CorpusType.VERSE, CorpusType.NARRATION)

    # Fact dimensions
    types: tuple[str, ...] = ()
    statuses: tuple[str, ...] = ()
    fulfillment_statuses: tuple[str, ...] = ()
    claim_categories: tuple[str, ...] = ()
    search_fields: tuple[str, ...] = ()
    year_range: NumericRange = DEFAULT_YEAR_RANGE

    # Verse dimensions
    verse_chapters: tuple[str, ...] = ()
    verse_range: NumericRange = DEFAULT_VERSE_RANGE
    places_of_revelation: tuple[str, ...] = ()
    prostration_only: bool = False

    # Narration dimensions
    narration_range: NumericRange = DEFAULT_NARRATION_RANGE
    narration_chapters: tuple[str, ...] = ()

    sort_by: SortKey = SortKey.TITLE
    sort_order: SortOrder = SortOrder.ASC

    @model_validator(mode="before")
    @classmethod
    def _coerce_input(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = {_LEGACY_FIELD_NAMES.get(key, key): value for key, value in data.items()}
        for name, default in _RANGE_DEFAULTS.items():
            if name in data:
                data[name] = _coerce_range(data[name], default)
        return data

    @field_validator("corpora", mode="before")
    @classmethod
    def _corpora(cls, value: Any) -> tuple[CorpusType, ...]:
        selected: list[CorpusType] = []
        for item in _as_str_tuple(value):
            corpus = _CORPUS_ALIASES.get(item)
            if corpus is None:
                try:
                    corpus = CorpusType(item)
                except ValueError:
                    continue
            if corpus not in selected:
                selected.append(corpus)
        return tuple(selected)

    @field_validator(
        "types",
        "statuses",
        "fulfillment_statuses",
        "claim_categories",
        "search_fields",
        "verse_chapters",
        "places_of_revelation",
        "narration_chapters",
        mode="before",
    )
    @classmethod
    def _selection(cls, value: Any) -> tuple[str, ...]:
        return _as_str_tuple(value)

    @field_validator("prostration_only", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> bool:
        return value is True or (isinstance(value, str) and value.strip().lower() == "true")

    @field_validator("sort_by", mode="before")
    @classmethod
    def _sort_by(cls, value: Any) -> SortKey:
        if isinstance(value, SortKey):
            return value
        if isinstance(value, str):
            if value in _SORT_KEY_ALIASES:
                return _SORT_KEY_ALIASES[value]
            try:
                return SortKey(value)
            except ValueError:
                pass
        return SortKey.TITLE

    @field_validator("sort_order", mode="before")
    @classmethod
    def _sort_order(cls, value: Any) -> SortOrder:
        if isinstance(value, SortOrder):
            return value
        if isinstance(value, str) and value.lower() == SortOrder.DESC.value:
            return SortOrder.DESC
        return SortOrder.ASC

    def includes(self, corpus_type: CorpusType) -> bool:
        return corpus_type in self.corpora

    def with_updates(self, **updates: Any) -> "FilterState":
        """Return a re-validated copy; unlike ``model_copy`` this runs the coercions."""
        return FilterState.model_validate({**self.model_dump(), **updates})

    def prostration_preset(self) -> "FilterState":
        """Verse-only state showing every verse that requires prostration."""
        return self.with_updates(
            corpora=[CorpusType.VERSE],
            prostration_only=True,
            verse_chapters=[],
            verse_range=DEFAULT_VERSE_RANGE,
            places_of_revelation=[],
        )


class NormalizedRecord(BaseModel):
    """Corpus-agnostic projection of a source record, rebuilt on every search."""

    model_config = ConfigDict(frozen=True)

    id: str
    corpus_type: CorpusType
    title: str = ""
    searchable_text: str = ""
    source_label: str = ""
    original_payload: SourceRecord
    relevance: int = Field(default=100, ge=0, le=100)


class UnifiedResult(BaseModel):
    """Value object for a single ranked search result."""

    model_config = ConfigDict(frozen=True)

    id: str
    corpus_type: CorpusType
    title: str = ""
    searchable_text: str = ""
    source_label: str = ""
    original_payload: SourceRecord
    relevance: int = Field(default=100, ge=0, le=100)
    rank: int = 0

    @classmethod
    def from_record(cls, record: NormalizedRecord, relevance: int | None = None) -> "UnifiedResult":
        return cls(
            id=record.id,
            corpus_type=record.corpus_type,
            title=record.title,
            searchable_text=record.searchable_text,
            source_label=record.source_label,
            original_payload=record.original_payload,
            relevance=record.relevance if relevance is None else relevance,
        )


class CorpusCounts(BaseModel):
    model_config = ConfigDict(frozen=True)

    fact: int = 0
    verse: int = 0
    narration: int = 0

    @property
    def total(self) -> int:
        return self.fact + self.verse + self.narration


class SearchResponse(BaseModel):
    """Value object for a complete search response."""

    model_config = ConfigDict(frozen=True)

    query: str = ""
    results: list[UnifiedResult] = Field(default_factory=list)
    actual_count: int = 0
    per_corpus_counts: CorpusCounts = Field(default_factory=CorpusCounts)
    percentage_of_total: str = "0.0"
    truncated: bool = False
    outcome: SearchOutcome = SearchOutcome.COMPLETE
    generation: int = 0
    search_time: float = 0.0


class SearchPage(BaseModel):
    """One page of a search, with the pagination block the client renders."""

    model_config = ConfigDict(frozen=True)

    results: list[UnifiedResult]
    current_page: int
    total_pages: int
    total_results: int
    has_next_page: bool
    has_previous_page: bool
    outcome: SearchOutcome = SearchOutcome.COMPLETE
