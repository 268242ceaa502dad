"""Stable ordering of merged results.

Descending order negates the ascending comparator instead of reversing the sorted
list, so records with equal keys keep their input order in both directions.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import cmp_to_key
import unicodedata

from corpus_search.domain.model import CorpusType
from corpus_search.domain.search import SortKey, SortOrder, UnifiedResult


def collation_key(text: str) -> tuple[str, str]:
    """Accent- and case-insensitive primary key with a codepoint tie-break.

    Approximates a locale-aware comparison without depending on the process locale.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(char for char in decomposed if not unicodedata.combining(char))
    return base.casefold(), text


def _cmp(left, right) -> int:
    return (left > right) - (left < right)


@dataclass(slots=True)
class _Entry:
    result: UnifiedResult
    title: tuple[str, str]
    corpus: tuple[str, str]
    source: tuple[str, str]
    number: int | None

    @classmethod
    def build(cls, result: UnifiedResult) -> "_Entry":
        number = None
        if result.corpus_type is CorpusType.NARRATION:
            number = result.original_payload.parsed_number()
        return cls(
            result=result,
            title=collation_key(result.title),
            corpus=collation_key(result.corpus_type.value),
            source=collation_key(result.source_label),
            number=number,
        )


def _by_title(a: _Entry, b: _Entry) -> int:
    return _cmp(a.title, b.title)


def _by_type(a: _Entry, b: _Entry) -> int:
    return _cmp(a.corpus, b.corpus)


def _by_source(a: _Entry, b: _Entry) -> int:
    return _cmp(a.source, b.source)


def _by_number(a: _Entry, b: _Entry) -> int:
    # Only two numeric narrations compare numerically; anything else falls back to title.
    if a.number is not None and b.number is not None:
        return _cmp(a.number, b.number)
    return _by_title(a, b)


def _by_relevance(a: _Entry, b: _Entry) -> int:
    # Higher relevance first under ascending order.
    return _cmp(b.result.relevance, a.result.relevance)


_COMPARATORS: dict[SortKey, Callable[[_Entry, _Entry], int]] = {
    SortKey.TITLE: _by_title,
    SortKey.TYPE: _by_type,
    SortKey.SOURCE: _by_source,
    SortKey.NUMBER: _by_number,
    SortKey.RELEVANCE: _by_relevance,
}


def build_comparator(sort_by: SortKey, sort_order: SortOrder) -> Callable[[_Entry, _Entry], int]:
    ascending = _COMPARATORS.get(sort_by, _by_title)
    if sort_order is SortOrder.DESC:
        return lambda a, b: -ascending(a, b)
    return ascending


def sort_results(
    results: Sequence[UnifiedResult],
    sort_by: SortKey = SortKey.TITLE,
    sort_order: SortOrder = SortOrder.ASC,
) -> list[UnifiedResult]:
    """Return ``results`` ordered by ``sort_by``; ties keep their input order."""
    entries = [_Entry.build(result) for result in results]
    comparator = build_comparator(sort_by, sort_order)
    return [entry.result for entry in sorted(entries, key=cmp_to_key(comparator))]
