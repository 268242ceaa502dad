"""Result-size governance and corpus-share statistics."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from corpus_search.domain.model import CorpusType
from corpus_search.domain.search import CorpusCounts, UnifiedResult


DEFAULT_MAX_RESULTS = 1000


@dataclass(slots=True, frozen=True)
class GovernedResults:
    """Truncated results plus the true match count they were cut from."""

    shown: list[UnifiedResult]
    actual_count: int
    truncated: bool


def finalize(sorted_results: Sequence[UnifiedResult], max_results: int = DEFAULT_MAX_RESULTS) -> GovernedResults:
    """Cap ``sorted_results`` at ``max_results`` and stamp 1-based ranks on the survivors.

    ``actual_count`` is always the pre-truncation length.
    """
    limit = max(max_results, 0)
    actual_count = len(sorted_results)
    shown = [
        result.model_copy(update={"rank": position})
        for position, result in enumerate(sorted_results[:limit], start=1)
    ]
    return GovernedResults(shown=shown, actual_count=actual_count, truncated=actual_count > limit)


def percentage_of_total(actual_count: int, total_available: int) -> str:
    """Share of the whole corpus matched, as a one-decimal string."""
    if total_available <= 0:
        return "0.0"
    return f"{actual_count / total_available * 100:.1f}"


def count_by_corpus(results: Sequence[UnifiedResult]) -> CorpusCounts:
    counts = dict.fromkeys(CorpusType, 0)
    for result in results:
        counts[result.corpus_type] += 1
    return CorpusCounts(
        fact=counts[CorpusType.FACT],
        verse=counts[CorpusType.VERSE],
        narration=counts[CorpusType.NARRATION],
    )
