"""Additive relevance scoring, clamped to [0, 100].

Per token: ``occurrences * len(token) * 10``, plus a flat bonus when the token
occurs anywhere in the searchable text and a larger one when it occurs in the
title. The sum is clamped, not normalized, so strong matches tie at the ceiling and
the sort stage decides their order.
"""

from __future__ import annotations

from collections.abc import Sequence

from corpus_search.domain.search import NormalizedRecord


MAX_SCORE = 100
FREQUENCY_WEIGHT = 10
SUBSTRING_BONUS = 50
TITLE_BONUS = 100


def score(record: NormalizedRecord, tokens: Sequence[str]) -> int:
    """Score ``record`` against already-lowercased ``tokens``.

    An empty token list scores every record at the ceiling.
    """
    if not tokens:
        return MAX_SCORE

    text = record.searchable_text.lower()
    title = record.title.lower()
    total = 0
    for token in tokens:
        occurrences = text.count(token)
        total += occurrences * len(token) * FREQUENCY_WEIGHT
        if occurrences:
            total += SUBSTRING_BONUS
        if token in title:
            total += TITLE_BONUS
    return min(total, MAX_SCORE)


def score_all(
    records: Sequence[NormalizedRecord], tokens: Sequence[str]
) -> list[tuple[NormalizedRecord, int]]:
    """Pair each matching record with its score, dropping zero scores when querying."""
    scored: list[tuple[NormalizedRecord, int]] = []
    for record in records:
        relevance = score(record, tokens)
        if tokens and relevance == 0:
            continue
        scored.append((record, relevance))
    return scored
