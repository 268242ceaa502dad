"""Search-bar suggestions drawn from fact titles, categories, chapter names and history."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from corpus_search.domain.model import FactRecord, VerseRecord


TITLE_PREFIX_SCORE = 100
TITLE_CONTAINS_SCORE = 50
HISTORY_SCORE = 60
CATEGORY_SCORE = 40
CHAPTER_SCORE = 40
DEFAULT_SUGGESTION_LIMIT = 10


@dataclass(slots=True, frozen=True)
class Suggestion:
    text: str
    kind: str
    source: str
    score: int


def suggest(
    query: str,
    facts: Iterable[FactRecord],
    verses: Iterable[VerseRecord] = (),
    history: Iterable[str] = (),
    limit: int = DEFAULT_SUGGESTION_LIMIT,
) -> list[Suggestion]:
    """Rank candidate completions for ``query``.

    Candidates are keyed by their text; a later source overwrites the score of an
    earlier one but keeps its position, so history entries outrank a title that
    merely contains the query. Ordering is by score, stable on first appearance.
    """
    needle = query.strip().lower()
    if not needle:
        return []

    facts = list(facts)
    candidates: dict[str, Suggestion] = {}

    for fact in facts:
        title = fact.title.lower()
        if fact.title and needle in title:
            score = TITLE_PREFIX_SCORE if title.startswith(needle) else TITLE_CONTAINS_SCORE
            candidates[fact.title] = Suggestion(fact.title, fact.category or "unknown", "title", score)

    for fact in facts:
        if fact.category and needle in fact.category.lower():
            candidates[fact.category] = Suggestion(fact.category, fact.category, "type", CATEGORY_SCORE)

    for verse in verses:
        name = verse.chapter_name_en
        if name and needle in name.lower():
            candidates[name] = Suggestion(name, "verse", "chapter", CHAPTER_SCORE)

    for entry in history:
        if entry and needle in entry.lower():
            candidates[entry] = Suggestion(entry, "history", "history", HISTORY_SCORE)

    ranked = sorted(candidates.values(), key=lambda suggestion: -suggestion.score)
    return ranked[: max(limit, 0)]
