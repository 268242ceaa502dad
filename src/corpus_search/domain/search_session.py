"""Two-phase search session: pending input versus committed searches.

Keystrokes and filter edits only touch pending state. A search runs when the caller
commits, which bumps the session generation; outcomes carrying an older generation
are discarded so a slow search can never overwrite a newer one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from corpus_search.domain.search import FilterState, SearchResponse


class SearchSessionError(Exception):
    """Base error for the search session domain."""


class InvalidPhaseTransitionError(SearchSessionError):
    """Raised when invalid phase transition occurs."""


class SearchPhase(str, Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    COMPLETE = "complete"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in {SearchPhase.COMPLETE, SearchPhase.FAILED}


_ALLOWED_TRANSITIONS: dict[SearchPhase, frozenset[SearchPhase]] = {
    SearchPhase.IDLE: frozenset({SearchPhase.SEARCHING}),
    # SEARCHING -> SEARCHING is a superseding commit
    SearchPhase.SEARCHING: frozenset({SearchPhase.SEARCHING, SearchPhase.COMPLETE, SearchPhase.FAILED}),
    SearchPhase.COMPLETE: frozenset({SearchPhase.SEARCHING}),
    SearchPhase.FAILED: frozenset({SearchPhase.SEARCHING}),
}


@dataclass(slots=True, frozen=True)
class SearchRequest:
    """A committed (query, filters) pair stamped with its session generation."""

    query: str
    filters: FilterState
    generation: int


@dataclass
class SearchSession:
    """Aggregate root holding pending input and the latest applied outcome."""

    pending_query: str = ""
    pending_filters: FilterState = field(default_factory=FilterState)
    phase: SearchPhase = SearchPhase.IDLE
    generation: int = 0
    committed: SearchRequest | None = None
    response: SearchResponse | None = None
    error: Exception | None = None

    @property
    def has_searched(self) -> bool:
        return self.committed is not None

    @property
    def has_pending_changes(self) -> bool:
        if self.committed is None:
            return True
        return self.committed.query != self.pending_query or self.committed.filters != self.pending_filters

    @property
    def can_search(self) -> bool:
        """Mirrors the disabled state of the search button."""
        return bool(self.pending_filters.corpora)

    def update_query(self, query: str) -> None:
        self.pending_query = query

    def update_filters(self, filters: FilterState) -> None:
        self.pending_filters = filters

    def clear_filters(self) -> None:
        self.pending_filters = FilterState()

    def commit(self) -> SearchRequest:
        """Freeze the pending input into a request and enter SEARCHING."""
        self._transition_to(SearchPhase.SEARCHING)
        self.generation += 1
        self.error = None
        self.committed = SearchRequest(
            query=self.pending_query, filters=self.pending_filters, generation=self.generation
        )
        return self.committed

    def is_current(self, generation: int) -> bool:
        return generation == self.generation and self.phase is SearchPhase.SEARCHING

    def complete(self, generation: int, response: SearchResponse) -> bool:
        """Apply a finished search; returns False when the outcome is stale."""
        if self.phase is SearchPhase.IDLE:
            raise InvalidPhaseTransitionError("Cannot complete a search that was never committed")
        if not self.is_current(generation):
            return False
        self._transition_to(SearchPhase.COMPLETE)
        self.response = response
        return True

    def fail(self, generation: int, error: Exception) -> bool:
        if self.phase is SearchPhase.IDLE:
            raise InvalidPhaseTransitionError("Cannot fail a search that was never committed")
        if not self.is_current(generation):
            return False
        self._transition_to(SearchPhase.FAILED)
        self.error = error
        self.response = None
        return True

    def reset(self) -> None:
        """Back to IDLE with default input; in-flight outcomes become stale."""
        self.generation += 1
        self.phase = SearchPhase.IDLE
        self.pending_query = ""
        self.pending_filters = FilterState()
        self.committed = None
        self.response = None
        self.error = None

    def _transition_to(self, new_phase: SearchPhase) -> None:
        if new_phase not in _ALLOWED_TRANSITIONS[self.phase]:
            raise InvalidPhaseTransitionError(f"Cannot transition from {self.phase.value} to {new_phase.value}")
        self.phase = new_phase
