"""Domain layer - pure business logic with no infrastructure dependencies.

Following Cosmic Python Chapter 2 (Repository Pattern) and Chapter 7 (Aggregates),
this layer contains:
- Source records: the closed union of fact, verse and narration shapes
- Value Objects: filter state, normalized records, results and responses
- Aggregates: the two-phase search session
"""

from corpus_search.domain.model import (
    Citation,
    ClaimCategory,
    CorpusType,
    FactCategory,
    FactRecord,
    FulfillmentStatus,
    NarrationRecord,
    SourceRecord,
    VerseRecord,
)
from corpus_search.domain.search import (
    CorpusCounts,
    CorpusUnavailableError,
    FilterState,
    NormalizedRecord,
    NumericRange,
    SearchError,
    SearchOutcome,
    SearchPage,
    SearchResponse,
    SortKey,
    SortOrder,
    UnifiedResult,
)
from corpus_search.domain.search_session import (
    InvalidPhaseTransitionError,
    SearchPhase,
    SearchRequest,
    SearchSession,
)


__all__ = [
    "Citation",
    "ClaimCategory",
    "CorpusCounts",
    "CorpusType",
    "CorpusUnavailableError",
    "FactCategory",
    "FactRecord",
    "FilterState",
    "FulfillmentStatus",
    "InvalidPhaseTransitionError",
    "NarrationRecord",
    "NormalizedRecord",
    "NumericRange",
    "SearchError",
    "SearchOutcome",
    "SearchPage",
    "SearchPhase",
    "SearchRequest",
    "SearchResponse",
    "SearchSession",
    "SortKey",
    "SortOrder",
    "SourceRecord",
    "UnifiedResult",
    "VerseRecord",
]
