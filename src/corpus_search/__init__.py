"""Unified search and filtering across the fact, verse and narration corpora."""

from corpus_search.bootstrap import SearchApplication, build_application, build_search_service
from corpus_search.domain import CorpusType, FilterState, SearchOutcome, SearchResponse, SearchSession
from corpus_search.service_layer import SearchService


__version__ = "0.1.0"

__all__ = [
    "CorpusType",
    "FilterState",
    "SearchApplication",
    "SearchOutcome",
    "SearchResponse",
    "SearchService",
    "SearchSession",
    "__version__",
    "build_application",
    "build_search_service",
]
