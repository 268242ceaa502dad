"""Service layer - use-case orchestration.

Following Cosmic Python Chapter 4:
- Service layer orchestrates use cases
- Works with domain model and repositories
"""

from .preferences import SearchHistoryService, SearchPreset, SearchPresetService
from .search_service import SearchService


__all__ = [
    "SearchHistoryService",
    "SearchPreset",
    "SearchPresetService",
    "SearchService",
]
