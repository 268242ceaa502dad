"""Wire settings, storage adapters, observability and services together."""

from dataclasses import dataclass
import logging

from corpus_search.adapters.corpus_repository import (
    AbstractCorpusRepository,
    InMemoryCorpusRepository,
    JsonCorpusRepository,
)
from corpus_search.adapters.key_value_store import (
    AbstractKeyValueStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
)
from corpus_search.config import Settings
from corpus_search.observability.logging import configure_logging
from corpus_search.observability.metrics import init_metrics
from corpus_search.observability.tracing import init_tracing
from corpus_search.service_layer.preferences import SearchHistoryService, SearchPresetService
from corpus_search.service_layer.search_service import SearchService


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SearchApplication:
    settings: Settings
    search: SearchService
    presets: SearchPresetService
    history: SearchHistoryService


def build_corpus_repository(settings: Settings) -> AbstractCorpusRepository:
    if settings.corpus_data_dir is None:
        logger.warning("CORPUS_DATA_DIR is not set; searching empty in-memory corpora")
        return InMemoryCorpusRepository()
    return JsonCorpusRepository(settings.corpus_data_dir)


def build_preferences_store(settings: Settings) -> AbstractKeyValueStore:
    if settings.preferences_path is None:
        return InMemoryKeyValueStore()
    return JsonFileKeyValueStore(settings.preferences_path)


def build_application(
    settings: Settings | None = None,
    *,
    corpus_repository: AbstractCorpusRepository | None = None,
    preferences_store: AbstractKeyValueStore | None = None,
    configure_observability: bool = True,
) -> SearchApplication:
    """Assemble the search service and its preference services.

    Args:
        settings: Configuration; loaded from the environment when omitted
        corpus_repository: Overrides the repository derived from ``corpus_data_dir``
        preferences_store: Overrides the store derived from ``preferences_path``
        configure_observability: Configure logging, metrics and tracing from settings
    """
    settings = settings or Settings()
    if configure_observability:
        configure_logging(settings.log_level, settings.log_json, logger_levels=settings.get_logger_levels())
        init_metrics(service_name=settings.service_name)
        if settings.tracing_enabled:
            init_tracing(service_name=settings.service_name)

    store = preferences_store or build_preferences_store(settings)
    history = SearchHistoryService(store, limit=settings.history_limit)
    search = SearchService(
        corpus_repository or build_corpus_repository(settings),
        settings=settings,
        history=history,
    )
    return SearchApplication(
        settings=settings,
        search=search,
        presets=SearchPresetService(store),
        history=history,
    )


def build_search_service(settings: Settings | None = None) -> SearchService:
    return build_application(settings).search
