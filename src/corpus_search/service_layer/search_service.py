"""Search orchestration layer.

Reads the selected corpora through the repository, then runs the synchronous
pipeline: normalize, filter, tokenize, score, merge, sort, truncate. The only
await points are the corpus reads, so a call that was overtaken by a newer one
while waiting is detected right after them and abandoned.
"""

from collections.abc import Sequence
import logging
import math
import time
from typing import Any

from corpus_search.adapters.corpus_repository import AbstractCorpusRepository
from corpus_search.config import Settings
from corpus_search.domain.model import CorpusType
from corpus_search.domain.search import (
    CorpusUnavailableError,
    FilterState,
    SearchOutcome,
    SearchPage,
    SearchResponse,
    UnifiedResult,
)
from corpus_search.domain.search_session import SearchSession
from corpus_search.observability.metrics import (
    CORPUS_READ_ERRORS,
    CORPUS_SIZE,
    SEARCH_COUNT,
    SEARCH_LATENCY,
    SEARCH_RESULTS,
    track_latency,
)
from corpus_search.observability.tracing import create_span
from corpus_search.search.facets import FilterOptions, build_filter_options
from corpus_search.search.filters import apply_filters, matches_search_fields
from corpus_search.search.governor import count_by_corpus, finalize, percentage_of_total
from corpus_search.search.normalizer import normalize_all
from corpus_search.search.scoring import score_all
from corpus_search.search.sorting import sort_results
from corpus_search.search.suggestions import Suggestion, suggest
from corpus_search.search.tokenizer import tokenize
from corpus_search.service_layer.preferences import SearchHistoryService


logger = logging.getLogger(__name__)


class SearchService:
    """High-level search orchestration service.

    Holds no per-search state besides the generation counter used to let the
    latest call win.
    """

    def __init__(
        self,
        corpus_repository: AbstractCorpusRepository,
        settings: Settings | None = None,
        history: SearchHistoryService | None = None,
    ):
        """Initialize search service with dependencies.

        Args:
            corpus_repository: Read interface over the three corpora (required)
            settings: Engine limits; defaults are loaded from the environment
            history: When given, completed searches with a query are recorded
        """
        self.corpus_repository = corpus_repository
        self.settings = settings or Settings()
        self.history = history
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    async def search(
        self,
        query: str,
        filters: FilterState | None = None,
        *,
        max_results: int | None = None,
    ) -> SearchResponse:
        """Run one unified search.

        Args:
            query: Free-text query; blank matches every record that passes the filters
            filters: Filter state; defaults select all corpora with no restriction
            max_results: Cap on returned results, ``Settings.max_results`` by default

        Returns:
            SearchResponse whose ``outcome`` tells a finished search apart from an
            empty corpus selection or a call superseded by a newer one

        Raises:
            CorpusUnavailableError: if reading a corpus fails
        """
        filters = filters or FilterState()
        limit = self.settings.max_results if max_results is None else max_results
        self._generation += 1
        generation = self._generation
        started = time.perf_counter()

        if not filters.corpora:
            logger.debug("Search %d skipped: no corpora selected", generation)
            SEARCH_COUNT.labels(outcome=SearchOutcome.NO_CORPORA_SELECTED.value).inc()
            return SearchResponse(query=query, outcome=SearchOutcome.NO_CORPORA_SELECTED, generation=generation)

        attributes = {
            "search.generation": generation,
            "search.corpora": ",".join(corpus.value for corpus in filters.corpora),
            "search.query_length": len(query),
        }
        with (
            create_span("corpus_search.search", attributes=attributes) as span,
            track_latency(SEARCH_LATENCY, operation="search"),
        ):
            snapshots = await self._read_selected(filters)
            total_available = await self._total_available()

            if generation != self._generation:
                logger.debug("Search %d superseded by %d", generation, self._generation)
                span.set_attribute("search.outcome", SearchOutcome.SUPERSEDED.value)
                SEARCH_COUNT.labels(outcome=SearchOutcome.SUPERSEDED.value).inc()
                return SearchResponse(query=query, outcome=SearchOutcome.SUPERSEDED, generation=generation)

            response = self._run_pipeline(query, filters, snapshots, total_available, limit, generation, started)
            span.set_attribute("search.outcome", response.outcome.value)
            span.set_attribute("search.actual_count", response.actual_count)

        SEARCH_COUNT.labels(outcome=response.outcome.value).inc()
        SEARCH_RESULTS.labels(operation="search").observe(response.actual_count)
        logger.info(
            "Search %d matched %d records (%s%% of corpus, %d shown) in %.3fs",
            generation,
            response.actual_count,
            response.percentage_of_total,
            len(response.results),
            response.search_time,
        )

        if self.history is not None and query.strip():
            await self.history.record(query)
        return response

    def _run_pipeline(
        self,
        query: str,
        filters: FilterState,
        snapshots: dict[CorpusType, list[Any]],
        total_available: int,
        limit: int,
        generation: int,
        started: float,
    ) -> SearchResponse:
        tokens = tokenize(query)
        candidates: list[UnifiedResult] = []
        for corpus_type, records in snapshots.items():
            normalized = apply_filters(normalize_all(records, corpus_type), filters)
            if filters.search_fields:
                normalized = [r for r in normalized if matches_search_fields(r, tokens, filters.search_fields)]
            scored = score_all(normalized, tokens)
            candidates.extend(UnifiedResult.from_record(record, relevance) for record, relevance in scored)
            logger.debug("Search %d: %d %s candidates", generation, len(normalized), corpus_type.value)

        ordered = sort_results(candidates, filters.sort_by, filters.sort_order)
        governed = finalize(ordered, limit)
        return SearchResponse(
            query=query,
            results=governed.shown,
            actual_count=governed.actual_count,
            per_corpus_counts=count_by_corpus(ordered),
            percentage_of_total=percentage_of_total(governed.actual_count, total_available),
            truncated=governed.truncated,
            outcome=SearchOutcome.COMPLETE,
            generation=generation,
            search_time=time.perf_counter() - started,
        )

    async def _read_selected(self, filters: FilterState) -> dict[CorpusType, list[Any]]:
        snapshots: dict[CorpusType, list[Any]] = {}
        for corpus_type in CorpusType:
            if filters.includes(corpus_type):
                snapshots[corpus_type] = await self._read(corpus_type, filters)
        return snapshots

    async def _read(self, corpus_type: CorpusType, hints: FilterState | None = None) -> list[Any]:
        try:
            return await self.corpus_repository.fetch(corpus_type, hints)
        except Exception as exc:
            raise self._unavailable(corpus_type, exc) from exc

    async def _total_available(self) -> int:
        total = 0
        for corpus_type in CorpusType:
            try:
                size = await self.corpus_repository.count(corpus_type)
            except Exception as exc:
                raise self._unavailable(corpus_type, exc) from exc
            CORPUS_SIZE.labels(corpus=corpus_type.value).set(size)
            total += size
        return total

    def _unavailable(self, corpus_type: CorpusType, exc: Exception) -> CorpusUnavailableError:
        logger.error("Failed to read %s corpus: %s", corpus_type.value, exc, exc_info=True)
        CORPUS_READ_ERRORS.labels(corpus=corpus_type.value).inc()
        return CorpusUnavailableError(corpus_type, f"Corpus unavailable: {corpus_type.value} ({exc})")

    async def search_page(
        self,
        query: str,
        filters: FilterState | None = None,
        page: int = 1,
        limit: int | None = None,
    ) -> SearchPage:
        """Run a search and slice one page out of the shown results.

        Raises:
            ValueError: if ``page`` or ``limit`` is below 1
        """
        limit = self.settings.default_page_size if limit is None else limit
        if page < 1 or limit < 1:
            raise ValueError(f"page and limit must be >= 1, got page={page} limit={limit}")

        response = await self.search(query, filters)
        total_results = len(response.results)
        start = (page - 1) * limit
        end = start + limit
        return SearchPage(
            results=response.results[start:end],
            current_page=page,
            total_pages=math.ceil(total_results / limit),
            total_results=total_results,
            has_next_page=end < total_results,
            has_previous_page=page > 1,
            outcome=response.outcome,
        )

    async def run(self, session: SearchSession) -> SearchResponse | None:
        """Execute the session's committed request and apply the outcome.

        Returns the response when it was applied, None when the session moved on
        meanwhile.

        Raises:
            ValueError: if the session has nothing committed
            CorpusUnavailableError: if the applied outcome is a failure
        """
        request = session.committed
        if request is None:
            raise ValueError("Session has no committed search request")

        try:
            response = await self.search(request.query, request.filters)
        except CorpusUnavailableError as exc:
            if not session.is_current(request.generation):
                logger.debug("Dropping failure of stale session search %d: %s", request.generation, exc)
                return None
            session.fail(request.generation, exc)
            raise

        if response.outcome is SearchOutcome.SUPERSEDED or not session.is_current(request.generation):
            return None
        session.complete(request.generation, response)
        return response

    async def search_by_category(self, category: str, **overrides: Any) -> list[UnifiedResult]:
        """All facts tagged ``category``."""
        return await self._fact_search({"types": [category]}, overrides)

    async def search_by_fulfillment_status(self, status: str, **overrides: Any) -> list[UnifiedResult]:
        return await self._fact_search({"fulfillment_statuses": [status]}, overrides)

    async def search_by_year_range(self, min_year: int, max_year: int, **overrides: Any) -> list[UnifiedResult]:
        """Facts revealed or fulfilled within ``min_year..max_year``."""
        return await self._fact_search({"year_range": {"min": min_year, "max": max_year}}, overrides)

    async def _fact_search(self, selection: dict[str, Any], overrides: dict[str, Any]) -> list[UnifiedResult]:
        filters = FilterState.model_validate({"corpora": [CorpusType.FACT], **selection, **overrides})
        response = await self.search("", filters)
        return response.results

    async def filter_options(self) -> FilterOptions:
        facts = await self._read(CorpusType.FACT)
        verses = await self._read(CorpusType.VERSE)
        narrations = await self._read(CorpusType.NARRATION)
        return build_filter_options(facts, verses, narrations)

    async def suggest(self, query: str, limit: int | None = None) -> list[Suggestion]:
        """Search-bar completions from fact titles, categories, chapter names and history."""
        if not query.strip():
            return []
        facts = await self._read(CorpusType.FACT)
        verses = await self._read(CorpusType.VERSE)
        history: Sequence[str] = await self.history.recent() if self.history is not None else ()
        return suggest(query, facts, verses, history, limit or self.settings.suggestion_limit)
