"""Logging, metrics and tracing for the search engine."""

from corpus_search.observability.context import (
    get_trace_context,
    set_trace_context,
    trace_context,
    update_span_id,
)
from corpus_search.observability.logging import JsonFormatter, configure_logging
from corpus_search.observability.metrics import (
    CORPUS_READ_ERRORS,
    CORPUS_SIZE,
    SEARCH_COUNT,
    SEARCH_LATENCY,
    SEARCH_RESULTS,
    get_metrics,
    init_metrics,
    track_latency,
)
from corpus_search.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "CORPUS_READ_ERRORS",
    "CORPUS_SIZE",
    "SEARCH_COUNT",
    "SEARCH_LATENCY",
    "SEARCH_RESULTS",
    "JsonFormatter",
    "configure_logging",
    "create_span",
    "get_metrics",
    "get_trace_context",
    "get_tracer",
    "init_metrics",
    "init_tracing",
    "set_trace_context",
    "trace_context",
    "track_latency",
    "update_span_id",
]
