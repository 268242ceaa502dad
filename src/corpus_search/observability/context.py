"""Trace context carried across awaits so log lines from one search share an id."""

from __future__ import annotations

from contextvars import ContextVar
from uuid import uuid4

trace_context: ContextVar[dict | None] = ContextVar("corpus_search_trace_context", default=None)


def generate_trace_id() -> str:
    """32-char hex trace id."""
    return uuid4().hex


def generate_span_id() -> str:
    """16-char hex span id."""
    return uuid4().hex[:16]


def get_trace_context() -> dict:
    """Current trace context, created on first access in this context."""
    ctx = trace_context.get()
    if ctx is None or not ctx.get("trace_id"):
        ctx = {"trace_id": generate_trace_id(), "span_id": generate_span_id()}
        trace_context.set(ctx)
    return ctx


def set_trace_context(trace_id: str, span_id: str, **extra: object) -> None:
    trace_context.set({"trace_id": trace_id, "span_id": span_id, **extra})


def update_span_id(span_id: str, trace_id: str | None = None) -> None:
    """Swap the span id, keeping any extra keys.

    The trace id is replaced when given, otherwise kept (or created on first use).
    """
    ctx = dict(get_trace_context())
    ctx["span_id"] = span_id
    if trace_id:
        ctx["trace_id"] = trace_id
    trace_context.set(ctx)

