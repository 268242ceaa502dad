"""Unit tests for observability module."""

import io
import json
import logging
import sys
from unittest.mock import Mock

from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode
from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram
import pytest

from corpus_search.observability import (
    JsonFormatter,
    configure_logging,
    create_span,
    get_metrics,
    get_trace_context,
    init_tracing,
    set_trace_context,
    trace_context,
    track_latency,
    tracing as tracing_module,
    update_span_id,
)
from corpus_search.observability.metrics import MetricBridge


def _record(msg="test message", level=logging.INFO, name="corpus_search.search.scoring"):
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


@pytest.fixture
def fresh_trace_context():
    token = trace_context.set(None)
    yield
    trace_context.reset(token)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.unit
class TestJsonFormatter:
    """Tests for structured JSON logging."""

    def test_format_includes_trace_context(self, fresh_trace_context):
        set_trace_context("a" * 32, "b" * 16, generation=7)

        data = json.loads(JsonFormatter().format(_record()))

        assert data["message"] == "test message"
        assert data["level"] == "INFO"
        assert data["trace_id"] == "a" * 32
        assert data["span_id"] == "b" * 16
        assert data["generation"] == 7
        assert data["component"] == "scoring"
        assert "timestamp" in data

    def test_format_includes_extra_fields(self, fresh_trace_context):
        record = _record()
        record.corpus = "verse"

        data = json.loads(JsonFormatter().format(record))

        assert data["corpus"] == "verse"
        assert "pathname" not in data

    def test_format_truncates_and_redacts(self, fresh_trace_context):
        record = _record(msg="x" * 5000)
        record.api_key = "secret"
        record.query = "q" * 900

        data = json.loads(JsonFormatter().format(record))

        assert len(data["message"]) == JsonFormatter.MAX_MESSAGE_LEN + 3
        assert data["message"].endswith("...")
        assert data["api_key"] == "[REDACTED]"
        assert data["query"].endswith("...")

    def test_format_includes_exception(self, fresh_trace_context):
        try:
            raise OSError("disk on fire")
        except OSError:
            record = logging.LogRecord("t", logging.ERROR, "t.py", 1, "failed", (), exc_info=sys.exc_info())

        data = json.loads(JsonFormatter().format(record))

        assert "OSError: disk on fire" in data["exception"]

    def test_json_default_handles_set_and_bytes(self):
        formatter = JsonFormatter()
        assert formatter._json_default({3, 1, 2}) == [1, 2, 3]
        assert formatter._json_default(b"ok") == "ok"
        assert isinstance(formatter._json_default({1, "a"}), list)


@pytest.mark.unit
class TestConfigureLogging:
    def test_json_output_to_stream(self, restore_root_logger, fresh_trace_context):
        stream = io.StringIO()
        configure_logging("debug", json_output=True, stream=stream)

        logging.getLogger("corpus_search.test").info("hello %s", "world")

        data = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert data["message"] == "hello world"
        assert restore_root_logger.level == logging.DEBUG

    def test_plain_output_and_logger_overrides(self, restore_root_logger):
        stream = io.StringIO()
        configure_logging("info", json_output=False, logger_levels={"corpus_search.noisy": "warning"}, stream=stream)

        logging.getLogger("corpus_search.noisy").info("hidden")
        logging.getLogger("corpus_search.quiet").info("shown")

        output = stream.getvalue()
        assert "hidden" not in output
        assert "INFO [corpus_search.quiet] shown" in output
        logging.getLogger("corpus_search.noisy").setLevel(logging.NOTSET)


@pytest.mark.unit
class TestTraceContext:
    def test_get_trace_context_generates_ids(self, fresh_trace_context):
        ctx = get_trace_context()

        assert len(ctx["trace_id"]) == 32
        assert len(ctx["span_id"]) == 16
        assert get_trace_context() is ctx

    def test_update_span_id_keeps_trace(self, fresh_trace_context):
        set_trace_context("t" * 32, "s" * 16, generation=2)

        update_span_id("n" * 16)

        assert get_trace_context() == {"trace_id": "t" * 32, "span_id": "n" * 16, "generation": 2}

    def test_update_span_id_on_empty_context_keeps_span(self, fresh_trace_context):
        update_span_id("n" * 16)

        ctx = get_trace_context()
        assert ctx["span_id"] == "n" * 16
        assert len(ctx["trace_id"]) == 32

    def test_update_span_id_replaces_trace_when_given(self, fresh_trace_context):
        set_trace_context("t" * 32, "s" * 16)

        update_span_id("n" * 16, trace_id="a" * 32)

        assert get_trace_context() == {"trace_id": "a" * 32, "span_id": "n" * 16}


@pytest.mark.unit
class TestMetricBridge:
    def _bridge(self, metric, kind):
        bridge = MetricBridge(metric, otel_name="test_metric", otel_description="test", otel_kind=kind)
        bridge._otel_instrument = Mock()
        return bridge

    def test_counter_mirrors_increments(self):
        registry = CollectorRegistry()
        bridge = self._bridge(Counter("bridge_test_total", "test", ["kind"], registry=registry), "counter")

        bridge.labels(kind="a").inc()
        bridge.labels(kind="a").inc(2)

        assert registry.get_sample_value("bridge_test_total", {"kind": "a"}) == 3
        bridge._otel_instrument.add.assert_called_with(2, {"kind": "a"})

    def test_gauge_reports_deltas(self):
        registry = CollectorRegistry()
        bridge = self._bridge(Gauge("bridge_test_gauge", "test", ["corpus"], registry=registry), "gauge")

        bridge.labels(corpus="fact").set(5)
        bridge.labels(corpus="fact").set(3)
        bridge.labels(corpus="fact").set(3)

        assert registry.get_sample_value("bridge_test_gauge", {"corpus": "fact"}) == 3
        deltas = [call.args[0] for call in bridge._otel_instrument.add.call_args_list]
        assert deltas == [5, -2]

    def test_unknown_kind_is_rejected(self):
        bridge = MetricBridge(Mock(), otel_name="x", otel_description="x", otel_kind="summary")

        with pytest.raises(ValueError, match="Unknown metric kind"):
            bridge._ensure_otel_instrument()

    def test_track_latency_observes_failures(self):
        registry = CollectorRegistry()
        bridge = self._bridge(Histogram("bridge_test_seconds", "test", ["operation"], registry=registry), "histogram")

        with pytest.raises(RuntimeError), track_latency(bridge, operation="search"):
            raise RuntimeError("boom")

        assert registry.get_sample_value("bridge_test_seconds_count", {"operation": "search"}) == 1
        bridge._otel_instrument.record.assert_called_once()

    def test_exposition_lists_search_metrics(self):
        payload = get_metrics()

        assert b"corpus_search_requests_total" in payload
        assert b"corpus_search_corpus_records" in payload


@pytest.mark.unit
class TestTracing:
    @pytest.fixture
    def exporter(self, monkeypatch):
        monkeypatch.setitem(tracing_module._tracer_holder, "tracer", None)
        exporter = InMemorySpanExporter()
        init_tracing("corpus-search-test", span_processors=[SimpleSpanProcessor(exporter)])
        return exporter

    def test_create_span_records_attributes_and_span_id(self, exporter, fresh_trace_context):
        with create_span("corpus_search.test", attributes={"search.generation": 3}) as span:
            span_id = format(span.get_span_context().span_id, "016x")
            assert get_trace_context()["span_id"] == span_id

        (finished,) = exporter.get_finished_spans()
        assert finished.name == "corpus_search.test"
        assert finished.attributes["search.generation"] == 3
        assert finished.status.status_code is not StatusCode.ERROR

    def test_log_lines_inside_span_carry_its_ids(self, exporter, fresh_trace_context):
        with create_span("corpus_search.logged") as span:
            data = json.loads(JsonFormatter().format(_record()))
            span_context = span.get_span_context()

        assert data["trace_id"] == format(span_context.trace_id, "032x")
        assert data["span_id"] == format(span_context.span_id, "016x")

    def test_create_span_marks_errors(self, exporter, fresh_trace_context):
        with pytest.raises(RuntimeError), create_span("corpus_search.failing"):
            raise RuntimeError("bad corpus")

        (finished,) = exporter.get_finished_spans()
        assert finished.status.status_code is StatusCode.ERROR
        assert finished.status.description == "bad corpus"
        assert [event.name for event in finished.events] == ["exception"]
