"""
Unit Tests for Observability Module

Tests tracing and diagnostics with focus on:
1. Graceful degradation (NoOpTracer when disabled)
2. Configuration loading from environment
3. Span attributes set by the pipeline
4. Diagnostics sinks

STAFF ENGINEER PATTERNS:
------------------------
1. Tests work WITHOUT opentelemetry-sdk installed (graceful degradation)
2. Environment variable handling tested with patch.dict
3. A recording tracer stands in for OTel when checking attributes
"""

import logging
from contextlib import contextmanager
from unittest.mock import MagicMock, patch

import pytest

from blog_pipeline.config import PipelineConfig
from blog_pipeline.core.errors import DiagnosticKind
from blog_pipeline.observability.attributes import (
    BLOG_DOCUMENT_FOUND,
    BLOG_DOCUMENT_ID,
    BLOG_OPERATION,
    BLOG_RELATED_IDS,
    BLOG_RELATED_RETURNED,
    BLOG_STORE_SIZE,
    document_attributes,
    related_attributes,
)
from blog_pipeline.observability.config import TracingConfig, get_config, reset_config
from blog_pipeline.observability.diagnostics import (
    CollectingDiagnostics,
    LoggingDiagnostics,
    get_diagnostics,
)
from blog_pipeline.observability.tracer import NoOpSpan, NoOpTracer, OTelSpan, get_tracer, reset_tracer
from blog_pipeline.pipeline.view import BlogPipeline
from blog_pipeline.store import InMemoryDocumentStore, get_sample_documents


# ---------------------------------------------------------------------------
# CONFIG TESTS
# ---------------------------------------------------------------------------


class TestTracingConfig:
    """Test configuration loading."""

    def setup_method(self):
        reset_config()

    def teardown_method(self):
        reset_config()

    def test_config_defaults(self):
        """Tracing is off unless asked for."""
        with patch.dict("os.environ", {}, clear=True):
            config = TracingConfig.from_env()

        assert config.enabled is False
        assert config.service_name == "blog-pipeline"
        assert config.console_export is False

    @pytest.mark.parametrize("value,expected", [("true", True), ("1", True), ("yes", True), ("0", False), ("false", False)])
    def test_config_enabled_values(self, value, expected):
        with patch.dict("os.environ", {"BLOG_TRACING_ENABLED": value}):
            assert TracingConfig.from_env().enabled is expected

    def test_config_service_name(self):
        with patch.dict("os.environ", {"BLOG_TRACING_SERVICE_NAME": "blog-web"}):
            assert TracingConfig.from_env().service_name == "blog-web"

    def test_get_config_singleton(self):
        assert get_config() is get_config()


# ---------------------------------------------------------------------------
# NOOP TRACER TESTS
# ---------------------------------------------------------------------------


class TestNoOpTracer:
    """Test NoOpTracer for graceful degradation."""

    def test_noop_tracer_creates_spans(self):
        with NoOpTracer().start_span("test_span", attributes={"key": "value"}) as span:
            assert isinstance(span, NoOpSpan)

    def test_noop_span_accepts_everything(self):
        with NoOpTracer().start_span("test_span") as span:
            span.set_attribute("key", "value")
            span.set_attributes({"number": 42, "float": 3.14})
            span.set_status("ok")
            span.set_status("error", "Something went wrong")

    def test_exceptions_propagate(self):
        with pytest.raises(ValueError):
            with NoOpTracer().start_span("failing_operation"):
                raise ValueError("Test error")


# ---------------------------------------------------------------------------
# OTEL WRAPPER TESTS
# ---------------------------------------------------------------------------


class TestOTelSpan:
    """Test the OTel span adapter against a mock span."""

    def test_none_attributes_dropped(self):
        inner = MagicMock()
        OTelSpan(inner).set_attributes({"a": 1, "b": None})
        inner.set_attributes.assert_called_once_with({"a": 1})

    def test_status_mapping(self):
        trace = pytest.importorskip("opentelemetry.trace")
        inner = MagicMock()
        span = OTelSpan(inner)

        span.set_status("ok")
        span.set_status("error", "boom")

        ok, error = [c.args[0] for c in inner.set_status.call_args_list]
        assert ok.status_code == trace.StatusCode.OK
        assert error.status_code == trace.StatusCode.ERROR
        assert error.description == "boom"


# ---------------------------------------------------------------------------
# GET_TRACER FACTORY TESTS
# ---------------------------------------------------------------------------


class TestGetTracer:
    """Test the get_tracer factory function."""

    def setup_method(self):
        reset_tracer()
        reset_config()

    def teardown_method(self):
        reset_tracer()
        reset_config()

    def test_get_tracer_returns_noop_when_disabled(self):
        with patch.dict("os.environ", {"BLOG_TRACING_ENABLED": "false"}):
            assert isinstance(get_tracer(), NoOpTracer)

    def test_get_tracer_singleton(self):
        with patch.dict("os.environ", {"BLOG_TRACING_ENABLED": "false"}):
            assert get_tracer() is get_tracer()

    def test_get_tracer_when_enabled(self):
        """OTelTracer if an SDK provider is installed, otherwise NoOpTracer."""
        with patch.dict("os.environ", {"BLOG_TRACING_ENABLED": "true"}):
            tracer = get_tracer()
            assert callable(tracer.start_span)


# ---------------------------------------------------------------------------
# ATTRIBUTE HELPER TESTS
# ---------------------------------------------------------------------------


class TestAttributeHelpers:
    """Test attribute helper functions."""

    def test_document_attributes(self):
        attrs = document_attributes("view", "hello-world", store_size=6)

        assert attrs[BLOG_OPERATION] == "view"
        assert attrs[BLOG_DOCUMENT_ID] == "hello-world"
        assert attrs[BLOG_STORE_SIZE] == 6

    def test_document_attributes_minimal(self):
        assert BLOG_STORE_SIZE not in document_attributes("outline", "x")

    def test_related_attributes(self):
        attrs = related_attributes(3, ["a", "b"])
        assert attrs[BLOG_RELATED_RETURNED] == 2
        assert attrs[BLOG_RELATED_IDS] == ["a", "b"]


# ---------------------------------------------------------------------------
# PIPELINE SPANS
# ---------------------------------------------------------------------------


class RecordingSpan:
    def __init__(self, attributes):
        self.attributes = dict(attributes or {})
        self.status = None

    def set_attribute(self, key, value):
        self.attributes[key] = value

    def set_attributes(self, attributes):
        self.attributes.update(attributes)

    def set_status(self, status, description=None):
        self.status = status


class RecordingTracer:
    def __init__(self):
        self.spans = []

    @contextmanager
    def start_span(self, name, attributes=None):
        span = RecordingSpan(attributes)
        self.spans.append((name, span))
        yield span


class TestPipelineSpans:
    """Test the attributes BlogPipeline.view puts on its span."""

    @pytest.fixture
    def pipeline(self):
        store = InMemoryDocumentStore(get_sample_documents())
        return BlogPipeline(store, config=PipelineConfig(), diagnostics=CollectingDiagnostics())

    def test_view_span(self, pipeline):
        tracer = RecordingTracer()
        with patch("blog_pipeline.pipeline.view.get_tracer", return_value=tracer):
            pipeline.view("python-tooling")

        ((name, span),) = tracer.spans
        assert name == "blog.view"
        assert span.attributes[BLOG_DOCUMENT_ID] == "python-tooling"
        assert span.attributes[BLOG_DOCUMENT_FOUND] is True
        assert span.attributes[BLOG_RELATED_IDS] == ["async-python", "terminal-setup", "hello-world"]
        assert span.attributes["blog.references.unresolved"] == 1
        assert span.status == "ok"

    def test_view_span_not_found(self, pipeline):
        tracer = RecordingTracer()
        with patch("blog_pipeline.pipeline.view.get_tracer", return_value=tracer):
            pipeline.view("missing")

        ((_, span),) = tracer.spans
        assert span.attributes[BLOG_DOCUMENT_FOUND] is False


# ---------------------------------------------------------------------------
# DIAGNOSTICS
# ---------------------------------------------------------------------------


class TestDiagnostics:
    """Test diagnostics sinks."""

    def test_collecting_keeps_notes(self):
        sink = CollectingDiagnostics()
        sink.record(DiagnosticKind.UNRESOLVED_REFERENCE, "a", "missing b", target="/blogs/b")
        sink.record(DiagnosticKind.MALFORMED_METADATA, "a", "bad date")

        assert len(sink) == 2
        assert sink.counts() == {"unresolved_reference": 1, "malformed_metadata": 1}
        assert sink.of_kind(DiagnosticKind.UNRESOLVED_REFERENCE)[0].details == {"target": "/blogs/b"}
        assert sink.notes[0].to_dict()["kind"] == "unresolved_reference"

        sink.clear()
        assert list(sink) == []

    def test_logging_sink_logs_warning(self, caplog):
        sink = LoggingDiagnostics()
        with caplog.at_level(logging.WARNING):
            sink.record(DiagnosticKind.LOAD_FAILURE, "post", "permission denied")

        assert "load_failure: [post] permission denied" in caplog.text
        assert list(sink) == []

    def test_factory(self):
        assert isinstance(get_diagnostics(), LoggingDiagnostics)
        assert isinstance(get_diagnostics(collect=True), CollectingDiagnostics)
