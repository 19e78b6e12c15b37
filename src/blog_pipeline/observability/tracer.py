"""
Span wrappers for BlogPipeline.view.

get_tracer() hands out an OTelTracer once init_tracing() has installed an
SDK provider and BLOG_TRACING_ENABLED is set; otherwise a NoOpTracer, so the
pipeline opens spans unconditionally and pays nothing when tracing is off.

A span here only needs attributes and an ok/error status.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Protocol


# ---------------------------------------------------------------------------
# PROTOCOLS
# ---------------------------------------------------------------------------


class SpanProtocol(Protocol):
    def set_attribute(self, key: str, value: Any) -> None: ...

    def set_attributes(self, attributes: dict[str, Any]) -> None: ...

    def set_status(self, status: str, description: str | None = None) -> None:
        """status is "ok" or "error"."""
        ...


class TracerProtocol(Protocol):
    @contextmanager
    def start_span(self, name: str, attributes: dict[str, Any] | None = None) -> Iterator[SpanProtocol]:
        ...


# ---------------------------------------------------------------------------
# TRACING DISABLED
# ---------------------------------------------------------------------------


class NoOpSpan:
    def set_attribute(self, key: str, value: Any) -> None:
        pass

    def set_attributes(self, attributes: dict[str, Any]) -> None:
        pass

    def set_status(self, status: str, description: str | None = None) -> None:
        pass


class NoOpTracer:
    @contextmanager
    def start_span(self, name: str, attributes: dict[str, Any] | None = None) -> Iterator[NoOpSpan]:
        yield NoOpSpan()


# ---------------------------------------------------------------------------
# OPENTELEMETRY
# ---------------------------------------------------------------------------


class OTelSpan:
    """Adapts an OTel span; None-valued attributes are dropped."""

    def __init__(self, span: Any):
        self._span = span

    def set_attribute(self, key: str, value: Any) -> None:
        self.set_attributes({key: value})

    def set_attributes(self, attributes: dict[str, Any]) -> None:
        self._span.set_attributes({k: v for k, v in attributes.items() if v is not None})

    def set_status(self, status: str, description: str | None = None) -> None:
        from opentelemetry.trace import Status, StatusCode

        if status == "ok":
            self._span.set_status(Status(StatusCode.OK))
        else:
            self._span.set_status(Status(StatusCode.ERROR, description))


class OTelTracer:
    def __init__(self, tracer: Any):
        self._tracer = tracer

    @contextmanager
    def start_span(self, name: str, attributes: dict[str, Any] | None = None) -> Iterator[OTelSpan]:
        with self._tracer.start_as_current_span(name, attributes=attributes) as span:
            yield OTelSpan(span)


# ---------------------------------------------------------------------------
# FACTORY
# ---------------------------------------------------------------------------


_tracer: TracerProtocol | None = None


def _build_tracer() -> TracerProtocol:
    from blog_pipeline.observability.config import get_config

    config = get_config()
    if not config.enabled:
        return NoOpTracer()

    try:
        from opentelemetry import trace
        from opentelemetry.sdk.trace import TracerProvider
    except ImportError:
        return NoOpTracer()

    # Without init_tracing() the global provider is the API's proxy.
    if not isinstance(trace.get_tracer_provider(), TracerProvider):
        return NoOpTracer()
    return OTelTracer(trace.get_tracer(config.service_name))


def get_tracer() -> TracerProtocol:
    """Process-wide tracer, built on first use."""
    global _tracer
    if _tracer is None:
        _tracer = _build_tracer()
    return _tracer


def reset_tracer() -> None:
    """Forget the cached tracer (tests, or after init_tracing)."""
    global _tracer
    _tracer = None
