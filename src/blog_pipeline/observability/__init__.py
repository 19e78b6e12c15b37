"""
Observability Module - diagnostics, logging and optional OpenTelemetry.

USAGE:
------
# At application startup:
from blog_pipeline.observability import init_tracing

init_tracing()  # Installs an SDK TracerProvider if BLOG_TRACING_ENABLED=true

# In code that needs tracing:
from blog_pipeline.observability import get_tracer

tracer = get_tracer()
with tracer.start_span("blog.view", attributes={"blog.document.id": "post-1"}) as span:
    span.set_attribute("blog.document.found", True)
"""

from __future__ import annotations

import logging

from blog_pipeline.observability.config import (
    TracingConfig,
    get_config,
    reset_config,
)
from blog_pipeline.observability.tracer import (
    TracerProtocol,
    SpanProtocol,
    NoOpTracer,
    NoOpSpan,
    get_tracer,
    reset_tracer,
)
from blog_pipeline.observability.attributes import (
    BLOG_DOCUMENT_ID,
    BLOG_DOCUMENT_FOUND,
    BLOG_DOCUMENT_AVAILABLE,
    BLOG_STORE_SIZE,
    BLOG_OPERATION,
    BLOG_OUTLINE_ENTRIES,
    BLOG_REFERENCES_TOTAL,
    BLOG_REFERENCES_UNRESOLVED,
    BLOG_RELATED_REQUESTED,
    BLOG_RELATED_RETURNED,
    BLOG_RELATED_IDS,
    BLOG_NAV_PREVIOUS_ID,
    BLOG_NAV_NEXT_ID,
    document_attributes,
    related_attributes,
)
from blog_pipeline.observability.diagnostics import (
    LoggingDiagnostics,
    CollectingDiagnostics,
    get_diagnostics,
)

logger = logging.getLogger(__name__)

_tracing_initialized = False


def init_tracing(config: TracingConfig | None = None) -> bool:
    """
    Install an OpenTelemetry TracerProvider for pipeline spans.

    Call once at application startup.

    Returns:
        True if tracing was initialized, False if disabled or unavailable
    """
    global _tracing_initialized
    if _tracing_initialized:
        return True

    config = config or get_config()

    if not config.enabled:
        logger.debug("Tracing disabled")
        return False

    try:
        from opentelemetry import trace
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

        provider = TracerProvider(
            resource=Resource.create({"service.name": config.service_name})
        )
        if config.console_export:
            provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
        trace.set_tracer_provider(provider)

        reset_tracer()
        _tracing_initialized = True
        logger.info(f"Tracing enabled for service {config.service_name}")
        return True

    except ImportError as e:
        logger.warning(f"opentelemetry-sdk not installed, tracing disabled: {e}")
        return False


def shutdown_tracing() -> None:
    """Flush and shut down the tracer provider."""
    global _tracing_initialized

    if not _tracing_initialized:
        return

    try:
        from opentelemetry import trace

        provider = trace.get_tracer_provider()
        if hasattr(provider, "shutdown"):
            provider.shutdown()
    except Exception as e:
        logger.warning(f"Error shutting down tracing: {e}")

    reset_tracer()
    reset_config()
    _tracing_initialized = False


__all__ = [
    # Initialization
    "init_tracing",
    "shutdown_tracing",
    # Config
    "TracingConfig",
    "get_config",
    "reset_config",
    # Tracer
    "TracerProtocol",
    "SpanProtocol",
    "NoOpTracer",
    "NoOpSpan",
    "get_tracer",
    "reset_tracer",
    # Attributes
    "BLOG_DOCUMENT_ID",
    "BLOG_DOCUMENT_FOUND",
    "BLOG_DOCUMENT_AVAILABLE",
    "BLOG_STORE_SIZE",
    "BLOG_OPERATION",
    "BLOG_OUTLINE_ENTRIES",
    "BLOG_REFERENCES_TOTAL",
    "BLOG_REFERENCES_UNRESOLVED",
    "BLOG_RELATED_REQUESTED",
    "BLOG_RELATED_RETURNED",
    "BLOG_RELATED_IDS",
    "BLOG_NAV_PREVIOUS_ID",
    "BLOG_NAV_NEXT_ID",
    "document_attributes",
    "related_attributes",
    # Diagnostics
    "LoggingDiagnostics",
    "CollectingDiagnostics",
    "get_diagnostics",
]
