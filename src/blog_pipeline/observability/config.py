"""
Tracing Configuration

Loads tracing settings from environment variables.
Supports graceful degradation when OpenTelemetry is not installed.
"""

import os
from dataclasses import dataclass


@dataclass
class TracingConfig:
    """Configuration for pipeline tracing.

    Environment Variables:
        BLOG_TRACING_ENABLED: Emit OpenTelemetry spans (default: false)
        BLOG_TRACING_SERVICE_NAME: Service name on spans (default: blog-pipeline)
        BLOG_TRACING_CONSOLE: Also print finished spans to stdout (default: false)
    """

    enabled: bool = False
    service_name: str = "blog-pipeline"
    console_export: bool = False

    @classmethod
    def from_env(cls) -> "TracingConfig":
        """Load config from environment variables."""
        return cls(
            enabled=os.environ.get("BLOG_TRACING_ENABLED", "false").lower() in ("true", "1", "yes"),
            service_name=os.environ.get("BLOG_TRACING_SERVICE_NAME", "blog-pipeline"),
            console_export=os.environ.get("BLOG_TRACING_CONSOLE", "false").lower() in ("true", "1", "yes"),
        )


# Global config singleton
_config: TracingConfig | None = None


def get_config() -> TracingConfig:
    """Get the global tracing config (lazy-loaded from env)."""
    global _config
    if _config is None:
        _config = TracingConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset config (useful for testing)."""
    global _config
    _config = None
