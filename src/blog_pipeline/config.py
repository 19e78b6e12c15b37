"""
Pipeline Configuration

Loads content-pipeline settings from environment variables.

Environment Variables:
    BLOG_CONTENT_DIR: Directory holding one markdown file per blog (default: ./blogs)
    BLOG_RELATED_COUNT: Related documents shown per page (default: 3)
    BLOG_TAG_WEIGHT: Score per shared tag (default: 1.0)
    BLOG_DATE_WEIGHT: Maximum date-proximity score (default: 0.5)
    BLOG_DATE_SCALE_DAYS: Days at which date proximity halves (default: 30)
    BLOG_CANONICAL_PREFIX: Canonical link prefix (default: /blogs/)
    BLOG_LEGACY_PREFIXES: Comma-separated legacy prefixes (default: /blog/)
    BLOG_UNLINK_UNRESOLVED: Replace links to missing blogs by their text (default: false)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

_TRUTHY = ("true", "1", "yes")


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={raw!r}, using {default}")
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}, using {default}")
        return default


def _normalize_prefix(prefix: str) -> str:
    prefix = prefix.strip()
    if not prefix.startswith("/"):
        prefix = "/" + prefix
    if not prefix.endswith("/"):
        prefix = prefix + "/"
    return prefix


# ---------------------------------------------------------------------------
# RANKING
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RankingConfig:
    """Weights for the two relatedness signals."""

    tag_weight: float = 1.0
    date_weight: float = 0.5
    date_scale_days: float = 30.0

    def __post_init__(self) -> None:
        if not self.date_scale_days > 0:
            raise ValueError("date_scale_days must be positive")

    @classmethod
    def from_env(cls) -> "RankingConfig":
        defaults = cls()
        scale = _env_float("BLOG_DATE_SCALE_DAYS", defaults.date_scale_days)
        # "not >" also rejects NaN.
        if not scale > 0:
            logger.warning(
                f"Ignoring non-positive BLOG_DATE_SCALE_DAYS={scale}, "
                f"using {defaults.date_scale_days}"
            )
            scale = defaults.date_scale_days
        return cls(
            tag_weight=_env_float("BLOG_TAG_WEIGHT", defaults.tag_weight),
            date_weight=_env_float("BLOG_DATE_WEIGHT", defaults.date_weight),
            date_scale_days=scale,
        )


# ---------------------------------------------------------------------------
# LINKS
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LinkConfig:
    """Path-prefix rule deciding which references are internal."""

    canonical_prefix: str = "/blogs/"
    legacy_prefixes: tuple[str, ...] = ("/blog/",)
    unlink_unresolved: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "canonical_prefix", _normalize_prefix(self.canonical_prefix))
        object.__setattr__(
            self,
            "legacy_prefixes",
            tuple(_normalize_prefix(p) for p in self.legacy_prefixes if p.strip()),
        )

    @property
    def internal_prefixes(self) -> tuple[str, ...]:
        """Canonical prefix first, then legacy ones."""
        return (self.canonical_prefix,) + tuple(
            p for p in self.legacy_prefixes if p != self.canonical_prefix
        )

    def canonical_path(self, identifier: str) -> str:
        return f"{self.canonical_prefix}{identifier}"

    @classmethod
    def from_env(cls) -> "LinkConfig":
        legacy = os.environ.get("BLOG_LEGACY_PREFIXES", "/blog/")
        return cls(
            canonical_prefix=os.environ.get("BLOG_CANONICAL_PREFIX", "/blogs/"),
            legacy_prefixes=tuple(p for p in legacy.split(",") if p.strip()),
            unlink_unresolved=os.environ.get("BLOG_UNLINK_UNRESOLVED", "false").lower()
            in _TRUTHY,
        )


# ---------------------------------------------------------------------------
# PIPELINE
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PipelineConfig:
    """Top-level configuration for stores and pipeline components."""

    content_dir: Path = Path("blogs")
    extensions: tuple[str, ...] = (".md",)
    related_count: int = 3
    ranking: RankingConfig = field(default_factory=RankingConfig)
    links: LinkConfig = field(default_factory=LinkConfig)

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        """Load config from environment variables."""
        return cls(
            content_dir=Path(os.environ.get("BLOG_CONTENT_DIR", "blogs")),
            related_count=max(0, _env_int("BLOG_RELATED_COUNT", 3)),
            ranking=RankingConfig.from_env(),
            links=LinkConfig.from_env(),
        )


# Global config singleton
_config: PipelineConfig | None = None


def get_config() -> PipelineConfig:
    """Get the global pipeline config (lazy-loaded from env)."""
    global _config
    if _config is None:
        _config = PipelineConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset config (useful for testing)."""
    global _config
    _config = None
