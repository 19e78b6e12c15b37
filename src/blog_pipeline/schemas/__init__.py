"""Pydantic schemas for document metadata."""

from blog_pipeline.schemas.metadata import (
    DEFAULT_TITLE,
    UNKNOWN_DATE,
    UNKNOWN_DATE_LABEL,
    BlogMetadata,
    parse_date,
    normalize_tags,
)

__all__ = [
    "DEFAULT_TITLE",
    "UNKNOWN_DATE",
    "UNKNOWN_DATE_LABEL",
    "BlogMetadata",
    "parse_date",
    "normalize_tags",
]
