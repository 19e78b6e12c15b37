"""
Document metadata schema.

BlogMetadata is the contract between a document's declared metadata block
and the rest of the pipeline. Every field has a default, so a document with
no block at all still validates; the extractor drops invalid fields one by
one and re-validates, keeping whatever was well-formed.
"""

from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TITLE = "Untitled"
UNKNOWN_DATE_LABEL = "Unknown Date"

# Sorts before every real publish date.
UNKNOWN_DATE = dt.date.min

DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)


def parse_date(value: Any) -> dt.date:
    """Coerce a metadata date value to a date, raising ValueError if unusable."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"date must be a string or date, got {type(value).__name__}")

    text = value.strip()
    try:
        return dt.datetime.fromisoformat(text).date()
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return dt.datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"unrecognised date '{value}'")


def normalize_tags(value: Any) -> frozenset[str]:
    """Accept a list of tags or a comma-separated string; lowercase and strip."""
    if isinstance(value, str):
        items: list[Any] = value.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = list(value)
    else:
        raise ValueError(f"tags must be a list or string, got {type(value).__name__}")

    tags = set()
    for item in items:
        if not isinstance(item, (str, int, float)) or isinstance(item, bool):
            raise ValueError(f"invalid tag {item!r}")
        tag = str(item).strip().lower()
        if tag:
            tags.add(tag)
    return frozenset(tags)


class BlogMetadata(BaseModel):
    """
    Declared metadata of one blog document.

    Immutable once built, like the Document that owns it.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str = Field(
        default=DEFAULT_TITLE,
        description="Human-readable title",
    )

    date: dt.date = Field(
        default=UNKNOWN_DATE,
        description="Publish date; UNKNOWN_DATE when missing or malformed",
    )

    description: str | None = Field(
        default=None,
        description="Optional one-paragraph summary shown in listings",
    )

    tags: frozenset[str] = Field(
        default_factory=frozenset,
        description="Lowercased topic tags used for relatedness",
    )

    @field_validator("title", mode="before")
    @classmethod
    def _check_title(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError(f"title must be a string, got {type(value).__name__}")
        if not value.strip():
            raise ValueError("title is empty")
        return value.strip()

    @field_validator("date", mode="before")
    @classmethod
    def _check_date(cls, value: Any) -> dt.date:
        return parse_date(value)

    @field_validator("description", mode="before")
    @classmethod
    def _check_description(cls, value: Any) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError(
                f"description must be a string, got {type(value).__name__}"
            )
        return value.strip() or None

    @field_validator("tags", mode="before")
    @classmethod
    def _check_tags(cls, value: Any) -> frozenset[str]:
        if value is None:
            return frozenset()
        return normalize_tags(value)

    @property
    def has_date(self) -> bool:
        return self.date != UNKNOWN_DATE

    @property
    def date_label(self) -> str:
        """ISO date, or 'Unknown Date' for the sentinel."""
        return self.date.isoformat() if self.has_date else UNKNOWN_DATE_LABEL

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "title": self.title,
            "date": self.date_label,
            "description": self.description,
            "tags": sorted(self.tags),
        }
