"""
Document model for the content pipeline.

Single responsibility: Define the structure of a loaded blog document.
"""

from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass, field

from blog_pipeline.schemas.metadata import BlogMetadata

# Identifiers map 1:1 to file stems and must be usable as a URL path segment.
IDENTIFIER_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def is_valid_identifier(identifier: str) -> bool:
    return bool(IDENTIFIER_RE.match(identifier))


@dataclass(frozen=True)
class Document:
    """
    A blog document: identifier, body text and parsed metadata.

    Owned by a DocumentStore snapshot and never mutated; a reload builds
    new Document objects.
    """

    id: str
    body: str
    metadata: BlogMetadata = field(default_factory=BlogMetadata)
    extension: str = ".md"
    # Raw file text including the metadata block; None when built directly.
    source: str | None = field(default=None, repr=False, compare=False)

    @property
    def title(self) -> str:
        return self.metadata.title

    @property
    def date(self) -> dt.date:
        return self.metadata.date

    @property
    def tags(self) -> frozenset[str]:
        return self.metadata.tags

    @property
    def description(self) -> str | None:
        return self.metadata.description

    @property
    def filename(self) -> str:
        return f"{self.id}{self.extension}"

    def to_dict(self, include_body: bool = False) -> dict:
        """Convert to dictionary for serialization."""
        data = {"id": self.id, "filename": self.filename, **self.metadata.to_dict()}
        if include_body:
            data["body"] = self.body
        return data
