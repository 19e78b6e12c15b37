"""
Core protocols defining contracts for the content pipeline.

Every pipeline component receives its collaborators through these
protocols, so a test can hand in an in-memory store or a collecting
diagnostics sink without touching the filesystem.

PATTERN:
--------
- Protocol defines the contract
- Multiple implementations possible
- Factory functions for instantiation
- Test doubles for fast unit tests
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterator, Protocol, runtime_checkable

from blog_pipeline.core.errors import DiagnosticKind

if TYPE_CHECKING:
    from blog_pipeline.store.document import Document


# ---------------------------------------------------------------------------
# DOCUMENT STORE PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class DocumentStore(Protocol):
    """
    Contract for a queryable snapshot of all documents.

    Implementations:
    - FileSystemDocumentStore (markdown files on disk)
    - InMemoryDocumentStore (testing/development)

    Lookups for unknown identifiers return None and never raise.
    """

    def get(self, identifier: str) -> Document | None:
        """Return the document, or None if the identifier is unknown."""
        ...

    def all(self) -> list[Document]:
        """Return every loadable document. Order is unspecified."""
        ...

    def __contains__(self, identifier: object) -> bool:
        ...

    def __len__(self) -> int:
        ...


# ---------------------------------------------------------------------------
# DIAGNOSTICS PROTOCOL
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DiagnosticNote:
    """One non-fatal content condition, e.g. a link to a missing document."""

    kind: DiagnosticKind
    document_id: str | None
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "kind": self.kind.value,
            "document_id": self.document_id,
            "message": self.message,
            "details": dict(self.details),
        }


@runtime_checkable
class DiagnosticsSink(Protocol):
    """
    Contract for recording non-fatal content conditions.

    Implementations:
    - LoggingDiagnostics (production, logs a warning per note)
    - CollectingDiagnostics (testing and the `check` command)
    """

    def record(
        self,
        kind: DiagnosticKind,
        document_id: str | None,
        message: str,
        **details: Any,
    ) -> None:
        """Record a single note."""
        ...

    def __iter__(self) -> Iterator[DiagnosticNote]:
        ...
