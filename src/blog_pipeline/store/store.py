"""
Document store implementations.

Pattern: Protocol -> Production impl -> Test double -> Factory

This module contains:
1. StoreSnapshot - immutable view of every document at one point in time
2. FileSystemDocumentStore - one markdown file per document (production)
3. InMemoryDocumentStore - documents held directly (testing/development)
4. get_document_store() - Factory function

Both stores swap a whole snapshot on reload; readers holding the previous
snapshot keep a consistent document set.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping

from blog_pipeline.config import PipelineConfig, get_config
from blog_pipeline.core.errors import ContentUnavailableError, DiagnosticKind
from blog_pipeline.core.protocols import DiagnosticsSink
from blog_pipeline.observability.diagnostics import LoggingDiagnostics
from blog_pipeline.pipeline.metadata import extract_metadata
from blog_pipeline.store.document import Document, is_valid_identifier

logger = logging.getLogger(__name__)


def document_from_text(
    identifier: str,
    raw: str,
    diagnostics: DiagnosticsSink | None = None,
    extension: str = ".md",
) -> Document:
    """Build a Document from raw file text via the metadata extractor."""
    metadata, body = extract_metadata(raw, identifier, diagnostics)
    return Document(
        id=identifier, body=body, metadata=metadata, extension=extension, source=raw
    )


# ---------------------------------------------------------------------------
# SNAPSHOT
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StoreSnapshot:
    """Read-only documents plus identifiers whose content failed to load."""

    documents: Mapping[str, Document] = field(default_factory=lambda: MappingProxyType({}))
    unavailable: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def build(
        cls,
        documents: dict[str, Document],
        unavailable: dict[str, str] | None = None,
    ) -> "StoreSnapshot":
        return cls(MappingProxyType(dict(documents)), MappingProxyType(dict(unavailable or {})))


class _SnapshotStore:
    """Query side shared by both stores; subclasses provide `snapshot`."""

    @property
    def snapshot(self) -> StoreSnapshot:
        raise NotImplementedError

    def get(self, identifier: str) -> Document | None:
        """
        Look up a document.

        Returns None for unknown identifiers. Raises ContentUnavailableError
        when the identifier is indexed but its file could not be loaded.
        """
        snapshot = self.snapshot
        if not isinstance(identifier, str):
            return None
        if identifier in snapshot.unavailable:
            raise ContentUnavailableError(identifier, snapshot.unavailable[identifier])
        return snapshot.documents.get(identifier)

    def all(self) -> list[Document]:
        return list(self.snapshot.documents.values())

    def unavailable(self) -> dict[str, str]:
        """Identifiers whose content could not be loaded, with the reason."""
        return dict(self.snapshot.unavailable)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self.snapshot.documents

    def __len__(self) -> int:
        return len(self.snapshot.documents)


# ---------------------------------------------------------------------------
# FILESYSTEM STORE (Production)
# ---------------------------------------------------------------------------


class FileSystemDocumentStore(_SnapshotStore):
    """
    Markdown files in one directory, identifier = filename stem.

    The directory is read on first access and again on every reload().
    """

    def __init__(
        self,
        content_dir: Path | str,
        extensions: Iterable[str] = (".md",),
        diagnostics: DiagnosticsSink | None = None,
        encoding: str = "utf-8",
    ):
        self.content_dir = Path(content_dir)
        self.extensions = tuple(e.lower() for e in extensions)
        self.encoding = encoding
        self._diagnostics = diagnostics if diagnostics is not None else LoggingDiagnostics()
        self._snapshot: StoreSnapshot | None = None

    @property
    def snapshot(self) -> StoreSnapshot:
        snapshot = self._snapshot
        if snapshot is None:
            snapshot = self.reload()
        return snapshot

    def _candidate_files(self) -> list[Path]:
        if not self.content_dir.is_dir():
            logger.warning(f"Content directory not found: {self.content_dir}")
            return []
        return sorted(
            (p for p in self.content_dir.iterdir() if p.is_file() and p.suffix.lower() in self.extensions),
            key=lambda p: p.name,
        )

    def reload(self) -> StoreSnapshot:
        """Read every document file and atomically replace the snapshot."""
        documents: dict[str, Document] = {}
        unavailable: dict[str, str] = {}

        for path in self._candidate_files():
            identifier = path.stem
            if not is_valid_identifier(identifier):
                self._diagnostics.record(
                    DiagnosticKind.INVALID_IDENTIFIER,
                    identifier,
                    f"skipping {path.name}: name is not a URL-path-safe identifier",
                    path=str(path),
                )
                continue
            if identifier in documents or identifier in unavailable:
                self._diagnostics.record(
                    DiagnosticKind.DUPLICATE_IDENTIFIER,
                    identifier,
                    f"skipping {path.name}: identifier already loaded",
                    path=str(path),
                )
                continue

            try:
                raw = path.read_text(encoding=self.encoding)
            except (OSError, UnicodeDecodeError) as e:
                unavailable[identifier] = str(e)
                self._diagnostics.record(
                    DiagnosticKind.LOAD_FAILURE,
                    identifier,
                    f"could not read {path.name}: {e}",
                    path=str(path),
                )
                continue

            documents[identifier] = document_from_text(
                identifier, raw, self._diagnostics, extension=path.suffix
            )

        snapshot = StoreSnapshot.build(documents, unavailable)
        self._snapshot = snapshot
        logger.info(
            f"Loaded {len(documents)} documents from {self.content_dir}"
            + (f" ({len(unavailable)} unavailable)" if unavailable else "")
        )
        return snapshot


# ---------------------------------------------------------------------------
# IN-MEMORY STORE (Testing/Development)
# ---------------------------------------------------------------------------


class InMemoryDocumentStore(_SnapshotStore):
    """
    Documents held in memory.

    Same query interface as FileSystemDocumentStore; `unavailable` simulates
    documents whose content failed to load.
    """

    def __init__(
        self,
        documents: Iterable[Document] = (),
        diagnostics: DiagnosticsSink | None = None,
        unavailable: Mapping[str, str] | None = None,
    ):
        self._diagnostics = diagnostics if diagnostics is not None else LoggingDiagnostics()
        self._snapshot = StoreSnapshot()
        self.replace(documents, unavailable)

    @classmethod
    def from_texts(
        cls,
        texts: Mapping[str, str],
        diagnostics: DiagnosticsSink | None = None,
    ) -> "InMemoryDocumentStore":
        """Build a store from {identifier: raw text}, parsing metadata."""
        return cls(
            [document_from_text(identifier, raw, diagnostics) for identifier, raw in texts.items()],
            diagnostics=diagnostics,
        )

    @property
    def snapshot(self) -> StoreSnapshot:
        return self._snapshot

    def replace(
        self,
        documents: Iterable[Document],
        unavailable: Mapping[str, str] | None = None,
    ) -> StoreSnapshot:
        """Swap in a new document set. The first of duplicate identifiers wins."""
        loaded: dict[str, Document] = {}
        for doc in documents:
            if doc.id in loaded:
                self._diagnostics.record(
                    DiagnosticKind.DUPLICATE_IDENTIFIER,
                    doc.id,
                    "duplicate identifier ignored",
                )
                continue
            loaded[doc.id] = doc

        failed = {k: v for k, v in (unavailable or {}).items() if k not in loaded}
        snapshot = StoreSnapshot.build(loaded, failed)
        self._snapshot = snapshot
        return snapshot


# ---------------------------------------------------------------------------
# FACTORY FUNCTION
# ---------------------------------------------------------------------------


def get_document_store(
    content_dir: Path | str | None = None,
    documents: Iterable[Document] | None = None,
    diagnostics: DiagnosticsSink | None = None,
    config: PipelineConfig | None = None,
) -> FileSystemDocumentStore | InMemoryDocumentStore:
    """
    Factory function to get the appropriate document store.

    Args:
        content_dir: Directory of markdown files (defaults to config.content_dir)
        documents: If given, build an InMemoryDocumentStore from them instead
        diagnostics: Sink for load-time notes
        config: Pipeline configuration (uses env-derived defaults if not provided)

    Returns:
        DocumentStore implementation
    """
    if documents is not None:
        return InMemoryDocumentStore(documents, diagnostics=diagnostics)

    config = config or get_config()
    return FileSystemDocumentStore(
        content_dir if content_dir is not None else config.content_dir,
        extensions=config.extensions,
        diagnostics=diagnostics,
    )
