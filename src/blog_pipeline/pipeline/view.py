"""
BlogPipeline - assembles everything a blog page shows.

One call composes the six queries the page needs, in the order the page
uses them:

    document  -> rewrite body -> outline of rewritten body
              -> related documents -> previous/next

USAGE:
------
pipeline = BlogPipeline(get_document_store())
page = pipeline.view("hello-world")
if isinstance(page, BlogView):
    render(page.body, page.outline, page.related, page.navigation)
elif isinstance(page, BlogUnavailable):
    show_error(page.reason)
else:
    show_not_found()

Public methods never raise for content problems: unknown identifiers give
None, unloadable files give BlogUnavailable, everything else becomes a
diagnostic note.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from blog_pipeline.config import PipelineConfig, get_config
from blog_pipeline.core.errors import ContentUnavailableError, DiagnosticKind
from blog_pipeline.core.protocols import DiagnosticNote, DiagnosticsSink, DocumentStore
from blog_pipeline.observability import (
    BLOG_DOCUMENT_AVAILABLE,
    BLOG_DOCUMENT_FOUND,
    BLOG_NAV_NEXT_ID,
    BLOG_NAV_PREVIOUS_ID,
    BLOG_OUTLINE_ENTRIES,
    BLOG_REFERENCES_TOTAL,
    BLOG_REFERENCES_UNRESOLVED,
    CollectingDiagnostics,
    LoggingDiagnostics,
    document_attributes,
    get_tracer,
    related_attributes,
)
from blog_pipeline.pipeline.metadata import extract_metadata
from blog_pipeline.pipeline.navigation import Navigation, SequenceNavigator
from blog_pipeline.pipeline.outline import OutlineEntry, extract_outline
from blog_pipeline.pipeline.ranking import RankedDocument, RelatednessRanker
from blog_pipeline.pipeline.references import Reference, ReferenceRewriter
from blog_pipeline.store.document import Document

logger = logging.getLogger(__name__)

_LOAD_TIME_KINDS = (DiagnosticKind.INVALID_IDENTIFIER, DiagnosticKind.DUPLICATE_IDENTIFIER)


# ---------------------------------------------------------------------------
# RESULT TYPES
# ---------------------------------------------------------------------------


@dataclass
class BlogView:
    """Everything one blog page renders."""

    document: Document
    body: str
    outline: list[OutlineEntry] = field(default_factory=list)
    related: list[RankedDocument] = field(default_factory=list)
    navigation: Navigation = field(default_factory=Navigation)
    references: list[Reference] = field(default_factory=list)

    @property
    def document_id(self) -> str:
        return self.document.id

    @property
    def unresolved(self) -> list[Reference]:
        return [r for r in self.references if not r.resolved]

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "document": self.document.to_dict(),
            "body": self.body,
            "outline": [entry.to_dict() for entry in self.outline],
            "related": [
                {**ranked.document.to_dict(), "score": ranked.score}
                for ranked in self.related
            ],
            "navigation": self.navigation.to_dict(),
            "unresolved": [r.target for r in self.unresolved],
        }


@dataclass
class BlogUnavailable:
    """The document exists but its content could not be loaded."""

    document_id: str
    reason: str

    def to_dict(self) -> dict:
        return {"document_id": self.document_id, "error": "unavailable", "reason": self.reason}


# ---------------------------------------------------------------------------
# PIPELINE
# ---------------------------------------------------------------------------


class BlogPipeline:
    """Query facade over one document store."""

    def __init__(
        self,
        store: DocumentStore,
        config: PipelineConfig | None = None,
        diagnostics: DiagnosticsSink | None = None,
    ):
        self.store = store
        self.config = config or get_config()
        self.diagnostics = diagnostics if diagnostics is not None else LoggingDiagnostics()
        self.rewriter = ReferenceRewriter(store, self.config.links, self.diagnostics)
        self.ranker = RelatednessRanker(store, self.config.ranking)
        self.navigator = SequenceNavigator(store)

    # -- page ------------------------------------------------------------------

    def view(self, identifier: str) -> BlogView | BlogUnavailable | None:
        """Assemble the page for one document."""
        tracer = get_tracer()
        with tracer.start_span(
            "blog.view",
            attributes=document_attributes("view", identifier, len(self.store)),
        ) as span:
            try:
                document = self.store.get(identifier)
            except ContentUnavailableError as e:
                logger.warning(f"Blog {identifier} unavailable: {e.reason}")
                span.set_attributes({BLOG_DOCUMENT_FOUND: True, BLOG_DOCUMENT_AVAILABLE: False})
                span.set_status("error", str(e))
                return BlogUnavailable(document_id=identifier, reason=e.reason)

            span.set_attribute(BLOG_DOCUMENT_FOUND, document is not None)
            if document is None:
                return None
            span.set_attribute(BLOG_DOCUMENT_AVAILABLE, True)

            scanned = self.rewriter.scan(document.body, document.id)
            outline = extract_outline(scanned.text)
            related = self.ranker.rank(document.id, self.config.related_count)
            navigation = self.navigator.neighbors(document.id)

            span.set_attributes(
                {
                    BLOG_OUTLINE_ENTRIES: len(outline),
                    BLOG_REFERENCES_TOTAL: len(scanned.references),
                    BLOG_REFERENCES_UNRESOLVED: len(scanned.unresolved),
                    **related_attributes(
                        self.config.related_count, [r.document.id for r in related]
                    ),
                }
            )
            if navigation.previous is not None:
                span.set_attribute(BLOG_NAV_PREVIOUS_ID, navigation.previous.id)
            if navigation.next is not None:
                span.set_attribute(BLOG_NAV_NEXT_ID, navigation.next.id)
            span.set_status("ok")

            return BlogView(
                document=document,
                body=scanned.text,
                outline=outline,
                related=related,
                navigation=navigation,
                references=scanned.references,
            )

    def index(self) -> list[Document]:
        """Blog list, newest first; identifier breaks ties."""
        by_id = sorted(self.store.all(), key=lambda d: d.id)
        return sorted(by_id, key=lambda d: d.date, reverse=True)

    def resolve_path(self, path: str) -> Document | None:
        """Route a canonical or legacy page path to its document."""
        identifier = self.rewriter.resolve_path(path)
        if identifier is None:
            return None
        try:
            return self.store.get(identifier)
        except ContentUnavailableError:
            return None

    # -- single queries ----------------------------------------------------------

    def outline(self, identifier: str) -> list[OutlineEntry]:
        document = self._get(identifier)
        if document is None:
            return []
        return extract_outline(self.rewriter.rewrite(document.body, document.id))

    def rewrite(self, identifier: str) -> str | None:
        document = self._get(identifier)
        if document is None:
            return None
        return self.rewriter.rewrite(document.body, document.id)

    def related(self, identifier: str, k: int | None = None) -> list[RankedDocument]:
        return self.ranker.rank(identifier, self.config.related_count if k is None else k)

    def neighbors(self, identifier: str) -> Navigation:
        return self.navigator.neighbors(identifier)

    # -- integrity ---------------------------------------------------------------

    def check(self) -> list[DiagnosticNote]:
        """
        Content-integrity report over the whole store.

        Re-validates every document's metadata and references into a fresh
        collector and lists documents that could not be loaded. Identifier
        problems seen at load time are carried over from the pipeline's own
        diagnostics sink when it keeps notes.
        """
        documents = sorted(self.store.all(), key=lambda d: d.id)
        collector = CollectingDiagnostics()
        checker = ReferenceRewriter(self.store, self.config.links, collector)

        for note in self.diagnostics:
            if note.kind in _LOAD_TIME_KINDS:
                collector.record(note.kind, note.document_id, note.message, **note.details)

        unavailable = getattr(self.store, "unavailable", None)
        if callable(unavailable):
            for identifier, reason in sorted(unavailable().items()):
                collector.record(DiagnosticKind.LOAD_FAILURE, identifier, reason)

        for document in documents:
            if document.source is not None:
                extract_metadata(document.source, document.id, collector)
            checker.scan(document.body, document.id)

        notes = collector.notes
        logger.info(f"Content check: {len(notes)} notes over {len(self.store)} documents")
        return notes

    def _get(self, identifier: str) -> Document | None:
        try:
            return self.store.get(identifier)
        except ContentUnavailableError:
            return None

