"""
Reference Rewriter - canonicalize links between documents.

A reference is internal when its target starts with the canonical prefix
("/blogs/") or a legacy prefix ("/blog/"); everything else is external and
never touched. Recognised shapes, outside fenced code and inline code:

    [text](/blog/other "title")     inline link (images are skipped)
    [label]: /blog/other            reference definition
    <a href="/blog/other">          raw HTML href

Targets resolving to a stored document become "/blogs/<id>" with any
?query/#fragment kept. Unresolved targets are passed through verbatim (or
reduced to their visible text with unlink_unresolved) and reported.
Rewriting canonical text is a no-op, so the operation is idempotent.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from blog_pipeline.config import LinkConfig
from blog_pipeline.core.errors import DiagnosticKind
from blog_pipeline.core.protocols import DiagnosticsSink, DocumentStore
from blog_pipeline.observability.diagnostics import LoggingDiagnostics
from blog_pipeline.pipeline.markdown import split_segments

_INLINE = (
    r"(?<!!)\[(?P<ltext>(?:[^\[\]\n]|\[[^\[\]\n]*\])*)\]"
    r"\((?P<lspace>[ \t]*)(?P<ltarget>[^\s()<>]+)"
    r"(?P<ltitle>[ \t]+(?:\"[^\"\n]*\"|'[^'\n]*'))?[ \t]*\)"
)
_DEFINITION = (
    r"^(?P<dlead> {0,3}\[(?P<dlabel>[^\]\n]+)\]:[ \t]*)(?P<dtarget>[^\s<>]+)"
)
_HREF = r"(?P<hlead>\bhref[ \t]*=[ \t]*(?P<hquote>[\"']))(?P<htarget>[^\"'\n]*)(?P=hquote)"
_CODE_SPAN = r"(?P<tick>`+)(?:[^`\n]|\n(?![ \t]*\n))*?(?P=tick)"

_REFERENCE_RE = re.compile(
    rf"{_CODE_SPAN}|{_INLINE}|{_DEFINITION}|{_HREF}",
    re.MULTILINE,
)

_SUFFIX_RE = re.compile(r"(?P<path>[^?#]*)(?P<suffix>.*)", re.DOTALL)


@dataclass(frozen=True)
class Reference:
    """One internal reference found in a body."""

    kind: str  # "inline", "definition" or "html"
    target: str
    identifier: str
    resolved: bool
    rewritten: str | None = None  # new target when resolved

    @property
    def changed(self) -> bool:
        return self.rewritten is not None and self.rewritten != self.target


@dataclass(frozen=True)
class RewriteResult:
    """Rewritten text plus every internal reference encountered."""

    text: str
    references: list[Reference] = field(default_factory=list)

    @property
    def unresolved(self) -> list[Reference]:
        return [r for r in self.references if not r.resolved]


def split_internal_target(target: str, links: LinkConfig) -> tuple[str, str] | None:
    """
    Return (identifier, suffix) if target is an internal document path.

    "/blog/post.md#intro" -> ("post", "#intro"). Paths with more than one
    segment after the prefix, or none, are not document references.
    """
    for prefix in links.internal_prefixes:
        if not target.startswith(prefix):
            continue
        parts = _SUFFIX_RE.match(target[len(prefix):])
        path, suffix = parts.group("path"), parts.group("suffix")
        path = path.rstrip("/")
        if path.lower().endswith(".md"):
            path = path[: -len(".md")]
        if not path or "/" in path:
            return None
        return path, suffix
    return None


class ReferenceRewriter:
    """
    Rewrites internal references against one store.

    Stateless apart from its collaborators; safe to share across calls.
    """

    def __init__(
        self,
        store: DocumentStore,
        links: LinkConfig | None = None,
        diagnostics: DiagnosticsSink | None = None,
    ):
        self._store = store
        self.links = links or LinkConfig()
        self._diagnostics = diagnostics if diagnostics is not None else LoggingDiagnostics()

    # -- public API ----------------------------------------------------------

    def rewrite(self, body: str, source_id: str | None = None) -> str:
        """Return body with every resolvable internal reference canonicalized."""
        return self.scan(body, source_id).text

    def scan(self, body: str, source_id: str | None = None) -> RewriteResult:
        """Rewrite body and report each internal reference."""
        references: list[Reference] = []
        pieces: list[str] = []
        for segment in split_segments(body):
            if segment.is_code:
                pieces.append(segment.text)
            else:
                pieces.append(
                    _REFERENCE_RE.sub(lambda m: self._replace(m, references), segment.text)
                )

        for ref in references:
            if not ref.resolved:
                self._diagnostics.record(
                    DiagnosticKind.UNRESOLVED_REFERENCE,
                    source_id,
                    f"reference to missing document '{ref.identifier}' ({ref.target})",
                    target=ref.target,
                    identifier=ref.identifier,
                )
        return RewriteResult("".join(pieces), references)

    def resolve_path(self, path: str) -> str | None:
        """
        Map a canonical or legacy document path to a stored identifier.

        "/blog/post" and "/blogs/post" resolve to the same document.
        """
        parsed = split_internal_target(path.strip(), self.links)
        if parsed is None:
            return None
        identifier = parsed[0]
        return identifier if identifier in self._store else None

    # -- internals -------------------------------------------------------------

    def _resolve(self, kind: str, target: str) -> Reference | None:
        parsed = split_internal_target(target, self.links)
        if parsed is None:
            return None
        identifier, suffix = parsed
        if identifier in self._store:
            return Reference(
                kind=kind,
                target=target,
                identifier=identifier,
                resolved=True,
                rewritten=self.links.canonical_path(identifier) + suffix,
            )
        return Reference(kind=kind, target=target, identifier=identifier, resolved=False)

    def _replace(self, match: re.Match, references: list[Reference]) -> str:
        if match.group("tick") is not None:
            return match.group(0)

        if match.group("ltarget") is not None:
            ref = self._resolve("inline", match.group("ltarget"))
            if ref is None:
                return match.group(0)
            references.append(ref)
            if ref.resolved:
                return (
                    f"[{match.group('ltext')}]({match.group('lspace')}{ref.rewritten}"
                    f"{match.group('ltitle') or ''})"
                )
            if self.links.unlink_unresolved:
                return match.group("ltext")
            return match.group(0)

        if match.group("dtarget") is not None:
            ref = self._resolve("definition", match.group("dtarget"))
            if ref is None:
                return match.group(0)
            references.append(ref)
            if ref.resolved:
                return f"{match.group('dlead')}{ref.rewritten}"
            return match.group(0)

        ref = self._resolve("html", match.group("htarget"))
        if ref is None:
            return match.group(0)
        references.append(ref)
        if ref.resolved:
            quote = match.group("hquote")
            return f"{match.group('hlead')}{ref.rewritten}{quote}"
        return match.group(0)
