"""
Unit Tests for the Reference Rewriter

Tests canonicalization of internal links against an in-memory store.

STAFF ENGINEER PATTERNS:
------------------------
1. Use the in-memory store as the test double
2. Verify idempotency: rewrite(rewrite(x)) == rewrite(x)
3. External links and code are never touched
4. Unresolved references pass through and are reported
"""

import pytest

from blog_pipeline.config import LinkConfig
from blog_pipeline.core.errors import DiagnosticKind
from blog_pipeline.observability.diagnostics import CollectingDiagnostics
from blog_pipeline.pipeline.references import ReferenceRewriter, split_internal_target
from blog_pipeline.store import Document, InMemoryDocumentStore


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------


@pytest.fixture
def store():
    return InMemoryDocumentStore(
        [
            Document(id="other", body="Other body"),
            Document(id="terminal-setup", body="Terminal"),
        ]
    )


@pytest.fixture
def diagnostics():
    return CollectingDiagnostics()


@pytest.fixture
def rewriter(store, diagnostics):
    return ReferenceRewriter(store, diagnostics=diagnostics)


# ---------------------------------------------------------------------------
# TARGET PARSING
# ---------------------------------------------------------------------------


class TestSplitInternalTarget:
    """Test recognising internal document paths."""

    @pytest.mark.parametrize(
        "target,expected",
        [
            ("/blogs/other", ("other", "")),
            ("/blog/other", ("other", "")),
            ("/blogs/other.md", ("other", "")),
            ("/blog/other.md#intro", ("other", "#intro")),
            ("/blogs/other?ref=home#top", ("other", "?ref=home#top")),
            ("/blogs/other/", ("other", "")),
        ],
    )
    def test_internal(self, target, expected):
        assert split_internal_target(target, LinkConfig()) == expected

    @pytest.mark.parametrize(
        "target",
        [
            "https://example.com/blog/post",
            "/about",
            "/blogs/",
            "/blogs/2023/post",
            "other",
            "#section",
        ],
    )
    def test_not_internal(self, target):
        assert split_internal_target(target, LinkConfig()) is None


# ---------------------------------------------------------------------------
# REWRITING
# ---------------------------------------------------------------------------


class TestRewrite:
    """Test ReferenceRewriter.rewrite."""

    def test_canonical_link_unchanged(self, rewriter):
        body = "Some text [see](/blogs/other)"
        assert rewriter.rewrite(body) == body

    def test_legacy_link_rewritten(self, rewriter):
        body = "Read [this](/blog/other) next."
        assert rewriter.rewrite(body) == "Read [this](/blogs/other) next."

    def test_md_suffix_and_fragment(self, rewriter):
        body = "[x](/blog/terminal-setup.md#prompt)"
        assert rewriter.rewrite(body) == "[x](/blogs/terminal-setup#prompt)"

    def test_title_preserved(self, rewriter):
        body = '[x](/blog/other "Other post")'
        assert rewriter.rewrite(body) == '[x](/blogs/other "Other post")'

    def test_image_not_touched(self, rewriter):
        body = "![diagram](/blog/other)"
        assert rewriter.rewrite(body) == body

    def test_reference_definition(self, rewriter):
        body = "See [the post][p].\n\n[p]: /blog/other\n"
        assert rewriter.rewrite(body) == "See [the post][p].\n\n[p]: /blogs/other\n"

    def test_html_href(self, rewriter):
        body = '<a href="/blog/other#x">other</a>'
        assert rewriter.rewrite(body) == '<a href="/blogs/other#x">other</a>'

    def test_external_link_untouched(self, rewriter):
        body = "[ext](https://example.com/blog/other)"
        assert rewriter.rewrite(body) == body

    def test_fenced_code_untouched(self, rewriter):
        body = "```md\n[x](/blog/other)\n```\n[y](/blog/other)\n"
        assert rewriter.rewrite(body) == "```md\n[x](/blog/other)\n```\n[y](/blogs/other)\n"

    def test_inline_code_untouched(self, rewriter):
        body = "Use `[x](/blog/other)` syntax, or [y](/blog/other)."
        assert rewriter.rewrite(body) == "Use `[x](/blog/other)` syntax, or [y](/blogs/other)."

    def test_code_span_spanning_lines(self, rewriter):
        body = "Run `pip\ninstall x` then [y](/blog/other)."
        assert rewriter.rewrite(body) == "Run `pip\ninstall x` then [y](/blogs/other)."

    def test_stray_backticks_do_not_pair_across_paragraphs(self, rewriter, diagnostics):
        body = (
            "Press the ` key.\n\n"
            "See [a](/blog/other) and [gone](/blog/missing).\n\n"
            "Another ` here.\n"
        )
        result = rewriter.scan(body, source_id="post")

        assert "[a](/blogs/other)" in result.text
        assert [r.identifier for r in result.references] == ["other", "missing"]
        assert len(diagnostics.of_kind(DiagnosticKind.UNRESOLVED_REFERENCE)) == 1

    def test_idempotent(self, rewriter):
        body = (
            "[a](/blog/other) [b](/blogs/terminal-setup.md) "
            "[c](/blog/missing) <a href='/blog/other'>d</a>\n\n[e]: /blog/other\n"
        )
        once = rewriter.rewrite(body)
        assert rewriter.rewrite(once) == once

    def test_multiple_links_on_one_line(self, rewriter):
        body = "[a](/blog/other) and [b](/blog/terminal-setup)"
        assert rewriter.rewrite(body) == "[a](/blogs/other) and [b](/blogs/terminal-setup)"


# ---------------------------------------------------------------------------
# UNRESOLVED REFERENCES
# ---------------------------------------------------------------------------


class TestUnresolved:
    """Test references to documents that do not exist."""

    def test_passed_through_verbatim(self, rewriter):
        body = "A [draft](/blog/missing) link."
        assert rewriter.rewrite(body) == body

    def test_reported(self, rewriter, diagnostics):
        rewriter.rewrite("A [draft](/blogs/missing) link.", source_id="post")

        notes = diagnostics.of_kind(DiagnosticKind.UNRESOLVED_REFERENCE)
        assert len(notes) == 1
        assert notes[0].document_id == "post"
        assert notes[0].details["identifier"] == "missing"

    def test_scan_lists_references(self, rewriter):
        result = rewriter.scan("[a](/blog/other) [b](/blogs/missing) [c](https://x.org)")

        assert [r.identifier for r in result.references] == ["other", "missing"]
        assert [r.identifier for r in result.unresolved] == ["missing"]
        assert result.references[0].changed
        assert result.references[0].rewritten == "/blogs/other"

    def test_unlink_unresolved(self, store, diagnostics):
        rewriter = ReferenceRewriter(
            store, LinkConfig(unlink_unresolved=True), diagnostics
        )
        body = "A [draft](/blog/missing) and [real](/blog/other)."
        assert rewriter.rewrite(body) == "A draft and [real](/blogs/other)."

    def test_store_reload_changes_resolution(self, store, rewriter):
        body = "[new](/blog/new-post)"
        assert rewriter.rewrite(body) == body

        store.replace(store.all() + [Document(id="new-post", body="")])
        assert rewriter.rewrite(body) == "[new](/blogs/new-post)"


# ---------------------------------------------------------------------------
# PATHS AND CONFIG
# ---------------------------------------------------------------------------


class TestResolvePath:
    """Test legacy path routing."""

    def test_legacy_and_canonical_resolve_alike(self, rewriter):
        assert rewriter.resolve_path("/blog/other") == "other"
        assert rewriter.resolve_path("/blogs/other") == "other"

    def test_unknown_or_foreign(self, rewriter):
        assert rewriter.resolve_path("/blogs/missing") is None
        assert rewriter.resolve_path("/about") is None

    def test_custom_prefixes(self, store):
        links = LinkConfig(canonical_prefix="posts", legacy_prefixes=("/old/",))
        rewriter = ReferenceRewriter(store, links, CollectingDiagnostics())

        assert rewriter.rewrite("[x](/old/other)") == "[x](/posts/other)"
        assert rewriter.rewrite("[x](/blog/other)") == "[x](/blog/other)"
