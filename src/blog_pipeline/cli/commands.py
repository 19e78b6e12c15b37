"""
CLI commands - entry points for querying a blog collection.

Each command follows a consistent pattern:
1. Parse arguments
2. Load environment
3. Build the pipeline over a store
4. Print results (text or --json)
5. Return exit code

Exit codes:
    0  success
    1  document not found, or `check` found problems
    2  document exists but its content could not be loaded
    130 interrupted
"""

from __future__ import annotations

import argparse
import json
import sys

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_UNAVAILABLE = 2
EXIT_INTERRUPTED = 130


def _load_env() -> None:
    """Load environment variables from .env file."""
    try:
        from dotenv import load_dotenv

        load_dotenv()
    except ImportError:
        pass  # dotenv is optional


def _parser(description: str, with_id: bool = True) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    if with_id:
        parser.add_argument("document_id", help="Blog identifier (filename without extension)")
    parser.add_argument("--content-dir", help="Directory of markdown blogs (default: $BLOG_CONTENT_DIR)")
    parser.add_argument("--sample", action="store_true", help="Use the bundled sample blogs")
    parser.add_argument("--json", action="store_true", help="Output JSON instead of formatted text")
    return parser


def _build_pipeline(args: argparse.Namespace, diagnostics=None):
    """Pipeline over the sample collection or a content directory."""
    from blog_pipeline.config import get_config
    from blog_pipeline.observability.diagnostics import get_diagnostics
    from blog_pipeline.pipeline.view import BlogPipeline
    from blog_pipeline.store import get_document_store, get_sample_documents

    config = get_config()
    if diagnostics is None:
        diagnostics = get_diagnostics()
    if args.sample:
        store = get_document_store(documents=get_sample_documents(diagnostics), diagnostics=diagnostics)
    else:
        store = get_document_store(content_dir=args.content_dir, diagnostics=diagnostics, config=config)
    return BlogPipeline(store, config=config, diagnostics=diagnostics)


def _lookup(pipeline, document_id: str) -> int:
    """Exit code for a document lookup: found, missing or unavailable."""
    from blog_pipeline.core.errors import ContentUnavailableError

    try:
        document = pipeline.store.get(document_id)
    except ContentUnavailableError as e:
        print(f"Blog '{document_id}' is unavailable: {e.reason}", file=sys.stderr)
        return EXIT_UNAVAILABLE
    if document is None:
        print(f"Blog '{document_id}' not found", file=sys.stderr)
        return EXIT_NOT_FOUND
    return EXIT_OK


def _print_json(data) -> None:
    print(json.dumps(data, indent=2))


# ---------------------------------------------------------------------------
# COMMANDS
# ---------------------------------------------------------------------------


def run_show_cli() -> int:
    """Show one assembled blog page."""
    from blog_pipeline.pipeline.view import BlogUnavailable

    args = _parser("Show a blog page").parse_args()
    pipeline = _build_pipeline(args)
    page = pipeline.view(args.document_id)

    if page is None:
        print(f"Blog '{args.document_id}' not found", file=sys.stderr)
        return EXIT_NOT_FOUND
    if isinstance(page, BlogUnavailable):
        if args.json:
            _print_json(page.to_dict())
        else:
            print(f"Blog '{page.document_id}' is unavailable: {page.reason}", file=sys.stderr)
        return EXIT_UNAVAILABLE

    if args.json:
        _print_json(page.to_dict())
        return EXIT_OK

    doc = page.document
    print("=" * 60)
    print(doc.title.upper())
    print("=" * 60)
    print(f"Date: {doc.metadata.date_label}")
    if doc.tags:
        print(f"Tags: {', '.join(sorted(doc.tags))}")
    if doc.description:
        print(f"\n{doc.description}")

    if page.outline:
        print("\nOn this page:")
        for entry in page.outline:
            print(f"  {'  ' * (entry.level - 1)}- {entry.text} (#{entry.anchor_id})")

    print("\n" + "-" * 60)
    print(page.body.strip())
    print("-" * 60)

    if page.related:
        print("\nRelated:")
        for ranked in page.related:
            print(f"  {ranked.document.title} [{ranked.document.id}] (score: {ranked.score:.3f})")

    nav = page.navigation
    print(f"\nPrevious: {nav.previous.title if nav.previous else '-'}")
    print(f"Next:     {nav.next.title if nav.next else '-'}")

    if page.unresolved:
        print(f"\nUnresolved links: {', '.join(r.target for r in page.unresolved)}")
    return EXIT_OK


def run_outline_cli() -> int:
    """Print the outline of one blog."""
    args = _parser("Show a blog outline").parse_args()
    pipeline = _build_pipeline(args)
    code = _lookup(pipeline, args.document_id)
    if code != EXIT_OK:
        return code

    outline = pipeline.outline(args.document_id)
    if args.json:
        _print_json([entry.to_dict() for entry in outline])
    else:
        for entry in outline:
            print(f"{'  ' * (entry.level - 1)}{entry.text}  #{entry.anchor_id}")
    return EXIT_OK


def run_related_cli() -> int:
    """Print the documents most related to one blog."""
    parser = _parser("Show related blogs")
    parser.add_argument("-k", type=int, default=None, help="Number of results (default: $BLOG_RELATED_COUNT)")
    args = parser.parse_args()
    pipeline = _build_pipeline(args)
    code = _lookup(pipeline, args.document_id)
    if code != EXIT_OK:
        return code

    related = pipeline.related(args.document_id, args.k)
    if args.json:
        _print_json([{**r.document.to_dict(), "score": r.score} for r in related])
    else:
        for rank, r in enumerate(related, start=1):
            print(f"  {rank}. {r.document.id:<24} {r.score:.3f}  {r.document.title}")
    return EXIT_OK


def run_nav_cli() -> int:
    """Print previous/next neighbours of one blog."""
    args = _parser("Show previous/next blogs").parse_args()
    pipeline = _build_pipeline(args)
    code = _lookup(pipeline, args.document_id)
    if code != EXIT_OK:
        return code

    nav = pipeline.neighbors(args.document_id)
    if args.json:
        _print_json(nav.to_dict())
    else:
        print(f"Previous: {nav.previous.id if nav.previous else '-'}")
        print(f"Next:     {nav.next.id if nav.next else '-'}")
    return EXIT_OK


def run_list_cli() -> int:
    """List every blog, newest first."""
    args = _parser("List blogs", with_id=False).parse_args()
    pipeline = _build_pipeline(args)
    documents = pipeline.index()

    if args.json:
        _print_json([d.to_dict() for d in documents])
        return EXIT_OK

    print("=" * 60)
    print(f"BLOGS ({len(documents)})")
    print("=" * 60)
    for doc in documents:
        print(f"  {doc.metadata.date_label:<12} {doc.id:<24} {doc.title}")
    return EXIT_OK


def run_check_cli() -> int:
    """Validate metadata, links and loadability of the whole collection."""
    from blog_pipeline.observability import CollectingDiagnostics

    args = _parser("Check blog content integrity", with_id=False).parse_args()
    # Load-time notes are reported again by check(); keep them out of stderr.
    pipeline = _build_pipeline(args, diagnostics=CollectingDiagnostics())
    notes = pipeline.check()

    if args.json:
        _print_json([note.to_dict() for note in notes])
    else:
        print("=" * 60)
        print("CONTENT CHECK")
        print("=" * 60)
        for note in notes:
            where = note.document_id or "-"
            print(f"  [{note.kind.value}] {where}: {note.message}")
        print(f"\nDocuments: {len(pipeline.store)}")
        print(f"Problems: {len(notes)}")
        print("\n>>> CONTENT CHECK: " + ("PASSED" if not notes else "FAILED") + " <<<")

    return EXIT_OK if not notes else EXIT_NOT_FOUND


def main() -> int:
    """
    Main CLI entry point with subcommands.

    Usage:
        blog-pipeline show <id>        # Assembled page
        blog-pipeline outline <id>     # Heading outline
        blog-pipeline related <id>     # Related blogs
        blog-pipeline nav <id>         # Previous/next
        blog-pipeline list             # All blogs, newest first
        blog-pipeline check            # Content integrity report
    """
    _load_env()

    parser = argparse.ArgumentParser(
        description="Blog content pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  show      Render the assembled page for one blog
  outline   Heading outline with anchor ids
  related   Top-k related blogs by shared tags and date
  nav       Previous/next blog in publish order
  list      All blogs, newest first
  check     Report malformed metadata, broken links, unreadable files

Examples:
  blog-pipeline list --sample
  blog-pipeline show hello-world --content-dir ./blogs
  blog-pipeline related python-tooling -k 5 --json
  blog-pipeline check
        """,
    )

    parser.add_argument(
        "command",
        choices=["show", "outline", "related", "nav", "list", "check"],
        help="Query to run",
    )

    # Parse just the command first
    args, remaining = parser.parse_known_args()

    commands = {
        "show": run_show_cli,
        "outline": run_outline_cli,
        "related": run_related_cli,
        "nav": run_nav_cli,
        "list": run_list_cli,
        "check": run_check_cli,
    }

    # Re-inject remaining args for the subcommand
    sys.argv = [sys.argv[0]] + remaining

    try:
        return commands[args.command]()
    except KeyboardInterrupt:
        print("\nInterrupted")
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
