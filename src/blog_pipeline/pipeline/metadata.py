"""
Metadata Extractor - split a raw document into its metadata block and body.

Two block forms are recognised at the very start of the text:

    ---                         <!--
    title: Hello                title: Hello
    date: 2024-03-01            date: 2024-03-01
    tags: [python, web]         -->
    ---

Both are YAML mappings. Extraction never fails: anything malformed falls
back to the BlogMetadata default for that field and is reported as a
MALFORMED_METADATA diagnostic.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

import yaml
from pydantic import ValidationError

from blog_pipeline.core.errors import DiagnosticKind
from blog_pipeline.core.protocols import DiagnosticsSink
from blog_pipeline.observability.diagnostics import LoggingDiagnostics
from blog_pipeline.schemas.metadata import BlogMetadata

logger = logging.getLogger(__name__)

_FRONT_MATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?P<block>.*?)^(?:---|\.\.\.)[ \t]*$(?:\r?\n)?",
    re.DOTALL | re.MULTILINE,
)
_COMMENT_RE = re.compile(r"\A<!--(?P<block>.*?)-->[ \t]*(?:\r?\n)?", re.DOTALL)

KEY_ALIASES = {
    "publishdate": "date",
    "publish_date": "date",
    "published": "date",
    "summary": "description",
    "tag": "tags",
}

KNOWN_FIELDS = frozenset(BlogMetadata.model_fields)


@dataclass(frozen=True)
class MetadataBlock:
    """The raw metadata block found at the top of a document, if any."""

    form: str  # "front_matter", "comment" or "none"
    source: str
    body: str


def _strip_leading_blank_lines(text: str) -> str:
    lines = text.splitlines(keepends=True)
    while lines and not lines[0].strip():
        lines.pop(0)
    return "".join(lines)


def _looks_like_mapping(source: str) -> bool:
    # BaseLoader keeps scalars as strings, so a bad date still reads as a mapping.
    try:
        return isinstance(yaml.load(source, Loader=yaml.BaseLoader), dict)
    except yaml.YAMLError:
        return False


def split_metadata(raw: str) -> MetadataBlock:
    """Locate the metadata block; the body is everything after it."""
    text = raw.lstrip("\ufeff")
    candidate = _strip_leading_blank_lines(text)

    match = _FRONT_MATTER_RE.match(candidate)
    if match:
        return MetadataBlock(
            form="front_matter",
            source=match.group("block"),
            body=_strip_leading_blank_lines(candidate[match.end():]),
        )

    # A leading comment only counts when it holds a YAML mapping.
    match = _COMMENT_RE.match(candidate)
    if match and _looks_like_mapping(match.group("block")):
        return MetadataBlock(
            form="comment",
            source=match.group("block"),
            body=_strip_leading_blank_lines(candidate[match.end():]),
        )

    return MetadataBlock(form="none", source="", body=text)


def _normalize_keys(data: dict[Any, Any]) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for key, value in data.items():
        name = str(key).strip().lower()
        name = KEY_ALIASES.get(name, name)
        if name not in KNOWN_FIELDS or value is None:
            continue
        # An explicit canonical key wins over an alias seen earlier or later.
        if name in fields and str(key).strip().lower() != name:
            continue
        fields[name] = value
    return fields


def _validate_fields(
    fields: dict[str, Any],
    document_id: str | None,
    diagnostics: DiagnosticsSink,
) -> BlogMetadata:
    """Validate, dropping each invalid field until the rest validates."""
    fields = dict(fields)
    while True:
        try:
            return BlogMetadata.model_validate(fields)
        except ValidationError as exc:
            dropped = False
            for error in exc.errors():
                name = error["loc"][0] if error["loc"] else None
                if name in fields:
                    diagnostics.record(
                        DiagnosticKind.MALFORMED_METADATA,
                        document_id,
                        f"invalid '{name}': {error['msg']}",
                        field=name,
                        value=repr(fields[name]),
                    )
                    fields.pop(name)
                    dropped = True
            if not dropped:
                diagnostics.record(
                    DiagnosticKind.MALFORMED_METADATA,
                    document_id,
                    f"metadata rejected: {exc}",
                )
                return BlogMetadata()


def parse_metadata_block(
    block: MetadataBlock,
    document_id: str | None = None,
    diagnostics: DiagnosticsSink | None = None,
) -> BlogMetadata:
    """Parse an already-split block into BlogMetadata with per-field fallback."""
    diagnostics = diagnostics if diagnostics is not None else LoggingDiagnostics()

    if block.form == "none":
        return BlogMetadata()

    try:
        data = yaml.safe_load(block.source) if block.source.strip() else {}
    except (yaml.YAMLError, ValueError) as e:
        # Impossible timestamps such as 2024-02-30 raise ValueError.
        diagnostics.record(
            DiagnosticKind.MALFORMED_METADATA,
            document_id,
            f"metadata block is not valid YAML: {e}",
        )
        return BlogMetadata()

    if data is None:
        data = {}
    if not isinstance(data, dict):
        diagnostics.record(
            DiagnosticKind.MALFORMED_METADATA,
            document_id,
            f"metadata block must be a mapping, got {type(data).__name__}",
        )
        return BlogMetadata()

    return _validate_fields(_normalize_keys(data), document_id, diagnostics)


def extract_metadata(
    raw: str,
    document_id: str | None = None,
    diagnostics: DiagnosticsSink | None = None,
) -> tuple[BlogMetadata, str]:
    """
    Extract metadata and body from a raw document.

    Args:
        raw: Full file text
        document_id: Used only to label diagnostics
        diagnostics: Sink for malformed-field notes (logs if not given)

    Returns:
        (metadata, body) where missing or malformed fields hold defaults
    """
    block = split_metadata(raw)
    metadata = parse_metadata_block(block, document_id, diagnostics)
    if block.form == "none":
        logger.debug(f"No metadata block in {document_id or 'document'}, using defaults")
    return metadata, block.body
