"""
Outline Extractor - headings of a document body, in order, with anchors.

anchor_id() is the one normalization for intra-document jump targets; the
rendering walk uses it for heading nodes so generated anchors always match
the outline.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from blog_pipeline.pipeline.markdown import iter_lines, match_heading

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")

ANCHOR_SEPARATOR = "-"


def anchor_id(text: str) -> str:
    """
    Normalize heading text into a URL-fragment-safe anchor.

    Lowercase, each maximal run outside [a-z0-9] becomes one "-", then
    leading/trailing "-" are stripped. "Sub A" -> "sub-a".
    """
    return _NON_ALNUM_RUN.sub(ANCHOR_SEPARATOR, text.lower()).strip(ANCHOR_SEPARATOR)


@dataclass(frozen=True)
class OutlineEntry:
    """One heading of the outline."""

    anchor_id: str
    text: str
    level: int  # 1-6

    def to_dict(self) -> dict:
        return {"anchor_id": self.anchor_id, "text": self.text, "level": self.level}


def extract_outline(body: str) -> list[OutlineEntry]:
    """
    Scan a body line by line for "#"-headings outside fenced code.

    Lines inside ``` or ~~~ fences are skipped on purpose: a shell comment
    in a code sample is not a section of the post.

    Duplicate heading text yields duplicate anchor IDs; an empty heading
    yields an empty anchor.
    """
    entries: list[OutlineEntry] = []
    for line, in_fence in iter_lines(body):
        if in_fence:
            continue
        heading = match_heading(line)
        if heading is None:
            continue
        level, text = heading
        entries.append(OutlineEntry(anchor_id=anchor_id(text), text=text, level=level))
    return entries
