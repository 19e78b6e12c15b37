"""
Line-oriented markdown scanning shared by the outline, reference and
rendering components.

Only the distinction the pipeline needs is made here: prose lines versus
lines inside fenced code blocks. Neither headings nor links are recognised
inside a fence.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator

# Opening/closing fence: up to 3 spaces of indent, 3+ backticks or tildes.
FENCE_RE = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})(?P<info>[^\n]*)$")

HEADING_RE = re.compile(r"^(?P<marks>#{1,6})[ \t]+(?P<text>.+)$")


@dataclass(frozen=True)
class Segment:
    """A run of consecutive lines that are either all prose or one code block."""

    text: str
    is_code: bool
    info: str = ""  # fence info string for code segments, e.g. "python"


def _strip_eol(line: str) -> str:
    return line.rstrip("\r\n")


def iter_lines(text: str) -> Iterator[tuple[str, bool]]:
    """Yield (line including its line ending, inside_fence) pairs."""
    fence: str | None = None
    for line in text.splitlines(keepends=True):
        bare = _strip_eol(line)
        if fence is None:
            match = FENCE_RE.match(bare)
            if match and not (match.group("fence")[0] == "`" and "`" in match.group("info")):
                fence = match.group("fence")
                yield line, True
                continue
            yield line, False
        else:
            match = FENCE_RE.match(bare)
            if (
                match
                and not match.group("info").strip()
                and match.group("fence")[0] == fence[0]
                and len(match.group("fence")) >= len(fence)
            ):
                fence = None
            yield line, True


def split_segments(text: str) -> list[Segment]:
    """
    Split text into alternating prose and fenced-code segments.

    Joining the segment texts reproduces the input exactly.
    """
    segments: list[Segment] = []
    buffer: list[str] = []
    in_code = False
    info = ""
    fence: str | None = None

    def flush(is_code: bool, info: str) -> None:
        if buffer:
            segments.append(Segment("".join(buffer), is_code, info))
            buffer.clear()

    for line in text.splitlines(keepends=True):
        bare = _strip_eol(line)
        match = FENCE_RE.match(bare)
        if not in_code:
            if match and not (match.group("fence")[0] == "`" and "`" in match.group("info")):
                flush(False, "")
                in_code = True
                fence = match.group("fence")
                info = match.group("info").strip()
            buffer.append(line)
        else:
            buffer.append(line)
            if (
                match
                and fence is not None
                and not match.group("info").strip()
                and match.group("fence")[0] == fence[0]
                and len(match.group("fence")) >= len(fence)
            ):
                flush(True, info)
                in_code = False
                fence = None
                info = ""

    flush(in_code, info)
    return segments


def match_heading(line: str) -> tuple[int, str] | None:
    """Return (level, trimmed text) if the line is an ATX heading."""
    match = HEADING_RE.match(_strip_eol(line))
    if match is None:
        return None
    return len(match.group("marks")), match.group("text").strip()
