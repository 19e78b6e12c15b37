"""
Rendering hooks - a generic walk over a parsed document.

The presentation layer supplies a mapping from node kind to a callable
`hook(node, rendered_children)`; the walk renders children first and calls
the hook for each node whose kind it maps. Kinds without a hook fall back
to plain text, so an empty mapping renders the body as text.

USAGE:
------
hooks = {
    HEADING: lambda n, kids: f'<h{n.attrs["level"]} id="{n.attrs["anchor_id"]}">{"".join(kids)}</h{n.attrs["level"]}>',
    LINK: lambda n, kids: f'<a href="{n.attrs["href"]}">{"".join(kids)}</a>',
}
html = "\\n".join(render(parse_blocks(body), hooks))
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from blog_pipeline.config import LinkConfig
from blog_pipeline.pipeline.markdown import FENCE_RE, split_segments, match_heading
from blog_pipeline.pipeline.outline import anchor_id

# Node kinds
HEADING = "heading"
PARAGRAPH = "paragraph"
CODE_BLOCK = "code_block"
BLOCKQUOTE = "blockquote"
LIST_ITEM = "list_item"
TEXT = "text"
LINK = "link"
IMAGE = "image"
INLINE_CODE = "inline_code"

NODE_KINDS = frozenset(
    {HEADING, PARAGRAPH, CODE_BLOCK, BLOCKQUOTE, LIST_ITEM, TEXT, LINK, IMAGE, INLINE_CODE}
)

Hook = Callable[["Node", list[Any]], Any]

_LIST_ITEM_RE = re.compile(r"^[ \t]*(?:[-*+]|\d+[.)])[ \t]+(?P<text>.*)$")
_QUOTE_RE = re.compile(r"^ {0,3}>[ ]?(?P<text>.*)$")
_INLINE_RE = re.compile(
    r"(?P<tick>`+)(?P<code>[^`]*?)(?P=tick)"
    r"|!\[(?P<alt>[^\]\n]*)\]\((?P<src>[^\s()]+)(?:[ \t]+\"(?P<ititle>[^\"\n]*)\")?\)"
    r"|\[(?P<ltext>(?:[^\[\]\n]|\[[^\[\]\n]*\])*)\]\((?P<href>[^\s()]+)(?:[ \t]+\"(?P<ltitle>[^\"\n]*)\")?\)"
)


@dataclass
class Node:
    """One element of the parsed document tree."""

    kind: str
    text: str = ""
    attrs: dict[str, Any] = field(default_factory=dict)
    children: list["Node"] = field(default_factory=list)


# ---------------------------------------------------------------------------
# PARSING
# ---------------------------------------------------------------------------


def parse_inline(text: str, links: LinkConfig | None = None) -> list[Node]:
    """Split a run of prose into text, link, image and inline-code nodes."""
    links = links or LinkConfig()
    nodes: list[Node] = []
    position = 0
    for match in _INLINE_RE.finditer(text):
        if match.start() > position:
            nodes.append(Node(TEXT, text[position:match.start()]))
        if match.group("tick") is not None:
            nodes.append(Node(INLINE_CODE, match.group("code")))
        elif match.group("src") is not None:
            nodes.append(
                Node(
                    IMAGE,
                    match.group("alt"),
                    attrs={"src": match.group("src"), "alt": match.group("alt"), "title": match.group("ititle")},
                )
            )
        else:
            href = match.group("href")
            nodes.append(
                Node(
                    LINK,
                    match.group("ltext"),
                    attrs={
                        "href": href,
                        "title": match.group("ltitle"),
                        "internal": href.startswith(links.canonical_prefix),
                    },
                    children=parse_inline(match.group("ltext"), links),
                )
            )
        position = match.end()
    if position < len(text):
        nodes.append(Node(TEXT, text[position:]))
    return nodes


def _code_block(segment_text: str, info: str) -> Node:
    content = segment_text.splitlines()[1:]
    closing = FENCE_RE.match(content[-1]) if content else None
    if closing is not None and not closing.group("info").strip():
        content = content[:-1]
    words = info.split()
    language = words[0] if words else None
    return Node(CODE_BLOCK, "\n".join(content), attrs={"language": language})


def parse_blocks(body: str, links: LinkConfig | None = None) -> list[Node]:
    """Parse a body into block nodes in document order."""
    links = links or LinkConfig()
    blocks: list[Node] = []
    paragraph: list[str] = []
    quote: list[str] = []

    def flush_paragraph() -> None:
        if paragraph:
            text = "\n".join(paragraph)
            blocks.append(Node(PARAGRAPH, text, children=parse_inline(text, links)))
            paragraph.clear()

    def flush_quote() -> None:
        if quote:
            text = "\n".join(quote)
            inner = Node(PARAGRAPH, text, children=parse_inline(text, links))
            blocks.append(Node(BLOCKQUOTE, text, children=[inner]))
            quote.clear()

    for segment in split_segments(body):
        if segment.is_code:
            flush_paragraph()
            flush_quote()
            blocks.append(_code_block(segment.text, segment.info))
            continue

        for line in segment.text.splitlines():
            heading = match_heading(line)
            quoted = _QUOTE_RE.match(line)
            item = _LIST_ITEM_RE.match(line)
            if not line.strip():
                flush_paragraph()
                flush_quote()
            elif heading is not None:
                flush_paragraph()
                flush_quote()
                level, text = heading
                blocks.append(
                    Node(
                        HEADING,
                        text,
                        attrs={"level": level, "anchor_id": anchor_id(text)},
                        children=parse_inline(text, links),
                    )
                )
            elif quoted is not None:
                flush_paragraph()
                quote.append(quoted.group("text"))
            elif item is not None:
                flush_paragraph()
                flush_quote()
                text = item.group("text")
                blocks.append(Node(LIST_ITEM, text, children=parse_inline(text, links)))
            else:
                flush_quote()
                paragraph.append(line.strip())

    flush_paragraph()
    flush_quote()
    return blocks


# ---------------------------------------------------------------------------
# WALK
# ---------------------------------------------------------------------------


def _default_render(node: Node, children: list[Any]) -> Any:
    if node.kind in (TEXT, INLINE_CODE, CODE_BLOCK):
        return node.text
    if node.kind == IMAGE:
        return node.attrs.get("alt") or ""
    if children and all(isinstance(c, str) for c in children):
        return "".join(children)
    if children:
        return children
    return node.text


def render_node(node: Node, hooks: Mapping[str, Hook]) -> Any:
    """Render children first, then the node through its hook or the default."""
    children = [render_node(child, hooks) for child in node.children]
    hook = hooks.get(node.kind)
    if hook is not None:
        return hook(node, children)
    return _default_render(node, children)


def render(nodes: list[Node], hooks: Mapping[str, Hook] | None = None) -> list[Any]:
    """Render each top-level block; no hook is required."""
    hooks = hooks or {}
    unknown = set(hooks) - NODE_KINDS
    if unknown:
        raise ValueError(f"Unknown node kinds in hooks: {sorted(unknown)}")
    return [render_node(node, hooks) for node in nodes]
