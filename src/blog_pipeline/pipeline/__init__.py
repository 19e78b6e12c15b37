"""
Pipeline module - the per-document content queries.

This module provides:
- extract_metadata(): Metadata block -> BlogMetadata + body
- extract_outline(): Headings -> anchor-linked outline
- ReferenceRewriter: Legacy/relative internal links -> canonical paths
- RelatednessRanker: Top-K related documents by shared tags and date
- SequenceNavigator: Previous/next in publish order
- parse_blocks() / render(): Node tree and hook-driven rendering

The page facade (BlogPipeline) lives in blog_pipeline.pipeline.view; it
depends on the store, which in turn depends on this module's metadata
extractor, so it is not re-exported here.
"""

# Markdown scanning
from blog_pipeline.pipeline.markdown import (
    Segment,
    iter_lines,
    match_heading,
    split_segments,
)

# Metadata
from blog_pipeline.pipeline.metadata import (
    MetadataBlock,
    extract_metadata,
    parse_metadata_block,
    split_metadata,
)

# Outline
from blog_pipeline.pipeline.outline import (
    OutlineEntry,
    anchor_id,
    extract_outline,
)

# References
from blog_pipeline.pipeline.references import (
    Reference,
    ReferenceRewriter,
    RewriteResult,
    split_internal_target,
)

# Ranking and navigation
from blog_pipeline.pipeline.ranking import RankedDocument, RelatednessRanker
from blog_pipeline.pipeline.navigation import Navigation, SequenceNavigator

# Rendering
from blog_pipeline.pipeline.rendering import Node, parse_blocks, render

__all__ = [
    # Markdown
    "Segment",
    "iter_lines",
    "match_heading",
    "split_segments",
    # Metadata
    "MetadataBlock",
    "extract_metadata",
    "parse_metadata_block",
    "split_metadata",
    # Outline
    "OutlineEntry",
    "anchor_id",
    "extract_outline",
    # References
    "Reference",
    "ReferenceRewriter",
    "RewriteResult",
    "split_internal_target",
    # Ranking / navigation
    "RankedDocument",
    "RelatednessRanker",
    "Navigation",
    "SequenceNavigator",
    # Rendering
    "Node",
    "parse_blocks",
    "render",
]
