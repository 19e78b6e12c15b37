"""
Span Attribute Keys

Custom `blog.*` namespace for pipeline spans. Values must be OTel
attribute types (str, bool, int, float or sequences of them).
"""

# ---------------------------------------------------------------------------
# DOCUMENT NAMESPACE
# ---------------------------------------------------------------------------

BLOG_DOCUMENT_ID = "blog.document.id"
BLOG_DOCUMENT_FOUND = "blog.document.found"
BLOG_DOCUMENT_AVAILABLE = "blog.document.available"
BLOG_STORE_SIZE = "blog.store.size"


# ---------------------------------------------------------------------------
# PIPELINE NAMESPACE
# ---------------------------------------------------------------------------

BLOG_OPERATION = "blog.operation"  # "view", "outline", "rank", ...
BLOG_OUTLINE_ENTRIES = "blog.outline.entries"
BLOG_REFERENCES_TOTAL = "blog.references.total"
BLOG_REFERENCES_UNRESOLVED = "blog.references.unresolved"
BLOG_RELATED_REQUESTED = "blog.related.requested"
BLOG_RELATED_RETURNED = "blog.related.returned"
BLOG_RELATED_IDS = "blog.related.ids"
BLOG_NAV_PREVIOUS_ID = "blog.nav.previous_id"
BLOG_NAV_NEXT_ID = "blog.nav.next_id"


# ---------------------------------------------------------------------------
# HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def document_attributes(
    operation: str,
    document_id: str,
    store_size: int | None = None,
) -> dict:
    """Create attributes dict for a span over one document."""
    attrs = {
        BLOG_OPERATION: operation,
        BLOG_DOCUMENT_ID: document_id,
    }
    if store_size is not None:
        attrs[BLOG_STORE_SIZE] = store_size
    return attrs


def related_attributes(requested: int, related_ids: list[str]) -> dict:
    """Create attributes dict describing a relatedness query result."""
    return {
        BLOG_RELATED_REQUESTED: requested,
        BLOG_RELATED_RETURNED: len(related_ids),
        BLOG_RELATED_IDS: list(related_ids),
    }
