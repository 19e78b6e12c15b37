"""
Seed data for the document store.

Sample documents live apart from store code so tests and the CLI demo can
share one controlled collection.
"""

from blog_pipeline.store.seeds.sample_blogs import (
    SAMPLE_TEXTS,
    get_sample_documents,
    get_sample_texts,
)

__all__ = ["SAMPLE_TEXTS", "get_sample_documents", "get_sample_texts"]
