"""
Store module - the queryable snapshot of all blog documents.

This module provides:
- Document: The document model
- StoreSnapshot: Immutable document set swapped on reload
- FileSystemDocumentStore: Markdown files on disk
- InMemoryDocumentStore: Testing/development store
- get_document_store(): Factory function

ARCHITECTURE:
-------------
1. Protocol defines the contract (in core.protocols)
2. Multiple implementations (FileSystemDocumentStore, InMemoryDocumentStore)
3. Factory function for instantiation
4. Seed documents for tests and demos
"""

# Document model
from blog_pipeline.store.document import Document, is_valid_identifier

# Store implementations and factory
from blog_pipeline.store.store import (
    StoreSnapshot,
    FileSystemDocumentStore,
    InMemoryDocumentStore,
    document_from_text,
    get_document_store,
)

# Seed data
from blog_pipeline.store.seeds import (
    get_sample_documents,
    get_sample_texts,
)

__all__ = [
    # Document
    "Document",
    "is_valid_identifier",
    # Implementations
    "StoreSnapshot",
    "FileSystemDocumentStore",
    "InMemoryDocumentStore",
    "document_from_text",
    # Factory
    "get_document_store",
    # Seeds
    "get_sample_documents",
    "get_sample_texts",
]
