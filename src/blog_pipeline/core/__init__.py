"""
Core module - shared protocols, errors and types for the pipeline.

USAGE:
------
from blog_pipeline.core import DocumentStore, DiagnosticsSink

class MyStore:
    '''Implements DocumentStore protocol.'''
    ...
"""

from blog_pipeline.core.errors import (
    BlogPipelineError,
    ContentUnavailableError,
    DiagnosticKind,
)
from blog_pipeline.core.protocols import (
    # Protocols
    DocumentStore,
    DiagnosticsSink,
    # Data classes
    DiagnosticNote,
)

__all__ = [
    # Protocols
    "DocumentStore",
    "DiagnosticsSink",
    # Data classes
    "DiagnosticNote",
    # Errors
    "BlogPipelineError",
    "ContentUnavailableError",
    "DiagnosticKind",
]
