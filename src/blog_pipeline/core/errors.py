"""
Error taxonomy for the content pipeline.

Only one condition is raised as an exception: a document that is indexed
but whose body cannot be loaded. Everything else (unknown identifiers,
malformed metadata, unresolved references) has an absent/default outcome
and is reported through a DiagnosticsSink instead.
"""

from __future__ import annotations

from enum import Enum


class DiagnosticKind(str, Enum):
    """Categories of non-fatal content conditions."""

    MALFORMED_METADATA = "malformed_metadata"
    UNRESOLVED_REFERENCE = "unresolved_reference"
    LOAD_FAILURE = "load_failure"
    DUPLICATE_IDENTIFIER = "duplicate_identifier"
    INVALID_IDENTIFIER = "invalid_identifier"


class BlogPipelineError(Exception):
    """Base class for pipeline exceptions."""


class ContentUnavailableError(BlogPipelineError):
    """The document exists in the index but its body could not be loaded."""

    def __init__(self, document_id: str, reason: str):
        super().__init__(f"Content unavailable for '{document_id}': {reason}")
        self.document_id = document_id
        self.reason = reason
