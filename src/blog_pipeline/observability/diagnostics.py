"""
Diagnostics sinks for non-fatal content conditions.

Malformed metadata, unresolved references and unloadable files never fail
a query; they are recorded here instead.

Pattern: Protocol (core.protocols.DiagnosticsSink) -> LoggingDiagnostics
(production) -> CollectingDiagnostics (test double, `check` command) ->
get_diagnostics() factory.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Iterator

from blog_pipeline.core.errors import DiagnosticKind
from blog_pipeline.core.protocols import DiagnosticNote, DiagnosticsSink

logger = logging.getLogger(__name__)


class LoggingDiagnostics:
    """Logs each note as a warning and keeps nothing."""

    def __init__(self, log: logging.Logger | None = None):
        self._log = log or logger

    def record(
        self,
        kind: DiagnosticKind,
        document_id: str | None,
        message: str,
        **details: Any,
    ) -> None:
        where = f"[{document_id}] " if document_id else ""
        self._log.warning(f"{kind.value}: {where}{message}")

    def __iter__(self) -> Iterator[DiagnosticNote]:
        return iter(())


class CollectingDiagnostics:
    """
    Keeps every note in memory, optionally logging it too.

    Notes are kept in arrival order.
    """

    def __init__(self, log: bool = False):
        self._notes: list[DiagnosticNote] = []
        self._log = log

    def record(
        self,
        kind: DiagnosticKind,
        document_id: str | None,
        message: str,
        **details: Any,
    ) -> None:
        note = DiagnosticNote(kind=kind, document_id=document_id, message=message, details=details)
        self._notes.append(note)
        if self._log:
            logger.warning(f"{kind.value}: {message}")

    def __iter__(self) -> Iterator[DiagnosticNote]:
        return iter(list(self._notes))

    def __len__(self) -> int:
        return len(self._notes)

    @property
    def notes(self) -> list[DiagnosticNote]:
        return list(self._notes)

    def of_kind(self, kind: DiagnosticKind) -> list[DiagnosticNote]:
        return [n for n in self._notes if n.kind == kind]

    def counts(self) -> dict[str, int]:
        """Number of notes per kind value."""
        return dict(Counter(n.kind.value for n in self._notes))

    def clear(self) -> None:
        self._notes.clear()


def get_diagnostics(collect: bool = False) -> DiagnosticsSink:
    """
    Factory function for diagnostics sinks.

    Args:
        collect: If True, return a CollectingDiagnostics that also logs.
    """
    if collect:
        return CollectingDiagnostics(log=True)
    return LoggingDiagnostics()
