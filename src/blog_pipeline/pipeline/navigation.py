"""
Sequence Navigator - previous/next neighbours in publish order.

The order is publish date ascending, identifier ascending on ties; unknown
dates sort first. It is recomputed from the store's snapshot on every call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from blog_pipeline.core.protocols import DocumentStore
    from blog_pipeline.store.document import Document


@dataclass(frozen=True)
class Navigation:
    """Neighbours of one document; either side may be absent."""

    previous: Document | None = None
    next: Document | None = None

    def to_dict(self) -> dict:
        return {
            "previous": self.previous.to_dict() if self.previous else None,
            "next": self.next.to_dict() if self.next else None,
        }


def sequence_key(document: Document) -> tuple:
    return (document.date, document.id)


class SequenceNavigator:
    """Total order over a store's documents."""

    def __init__(self, store: DocumentStore):
        self._store = store

    def order(self) -> list[Document]:
        """All loadable documents, oldest first."""
        return sorted(self._store.all(), key=sequence_key)

    def neighbors(self, identifier: str) -> Navigation:
        """Immediate predecessor and successor; both absent if unknown."""
        ordered = self.order()
        for index, document in enumerate(ordered):
            if document.id == identifier:
                return Navigation(
                    previous=ordered[index - 1] if index > 0 else None,
                    next=ordered[index + 1] if index + 1 < len(ordered) else None,
                )
        return Navigation()
