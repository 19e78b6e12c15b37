"""
Relatedness Ranker - top-K documents related to a source document.

score(candidate) = tag_weight  * |shared tags|
                 + date_weight / (1 + |days apart| / date_scale_days)

The date term is 0 when either publish date is unknown. Candidates are
ordered by score desc, publish date desc, identifier asc, and zero-score
candidates pad the result, so its length is min(k, len(store) - 1).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

import numpy as np

from blog_pipeline.config import RankingConfig
from blog_pipeline.schemas.metadata import UNKNOWN_DATE

if TYPE_CHECKING:
    from blog_pipeline.core.protocols import DocumentStore
    from blog_pipeline.store.document import Document

# Scores are rounded before ordering so float noise cannot reorder ties.
SCORE_DECIMALS = 9


class RankedDocument(NamedTuple):
    document: Document
    score: float


def score_candidates(
    source: Document,
    candidates: list[Document],
    config: RankingConfig,
) -> np.ndarray:
    """Vector of relatedness scores, aligned with `candidates`."""
    if not candidates:
        return np.zeros(0, dtype=np.float64)

    overlap = np.array(
        [len(source.tags & c.tags) for c in candidates],
        dtype=np.float64,
    )

    ordinals = np.array([c.date.toordinal() for c in candidates], dtype=np.float64)
    known = np.array([c.date != UNKNOWN_DATE for c in candidates], dtype=bool)
    if source.date != UNKNOWN_DATE:
        distance = np.abs(ordinals - float(source.date.toordinal()))
        proximity = np.where(known, 1.0 / (1.0 + distance / config.date_scale_days), 0.0)
    else:
        proximity = np.zeros(len(candidates), dtype=np.float64)

    scores = config.tag_weight * overlap + config.date_weight * proximity
    return np.round(scores, SCORE_DECIMALS)


def order_candidates(candidates: list[Document], scores: np.ndarray) -> list[int]:
    """
    Indices of candidates in ranking order.

    Score desc, then publish date desc, then identifier asc.
    """
    if not candidates:
        return []
    id_rank = np.empty(len(candidates), dtype=np.int64)
    for rank, index in enumerate(sorted(range(len(candidates)), key=lambda i: candidates[i].id)):
        id_rank[index] = rank
    ordinals = np.array([c.date.toordinal() for c in candidates], dtype=np.int64)
    # np.lexsort sorts by the last key first.
    return [int(i) for i in np.lexsort((id_rank, -ordinals, -scores))]


class RelatednessRanker:
    """Ranks the documents of one store against each other."""

    def __init__(self, store: DocumentStore, config: RankingConfig | None = None):
        self._store = store
        self.config = config or RankingConfig()

    def rank(self, source_id: str, k: int) -> list[RankedDocument]:
        """
        Top-k documents related to `source_id`, never including it.

        Unknown or unloadable sources and k <= 0 give an empty list.
        """
        if k <= 0:
            return []
        documents = self._store.all()
        source = next((d for d in documents if d.id == source_id), None)
        if source is None:
            return []

        candidates = [d for d in documents if d.id != source_id]
        scores = score_candidates(source, candidates, self.config)
        order = order_candidates(candidates, scores)
        return [
            RankedDocument(candidates[i], float(scores[i]))
            for i in order[:k]
        ]
