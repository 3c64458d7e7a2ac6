"""
Distance-based ranking of documents against a query vector.

Every strategy yields a "goodness" score where higher means more relevant:
similarities (cosine, dot product) are used as-is, metric distances are
mapped to 1 / (1 + distance). Results are always sorted by score
descending, with ties broken by the candidate's original position.
"""

import heapq
from collections.abc import Iterable, Iterator
from enum import Enum

import numpy as np
import structlog

from ai_store.vectorstore.document import VectorDocument
from ai_store.vectorstore.exceptions import InvalidArgumentError
from ai_store.vectorstore.vector import Vector, VectorLike

logger = structlog.get_logger(__name__)


class DistanceStrategy(str, Enum):
    """Scoring strategies supported by DistanceCalculator."""

    COSINE = "cosine"
    EUCLIDEAN = "euclidean"
    DOT_PRODUCT = "dot_product"
    MANHATTAN = "manhattan"
    CHEBYSHEV = "chebyshev"


def validate_max_items(max_items: int | None) -> int | None:
    """Check that max_items is None or a positive integer."""
    if max_items is None:
        return None
    if isinstance(max_items, bool) or not isinstance(max_items, int) or max_items < 1:
        raise InvalidArgumentError(f"max_items must be a positive integer, got {max_items!r}")
    return max_items


class DistanceCalculator:
    """
    Scores and orders documents by similarity to a query vector.

    Usage:
        calculator = DistanceCalculator(DistanceStrategy.COSINE)
        for doc in calculator.calculate(documents, query_vector, max_items=5):
            print(doc.id, doc.score)
    """

    def __init__(self, strategy: DistanceStrategy | str = DistanceStrategy.COSINE):
        self.strategy = DistanceStrategy(strategy)

    def calculate(
        self,
        documents: Iterable[VectorDocument],
        query_vector: VectorLike,
        max_items: int | None = None,
    ) -> Iterator[VectorDocument]:
        """
        Rank documents by similarity to the query vector.

        Documents with the null vector or with a different dimensionality
        than the query vector are skipped.

        Args:
            documents: Candidate documents, in insertion order
            query_vector: Vector to compare against
            max_items: If given, only the top N documents are yielded

        Returns:
            Iterator of new VectorDocument instances with score populated
        """
        validate_max_items(max_items)
        if not isinstance(query_vector, Vector):
            raise InvalidArgumentError("Cannot rank documents against the null vector")
        return self._rank(documents, query_vector, max_items)

    def _rank(
        self,
        documents: Iterable[VectorDocument],
        query_vector: Vector,
        max_items: int | None,
    ) -> Iterator[VectorDocument]:
        dimensions = query_vector.dimensions
        candidates: list[VectorDocument] = []
        skipped = 0
        for document in documents:
            vector = document.vector
            if isinstance(vector, Vector) and vector.dimensions == dimensions:
                candidates.append(document)
            else:
                skipped += 1

        if skipped:
            logger.debug(
                "Skipped documents without comparable vectors",
                skipped=skipped,
                dimensions=dimensions,
            )

        if not candidates:
            return

        matrix = np.vstack([doc.vector.as_array() for doc in candidates])
        scores = self._score_matrix(matrix, query_vector.as_array())

        # Overflowing components can still produce NaN, which has no order
        ranked = [(-float(score), index) for index, score in enumerate(scores) if not np.isnan(score)]
        if len(ranked) < len(candidates):
            logger.debug("Skipped documents with undefined scores", skipped=len(candidates) - len(ranked))

        if max_items is not None:
            ranked = heapq.nsmallest(max_items, ranked)
        else:
            ranked.sort()

        for negative_score, index in ranked:
            yield candidates[index].with_score(-negative_score)

    def score(self, a: Vector, b: Vector) -> float:
        """
        Score a single pair of vectors.

        Raises:
            InvalidArgumentError: If either vector is the null vector or
                they differ in dimensionality
        """
        if not isinstance(a, Vector) or not isinstance(b, Vector):
            raise InvalidArgumentError("Cannot score the null vector")
        if a.dimensions != b.dimensions:
            raise InvalidArgumentError(
                f"Vectors must have the same dimensions, got {a.dimensions} and {b.dimensions}"
            )
        return float(self._score_matrix(a.as_array()[np.newaxis, :], b.as_array())[0])

    def _score_matrix(self, matrix: np.ndarray, query: np.ndarray) -> np.ndarray:
        """Score every row of matrix (n_docs, dim) against query (dim,)."""
        if self.strategy is DistanceStrategy.COSINE:
            # Zero-norm vectors end up with similarity 0.0
            doc_norms = np.linalg.norm(matrix, axis=1)
            doc_norms = np.where(doc_norms == 0, 1.0, doc_norms)
            query_norm = np.linalg.norm(query)
            query_norm = query_norm if query_norm != 0 else 1.0
            return (matrix @ query) / (doc_norms * query_norm)

        if self.strategy is DistanceStrategy.DOT_PRODUCT:
            return matrix @ query

        diff = matrix - query
        if self.strategy is DistanceStrategy.EUCLIDEAN:
            distances = np.linalg.norm(diff, axis=1)
        elif self.strategy is DistanceStrategy.MANHATTAN:
            distances = np.abs(diff).sum(axis=1)
        else:
            distances = np.abs(diff).max(axis=1)
        return 1.0 / (1.0 + distances)
