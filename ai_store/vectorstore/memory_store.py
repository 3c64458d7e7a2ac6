"""
In-memory vector store.

Holds documents in a plain list; intended for tests, prototypes and small
corpora. Not thread-safe: callers must serialize writers and must not
mutate the store while iterating a query result.
"""

from collections.abc import Mapping, Sequence
from typing import Any

import structlog

from ai_store.observability.metrics import get_metrics
from ai_store.vectorstore.base import LocalVectorStore, _ensure_no_options
from ai_store.vectorstore.distance import DistanceCalculator
from ai_store.vectorstore.document import VectorDocument

logger = structlog.get_logger(__name__)


class InMemoryStore(LocalVectorStore):
    """
    List-backed store supporting vector, text and hybrid queries.

    Documents are not deduplicated on add: adding two documents with the
    same id keeps both, and remove() drops every entry with that id.
    """

    def __init__(self, calculator: DistanceCalculator | None = None):
        super().__init__(calculator)
        self._documents: list[VectorDocument] = []

    @property
    def documents(self) -> list[VectorDocument]:
        """Snapshot of the stored documents in insertion order."""
        return list(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def setup(self, options: Mapping[str, Any] | None = None) -> None:
        _ensure_no_options(options)
        self.drop()

    def add(self, documents: VectorDocument | Sequence[VectorDocument]) -> None:
        if isinstance(documents, VectorDocument):
            documents = [documents]
        else:
            documents = list(documents)
        self._documents.extend(documents)
        get_metrics().store_documents_added.labels(store="InMemoryStore").inc(len(documents))

    def remove(self, ids: str | Sequence[str], options: Mapping[str, Any] | None = None) -> None:
        _ensure_no_options(options)
        if isinstance(ids, str):
            ids = [ids]
        id_set = {str(doc_id) for doc_id in ids}

        before = len(self._documents)
        self._documents = [doc for doc in self._documents if doc.id not in id_set]
        removed = before - len(self._documents)

        if removed:
            get_metrics().store_documents_removed.labels(store="InMemoryStore").inc(removed)
        logger.debug("Removed documents", requested=len(id_set), removed=removed)

    def drop(self, options: Mapping[str, Any] | None = None) -> None:
        self._documents = []
        logger.debug("Dropped in-memory store")

    def _load_documents(self) -> list[VectorDocument]:
        return list(self._documents)
