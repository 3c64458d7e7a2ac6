"""
Retriever: free text in, ranked documents out.

Picks the richest query shape the target store supports so callers never
have to know a store's capabilities:

1. No vectorizer configured          -> TextQuery
2. Store cannot run vector queries   -> TextQuery (vectorizer not called)
3. Store supports hybrid queries     -> HybridQuery(embedding, text, ratio)
4. Otherwise                         -> VectorQuery(embedding)
"""

from collections.abc import Iterator, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

import structlog

from ai_store.observability.metrics import get_metrics
from ai_store.vectorstore.base import QueryOptions, VectorStore
from ai_store.vectorstore.config import VectorStoreConfig
from ai_store.vectorstore.document import VectorDocument
from ai_store.vectorstore.query import BaseQuery, HybridQuery, TextQuery, VectorQuery
from ai_store.vectorstore.vector import Vector, as_vector


@runtime_checkable
class Vectorizer(Protocol):
    """Embeds a text into a fixed-length vector."""

    def vectorize(self, text: str) -> Vector | Sequence[float]:
        ...


class Retriever:
    """
    Turns a text query into the right Query variant and runs it on a store.

    Errors raised by the vectorizer or the store propagate unchanged.
    """

    def __init__(
        self,
        store: VectorStore,
        vectorizer: Vectorizer | None = None,
        logger: Any | None = None,
        config: VectorStoreConfig | None = None,
    ):
        """
        Initialize the retriever.

        Args:
            store: Store to query
            vectorizer: Optional embedding collaborator
            logger: structlog-compatible logger (defaults to module logger)
            config: Optional configuration (default semantic ratio)
        """
        self._store = store
        self._vectorizer = vectorizer
        self._logger = logger or structlog.get_logger(__name__)
        self._config = config or VectorStoreConfig()

    def retrieve(
        self,
        query: str,
        options: QueryOptions | Mapping[str, Any] | None = None,
    ) -> Iterator[VectorDocument]:
        """
        Retrieve documents relevant to a text query.

        The returned iterator is lazy: the query is built and executed when
        iteration starts.

        Args:
            query: Free-text query
            options: Passed to the store (maxItems, filter, semanticRatio, ...)

        Returns:
            Iterator of documents as ranked by the store
        """
        self._logger.debug("Starting document retrieval", query=query, options=options)

        query_object = self._create_query(query, QueryOptions.coerce(options))

        self._logger.debug("Searching store", query_type=query_object.type.value)
        documents = self._store.query(query_object, options)

        count = 0
        for document in documents:
            count += 1
            yield document

        metrics = get_metrics()
        metrics.retrievals.labels(query_type=query_object.type.value).inc()
        metrics.retrieved_documents.observe(count)
        self._logger.debug("Document retrieval completed", retrieved_count=count)

    def _create_query(self, query: str, opts: QueryOptions) -> BaseQuery:
        if self._vectorizer is None:
            self._logger.debug("No vectorizer configured, using TextQuery if supported")
            return TextQuery(query)

        if not self._store.supports(VectorQuery):
            self._logger.debug("Store does not support vector queries, falling back to TextQuery")
            return TextQuery(query)

        if self._store.supports(HybridQuery):
            semantic_ratio = (
                opts.semantic_ratio
                if opts.semantic_ratio is not None
                else self._config.default_semantic_ratio
            )
            self._logger.debug(
                "Store supports hybrid queries, using HybridQuery with semantic ratio",
                semantic_ratio=semantic_ratio,
            )
            return HybridQuery(self._embed(query), query, semantic_ratio)

        self._logger.debug("Store supports vector queries, using VectorQuery")
        return VectorQuery(self._embed(query))

    def _embed(self, text: str) -> Vector:
        return as_vector(self._vectorizer.vectorize(text))
