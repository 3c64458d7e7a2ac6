"""
Abstract base classes and shared query execution for vector stores.

Defines the interface every store backend implements, the typed query
options passed through Retriever -> Store, and LocalVectorStore, which
executes all three query variants in process for stores that hold their
documents locally (in memory or in a cache).
"""

import math
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog

from ai_store.observability.metrics import get_metrics
from ai_store.vectorstore.distance import DistanceCalculator, validate_max_items
from ai_store.vectorstore.document import VectorDocument
from ai_store.vectorstore.exceptions import InvalidArgumentError, UnsupportedQueryTypeError
from ai_store.vectorstore.query import (
    BaseQuery,
    HybridQuery,
    QueryType,
    TextQuery,
    VectorQuery,
    resolve_query_type,
)

logger = structlog.get_logger(__name__)

DocumentPredicate = Callable[[VectorDocument], bool]

_OPTION_ALIASES = {
    "maxItems": "max_items",
    "max_items": "max_items",
    "filter": "filter",
    "semanticRatio": "semantic_ratio",
    "semantic_ratio": "semantic_ratio",
}


@dataclass
class QueryOptions:
    """
    Execution options for Store.query() and Retriever.retrieve().

    Attributes:
        max_items: Maximum number of results (positive), None for no cap
        filter: Predicate over candidate documents, applied in process
        semantic_ratio: Hybrid blend used by the Retriever (0.0-1.0)
        extra: Backend-specific options, ignored by local stores
    """

    max_items: int | None = None
    filter: DocumentPredicate | None = None
    semantic_ratio: float | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        validate_max_items(self.max_items)
        if self.filter is not None and not callable(self.filter):
            raise InvalidArgumentError("filter option must be callable")
        if self.semantic_ratio is not None:
            ratio = float(self.semantic_ratio)
            if not math.isfinite(ratio) or not 0.0 <= ratio <= 1.0:
                raise InvalidArgumentError(
                    f"Semantic ratio must be between 0.0 and 1.0, got {self.semantic_ratio}"
                )
            self.semantic_ratio = ratio

    @classmethod
    def coerce(cls, options: "QueryOptions | Mapping[str, Any] | None") -> "QueryOptions":
        """
        Build QueryOptions from None, an instance, or an options mapping.

        Mapping keys may use camelCase (maxItems, semanticRatio) or
        snake_case. Unknown keys are kept in `extra`.
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options

        known: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key)
            if name is None:
                extra[key] = value
            elif value is not None:
                known[name] = value
        return cls(**known, extra=extra)

    @property
    def is_empty(self) -> bool:
        return (
            self.max_items is None
            and self.filter is None
            and self.semantic_ratio is None
            and not self.extra
        )


def _ensure_no_options(options: QueryOptions | Mapping[str, Any] | None) -> None:
    if isinstance(options, QueryOptions) and options.is_empty:
        return
    if options:
        raise InvalidArgumentError("No supported options.")


class VectorStore(ABC):
    """
    Abstract base class for vector store implementations.

    Stores negotiate capabilities through supports(); the Retriever uses it
    to pick the richest query shape a store can execute.
    """

    @abstractmethod
    def add(self, documents: VectorDocument | Sequence[VectorDocument]) -> None:
        """
        Add one or more documents.

        Args:
            documents: A document or a sequence of documents
        """
        ...

    @abstractmethod
    def remove(self, ids: str | Sequence[str], options: Mapping[str, Any] | None = None) -> None:
        """
        Remove documents by id. Unknown ids are ignored.

        Args:
            ids: A document id or a sequence of ids
            options: Backend-specific options
        """
        ...

    @abstractmethod
    def query(
        self,
        query: BaseQuery,
        options: QueryOptions | Mapping[str, Any] | None = None,
    ) -> Iterator[VectorDocument]:
        """
        Execute a query.

        Args:
            query: VectorQuery, TextQuery or HybridQuery
            options: QueryOptions or an options mapping

        Returns:
            Lazy iterator of matching documents

        Raises:
            UnsupportedQueryTypeError: If the store cannot execute the query
        """
        ...

    @abstractmethod
    def supports(self, query_type: QueryType | str | type[BaseQuery]) -> bool:
        """Check whether the store can execute the given query variant."""
        ...


class ManagedStore(ABC):
    """Stores whose lifecycle (schema/index creation, teardown) is managed."""

    @abstractmethod
    def setup(self, options: Mapping[str, Any] | None = None) -> None:
        ...

    @abstractmethod
    def drop(self, options: Mapping[str, Any] | None = None) -> None:
        ...


class LocalVectorStore(VectorStore, ManagedStore):
    """
    Base for stores that evaluate queries in process.

    Subclasses only provide storage (_load_documents plus add/remove/drop);
    this class implements vector ranking, substring text matching and the
    hybrid merge on top of the loaded documents.
    """

    SUPPORTED_QUERY_TYPES = frozenset(QueryType)

    def __init__(self, calculator: DistanceCalculator | None = None):
        self._calculator = calculator or DistanceCalculator()

    @property
    def calculator(self) -> DistanceCalculator:
        return self._calculator

    @abstractmethod
    def _load_documents(self) -> list[VectorDocument]:
        """Return the stored documents in insertion order."""
        ...

    def supports(self, query_type: QueryType | str | type[BaseQuery]) -> bool:
        return resolve_query_type(query_type) in self.SUPPORTED_QUERY_TYPES

    def query(
        self,
        query: BaseQuery,
        options: QueryOptions | Mapping[str, Any] | None = None,
    ) -> Iterator[VectorDocument]:
        opts = QueryOptions.coerce(options)
        query_type = getattr(query, "type", type(query).__name__)

        match query:
            case VectorQuery():
                results = self._query_vector(query, opts)
            case TextQuery():
                results = self._query_text(query, opts)
            case HybridQuery():
                results = self._query_hybrid(query, opts)
            case _:
                raise UnsupportedQueryTypeError(query_type, self)

        get_metrics().store_queries.labels(
            store=type(self).__name__,
            query_type=query.type.value,
        ).inc()
        return results

    def _candidates(self, query: BaseQuery, opts: QueryOptions) -> list[VectorDocument]:
        documents = self._load_documents()
        if query.filter is not None:
            documents = [doc for doc in documents if query.filter.matches(doc)]
        if opts.filter is not None:
            documents = [doc for doc in documents if opts.filter(doc)]
        return documents

    def _query_vector(self, query: VectorQuery, opts: QueryOptions) -> Iterator[VectorDocument]:
        yield from self._calculator.calculate(
            self._candidates(query, opts),
            query.vector,
            opts.max_items,
        )

    def _query_text(self, query: TextQuery, opts: QueryOptions) -> Iterator[VectorDocument]:
        yield from _take(_match_texts(self._candidates(query, opts), query.texts), opts.max_items)

    def _query_hybrid(self, query: HybridQuery, opts: QueryOptions) -> Iterator[VectorDocument]:
        candidates = self._candidates(query, opts)
        vector_results = list(self._calculator.calculate(candidates, query.vector))
        text_results = list(_match_texts(candidates, query.texts))

        merged: list[VectorDocument] = []
        seen: set[str] = set()
        for doc in vector_results:
            if doc.id not in seen:
                score = doc.score * query.semantic_ratio if doc.score is not None else None
                merged.append(doc.with_score(score))
                seen.add(doc.id)
        for doc in text_results:
            if doc.id not in seen:
                merged.append(doc)
                seen.add(doc.id)

        if opts.filter is not None:
            merged = [doc for doc in merged if opts.filter(doc)]

        yield from _take(merged, opts.max_items)


def _match_texts(documents: Iterable[VectorDocument], texts: Sequence[str]) -> Iterator[VectorDocument]:
    """Yield documents whose source text contains any of the texts (case-insensitive)."""
    needles = [text.lower() for text in texts]
    for doc in documents:
        haystack = (doc.metadata.text or "").lower()
        if any(needle in haystack for needle in needles):
            yield doc


def _take(documents: Iterable[VectorDocument], max_items: int | None) -> Iterator[VectorDocument]:
    for count, doc in enumerate(documents):
        if max_items is not None and count >= max_items:
            return
        yield doc
