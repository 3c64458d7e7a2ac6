"""
Vector retrieval and ranking.

Main components:
- Vector / NullVector: embedding value types
- VectorDocument / Metadata: the unit of storage
- VectorQuery, TextQuery, HybridQuery: typed search requests
- DistanceCalculator: similarity scoring and top-K ordering
- VectorStore / ManagedStore: store contract
- InMemoryStore, CacheStore: stores executing queries in process
- Retriever: picks the query shape a store supports and runs it
"""

from ai_store.vectorstore.base import LocalVectorStore, ManagedStore, QueryOptions, VectorStore
from ai_store.vectorstore.cache_store import CacheStore
from ai_store.vectorstore.config import VectorStoreConfig
from ai_store.vectorstore.distance import DistanceCalculator, DistanceStrategy
from ai_store.vectorstore.document import Metadata, VectorDocument
from ai_store.vectorstore.exceptions import (
    InvalidArgumentError,
    StoreError,
    UnsupportedQueryTypeError,
)
from ai_store.vectorstore.memory_store import InMemoryStore
from ai_store.vectorstore.query import (
    EqualFilter,
    Filter,
    HybridQuery,
    Query,
    QueryType,
    TextQuery,
    VectorQuery,
)
from ai_store.vectorstore.retriever import Retriever, Vectorizer
from ai_store.vectorstore.vector import NULL_VECTOR, NullVector, Vector

__all__ = [
    "Vector",
    "NullVector",
    "NULL_VECTOR",
    "Metadata",
    "VectorDocument",
    "Query",
    "QueryType",
    "VectorQuery",
    "TextQuery",
    "HybridQuery",
    "Filter",
    "EqualFilter",
    "DistanceCalculator",
    "DistanceStrategy",
    "QueryOptions",
    "VectorStore",
    "ManagedStore",
    "LocalVectorStore",
    "InMemoryStore",
    "CacheStore",
    "VectorStoreConfig",
    "Retriever",
    "Vectorizer",
    "StoreError",
    "InvalidArgumentError",
    "UnsupportedQueryTypeError",
]
