"""Pytest fixtures for vectorstore tests."""

import json
from collections.abc import Iterator, Mapping
from typing import Any
from unittest.mock import MagicMock

import pytest

from ai_store.vectorstore.base import VectorStore
from ai_store.vectorstore.config import VectorStoreConfig
from ai_store.vectorstore.document import VectorDocument
from ai_store.vectorstore.exceptions import UnsupportedQueryTypeError
from ai_store.vectorstore.query import BaseQuery, QueryType, resolve_query_type
from ai_store.vectorstore.vector import Vector


class RecordingStore(VectorStore):
    """Store double that records queries and returns canned documents."""

    def __init__(self, supported: set[QueryType], documents: list[VectorDocument] | None = None):
        self.supported = supported
        self.documents = documents or []
        self.queries: list[BaseQuery] = []
        self.options: list[Any] = []

    def add(self, documents) -> None:
        if isinstance(documents, VectorDocument):
            documents = [documents]
        self.documents.extend(documents)

    def remove(self, ids, options: Mapping[str, Any] | None = None) -> None:
        raise NotImplementedError

    def supports(self, query_type) -> bool:
        return resolve_query_type(query_type) in self.supported

    def query(self, query: BaseQuery, options=None) -> Iterator[VectorDocument]:
        if query.type not in self.supported:
            raise UnsupportedQueryTypeError(query.type, self)
        self.queries.append(query)
        self.options.append(options)
        return iter(self.documents)


@pytest.fixture
def vector_store_config() -> VectorStoreConfig:
    """Default vector store configuration for tests."""
    return VectorStoreConfig(default_semantic_ratio=0.5, cache_key="_test_vectors")


@pytest.fixture
def fake_redis() -> MagicMock:
    """Dict-backed stand-in for a synchronous redis.Redis client."""
    data: dict[str, bytes] = {}
    client = MagicMock()
    client.data = data
    client.get.side_effect = lambda key: data.get(key)
    client.exists.side_effect = lambda key: int(key in data)

    def _set(key, value):
        data[key] = value.encode("utf-8") if isinstance(value, str) else value
        return True

    def _delete(*keys):
        return sum(1 for key in keys if data.pop(key, None) is not None)

    client.set.side_effect = _set
    client.delete.side_effect = _delete
    return client


@pytest.fixture
def stored_entries(fake_redis):
    """Decode the JSON document list held in the fake redis client."""

    def _entries(key: str = "_test_vectors") -> list[dict[str, Any]]:
        raw = fake_redis.data.get(key)
        return json.loads(raw) if raw is not None else []

    return _entries


@pytest.fixture
def mock_vectorizer() -> MagicMock:
    """Vectorizer double returning a fixed 3-dimensional embedding."""
    vectorizer = MagicMock()
    vectorizer.vectorize.return_value = Vector([0.0, 0.0, 1.0])
    return vectorizer


@pytest.fixture
def recording_store_factory():
    """Build RecordingStore instances with a given capability set."""
    return RecordingStore
