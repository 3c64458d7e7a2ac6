"""
Cache-backed vector store.

Persists the whole document set as a JSON array under a single Redis key,
so several processes can share a small corpus. Queries load the array and
run in process, exactly like InMemoryStore.
"""

import json
from collections.abc import Mapping, Sequence
from typing import Any

import redis
import structlog

from ai_store.observability.metrics import get_metrics
from ai_store.vectorstore.base import LocalVectorStore, _ensure_no_options
from ai_store.vectorstore.config import VectorStoreConfig
from ai_store.vectorstore.distance import DistanceCalculator
from ai_store.vectorstore.document import VectorDocument

logger = structlog.get_logger(__name__)


class CacheStore(LocalVectorStore):
    """
    Store keeping documents in a Redis key.

    Usage:
        store = CacheStore.from_url("redis://localhost:6379/0")
        store.setup()
        store.add(documents)
        results = list(store.query(VectorQuery(vector), {"maxItems": 5}))
    """

    def __init__(
        self,
        client: redis.Redis,
        calculator: DistanceCalculator | None = None,
        cache_key: str | None = None,
        config: VectorStoreConfig | None = None,
    ):
        """
        Initialize the store.

        Args:
            client: Synchronous Redis client
            calculator: Distance calculator (defaults to configured strategy)
            cache_key: Key holding the documents (default from config)
            config: Optional configuration
        """
        self._config = config or VectorStoreConfig()
        super().__init__(calculator or DistanceCalculator(self._config.distance_strategy))
        self._client = client
        self._cache_key = cache_key or self._config.cache_key

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> "CacheStore":
        """Create a store connected to the Redis server at url."""
        return cls(redis.Redis.from_url(url), **kwargs)

    @property
    def cache_key(self) -> str:
        return self._cache_key

    def setup(self, options: Mapping[str, Any] | None = None) -> None:
        _ensure_no_options(options)
        if self._client.exists(self._cache_key):
            return
        self._write([])
        logger.debug("Initialized cache store", cache_key=self._cache_key)

    def add(self, documents: VectorDocument | Sequence[VectorDocument]) -> None:
        if isinstance(documents, VectorDocument):
            documents = [documents]
        else:
            documents = list(documents)

        entries = self._read()
        entries.extend(doc.to_dict() for doc in documents)
        self._write(entries)
        get_metrics().store_documents_added.labels(store="CacheStore").inc(len(documents))

    def remove(self, ids: str | Sequence[str], options: Mapping[str, Any] | None = None) -> None:
        _ensure_no_options(options)

        raw = self._client.get(self._cache_key)
        if raw is None:
            return
        entries = json.loads(raw)
        if not entries:
            return

        if isinstance(ids, str):
            ids = [ids]
        id_set = {str(doc_id) for doc_id in ids}

        kept = [entry for entry in entries if str(entry["id"]) not in id_set]
        self._write(kept)

        removed = len(entries) - len(kept)
        if removed:
            get_metrics().store_documents_removed.labels(store="CacheStore").inc(removed)
        logger.debug("Removed documents", requested=len(id_set), removed=removed)

    def drop(self, options: Mapping[str, Any] | None = None) -> None:
        self._client.delete(self._cache_key)
        logger.debug("Dropped cache store", cache_key=self._cache_key)

    def _load_documents(self) -> list[VectorDocument]:
        return [VectorDocument.from_dict(entry) for entry in self._read()]

    def _read(self) -> list[dict[str, Any]]:
        raw = self._client.get(self._cache_key)
        if raw is None:
            return []
        return json.loads(raw)

    def _write(self, entries: list[dict[str, Any]]) -> None:
        self._client.set(self._cache_key, json.dumps(entries))
