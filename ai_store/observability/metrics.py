"""
Prometheus metrics for stores and retrieval.

Defines and exposes metrics for:
- Queries executed per store and query type
- Documents added to / removed from stores
- Retrievals per query shape and result counts

Metrics are exposed via HTTP endpoint for Prometheus scraping.
"""

import logging

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Histogram,
    start_http_server,
)

from ai_store.config.settings import get_settings

logger = logging.getLogger(__name__)

# Buckets for result-count histograms
RESULT_COUNT_BUCKETS = (0, 1, 5, 10, 25, 50, 100, 250, 1000)


class MetricsCollector:
    """
    Prometheus metrics collector for ai-store.

    Usage:
        metrics = get_metrics()
        metrics.store_queries.labels(store="InMemoryStore", query_type="vector").inc()
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Initialize Prometheus metrics.

        Args:
            registry: Registry to register metrics in (default global REGISTRY)
        """
        self.registry = registry or REGISTRY

        self.store_queries = Counter(
            "ai_store_queries_total",
            "Total number of queries executed by stores",
            ["store", "query_type"],
            registry=self.registry,
        )

        self.store_documents_added = Counter(
            "ai_store_documents_added_total",
            "Total number of documents added to stores",
            ["store"],
            registry=self.registry,
        )

        self.store_documents_removed = Counter(
            "ai_store_documents_removed_total",
            "Total number of documents removed from stores",
            ["store"],
            registry=self.registry,
        )

        self.retrievals = Counter(
            "ai_store_retrievals_total",
            "Total number of completed retrievals",
            ["query_type"],
            registry=self.registry,
        )

        self.retrieved_documents = Histogram(
            "ai_store_retrieved_documents",
            "Number of documents returned per retrieval",
            buckets=RESULT_COUNT_BUCKETS,
            registry=self.registry,
        )

    def start_server(self, port: int | None = None) -> None:
        """
        Start Prometheus metrics HTTP server.

        Args:
            port: Port to listen on (default from settings)
        """
        port = port or get_settings().metrics_port
        start_http_server(port, registry=self.registry)
        logger.info(f"Metrics server started on port {port}")


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
