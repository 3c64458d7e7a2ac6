"""Observability layer - logging and metrics."""

from ai_store.observability.logging import setup_logging
from ai_store.observability.metrics import MetricsCollector, get_metrics

__all__ = ["setup_logging", "MetricsCollector", "get_metrics"]
