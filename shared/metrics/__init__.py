"""Metrics module using Prometheus."""

from .prometheus_metrics import (
    ContactStoreMetrics,
    setup_metrics,
    get_metrics_handler,
)

__all__ = [
    "ContactStoreMetrics",
    "setup_metrics",
    "get_metrics_handler",
]
