"""Prometheus metrics definitions and helpers.

Provides metric definitions for the contacts document store.
"""

import time
from contextlib import contextmanager
from functools import lru_cache
from typing import Callable, Iterator

from prometheus_client import (
    Counter,
    Histogram,
    generate_latest,
    REGISTRY,
    CollectorRegistry,
)


class ContactStoreMetrics:
    """Metrics for operations against the contacts collection."""

    def __init__(self, registry: CollectorRegistry = REGISTRY) -> None:
        """Initialize store metrics.

        Args:
            registry: Prometheus registry to use
        """
        # Operations issued
        self.operations = Counter(
            "contacts_store_operations_total",
            "Total number of contact store operations",
            ["collection", "operation", "status"],
            registry=registry,
        )

        # Operation duration
        self.operation_duration = Histogram(
            "contacts_store_operation_duration_seconds",
            "Time spent waiting on the contact store",
            ["collection", "operation"],
            buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
            registry=registry,
        )

    @contextmanager
    def observe(self, collection: str, operation: str) -> Iterator[None]:
        """Time a store call and count it as ``ok`` or ``error``.

        Args:
            collection: Collection name
            operation: Repository operation name
        """
        start = time.perf_counter()
        status = "ok"
        try:
            yield
        except Exception:
            status = "error"
            raise
        finally:
            self.operation_duration.labels(
                collection=collection, operation=operation
            ).observe(time.perf_counter() - start)
            self.operations.labels(
                collection=collection, operation=operation, status=status
            ).inc()


@lru_cache()
def setup_metrics() -> ContactStoreMetrics:
    """Return the process-wide store metrics, registering them once.

    Returns:
        ContactStoreMetrics bound to the default registry
    """
    return ContactStoreMetrics()


def get_metrics_handler() -> Callable[[], bytes]:
    """Get metrics handler for HTTP endpoint.

    Returns:
        Function that generates Prometheus metrics output
    """

    def metrics_handler() -> bytes:
        return generate_latest(REGISTRY)

    return metrics_handler
