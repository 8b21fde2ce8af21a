"""Metrics for vector database round trips.

A thin wrapper around ``prometheus_client`` so the database layer records
query counts and latencies with a fixed label set.

Design notes
- Labels are predeclared to keep cardinality bounded
- Each collector owns its registry (can be injected for testing)
"""

import time
from contextlib import contextmanager
from typing import Iterator, Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest


class VectorStoreMetrics:
    """Query metrics for a vector store database.

    Parameters
    - service_name: Logical name used for scoping
    - registry: Optional custom ``CollectorRegistry`` (e.g. for testing)
    """

    def __init__(self, service_name: str = "memvec", registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry or CollectorRegistry()

        self.query_count = Counter(
            'vector_db_queries_total',
            'Total vector database queries',
            ['operation', 'status'],
            registry=self.registry
        )

        self.query_duration = Histogram(
            'vector_db_query_duration_seconds',
            'Vector database query duration',
            ['operation'],
            registry=self.registry
        )

    def record_query(self, operation: str, status: str, duration: float) -> None:
        """Record a finished query."""
        self.query_count.labels(operation=operation, status=status).inc()
        self.query_duration.labels(operation=operation).observe(duration)

    @contextmanager
    def track(self, operation: str) -> Iterator[None]:
        """Time the wrapped block and record it as ``success`` or ``error``.

        Exceptions are recorded and re-raised.
        """
        start_time = time.time()
        status = "success"
        try:
            yield
        except Exception:
            status = "error"
            raise
        finally:
            self.record_query(operation, status, time.time() - start_time)

    def get_metrics(self) -> str:
        """Get metrics in Prometheus exposition format."""
        return generate_latest(self.registry).decode('utf-8')
