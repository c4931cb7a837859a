"""
Prometheus metrics for catalog reconciliation runs.

These mirror the outcome of each run for monitoring; the per-run counters
that drive reconciliation live in ``catalog_sync.counters``.
"""

import logging
import time
from typing import Optional

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    CollectorRegistry,
    REGISTRY,
)

from .registry import get_or_create_metric

logger = logging.getLogger(__name__)


class SyncMetrics:
    """
    Metrics for catalog reconciliation runs

    Tracks runs, product changes, row faults and batch failures. Creating a
    second instance on the same registry reuses the registered collectors.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        """
        Initialize reconciliation metrics

        Args:
            registry: Custom Prometheus registry (default: global REGISTRY)
        """
        self.registry = registry or REGISTRY

        self.runs_total = self._metric(
            Counter,
            "catalog_sync_runs_total",
            "Total number of catalog reconciliation runs",
            ["collection", "status"],
        )

        self.run_duration_seconds = self._metric(
            Histogram,
            "catalog_sync_run_duration_seconds",
            "Duration of catalog reconciliation runs in seconds",
            ["collection"],
            buckets=(1, 5, 10, 30, 60, 120, 300, 600, 1800, 3600),
        )

        self.last_run_timestamp = self._metric(
            Gauge,
            "catalog_sync_last_run_timestamp",
            "Timestamp of last catalog reconciliation run",
            ["collection"],
        )

        self.products_total = self._metric(
            Counter,
            "catalog_sync_products_total",
            "Products changed by reconciliation",
            ["collection", "change_type"],
        )

        self.rows_processed_total = self._metric(
            Counter,
            "catalog_sync_rows_processed_total",
            "Snapshot rows processed",
            ["collection"],
        )

        self.row_faults_total = self._metric(
            Counter,
            "catalog_sync_row_faults_total",
            "Snapshot rows skipped because of a parse or store error",
            ["collection"],
        )

        self.batch_failures_total = self._metric(
            Counter,
            "catalog_sync_batch_failures_total",
            "Failed batch phases",
            ["collection"],
        )

    def _metric(self, metric_type, name: str, documentation: str, labels: list[str], **kwargs):
        return get_or_create_metric(
            lambda: metric_type(
                name, documentation, labels, registry=self.registry, **kwargs
            ),
            name,
            self.registry,
        )

    def record_run(
        self,
        collection: str,
        duration: float,
        added: int,
        updated: int,
        deleted: int,
        rows_processed: int,
        row_faults: int,
        batch_failed: bool,
    ) -> None:
        """
        Record the outcome of a reconciliation run

        A run whose batch phase failed is recorded with status "partial".
        """
        status = "partial" if batch_failed else "success"

        self.runs_total.labels(collection=collection, status=status).inc()
        self.run_duration_seconds.labels(collection=collection).observe(duration)
        self.last_run_timestamp.labels(collection=collection).set(time.time())

        for change_type, count in (
            ("added", added),
            ("updated", updated),
            ("deleted", deleted),
        ):
            self.products_total.labels(
                collection=collection, change_type=change_type
            ).inc(count)

        self.rows_processed_total.labels(collection=collection).inc(rows_processed)

        if row_faults:
            self.row_faults_total.labels(collection=collection).inc(row_faults)

        if batch_failed:
            self.batch_failures_total.labels(collection=collection).inc()

        logger.debug(
            f"Recorded reconciliation run: collection={collection}, "
            f"status={status}, duration={duration:.2f}s"
        )

    def record_failed_run(self, collection: str) -> None:
        """Record a run that aborted with a fatal error."""
        self.runs_total.labels(collection=collection, status="failed").inc()
