"""
Reconciliation driver.

Runs one pass through the states::

    IDLE -> LOADING_SNAPSHOT -> RECONCILING_ROWS -> EXECUTING_BATCH
         -> REPORTING_METRICS -> DONE

Only LOADING_SNAPSHOT can fail fatally. A driver instance runs once.
"""

import logging
import time
import tracemalloc
from enum import Enum
from pathlib import Path

from opentelemetry import trace

from .batch import BatchExecutor
from .product import DEFAULT_DELIMITER
from .report import RunReport
from .row_level import ProgressCallback, RowLevelReconciler
from .run import ReconciliationRun
from .snapshot import load_snapshot
from .store.base import ProductStore
from .utils.metrics import SyncMetrics
from .utils.tracing import add_span_attributes, trace_operation

logger = logging.getLogger(__name__)


class RunState(Enum):
    IDLE = "idle"
    LOADING_SNAPSHOT = "loading_snapshot"
    RECONCILING_ROWS = "reconciling_rows"
    EXECUTING_BATCH = "executing_batch"
    REPORTING_METRICS = "reporting_metrics"
    DONE = "done"


class ReconciliationDriver:
    """Orchestrates a full reconciliation pass of a snapshot against a store."""

    def __init__(
        self,
        store: ProductStore,
        delimiter: str = DEFAULT_DELIMITER,
        sync_metrics: SyncMetrics | None = None,
        on_progress: ProgressCallback | None = None,
    ):
        """
        Args:
            store: Target product store
            delimiter: Snapshot field delimiter
            sync_metrics: Optional Prometheus metrics to record the outcome in
            on_progress: Optional callback(row_index, percent) for row progress
        """
        self.store = store
        self.delimiter = delimiter
        self.sync_metrics = sync_metrics
        self.on_progress = on_progress
        self.state = RunState.IDLE

    def run(self, snapshot_path: str | Path) -> RunReport:
        """
        Reconcile the store against the snapshot at ``snapshot_path``.

        Returns:
            Report of the completed run

        Raises:
            SnapshotLoadError: If the snapshot cannot be read
            RuntimeError: If this driver has already run
        """
        if self.state is not RunState.IDLE:
            raise RuntimeError(f"Reconciliation driver already used (state={self.state.value})")

        start = time.monotonic()
        # Leave tracing running if a caller started it
        owns_tracemalloc = not tracemalloc.is_tracing()
        if owns_tracemalloc:
            tracemalloc.start()
        else:
            tracemalloc.reset_peak()
        run = ReconciliationRun()

        try:
            report = self._run(snapshot_path, run, start)
        finally:
            if owns_tracemalloc:
                tracemalloc.stop()

        self._transition(RunState.DONE)
        return report

    def _run(self, snapshot_path: str | Path, run: ReconciliationRun, start: float) -> RunReport:
        with trace_operation(
            "catalog_reconciliation",
            kind=trace.SpanKind.INTERNAL,
            collection=self.store.collection,
            snapshot=str(snapshot_path),
        ):
            self._transition(RunState.LOADING_SNAPSHOT)
            try:
                snapshot = load_snapshot(snapshot_path)
            except Exception:
                if self.sync_metrics is not None:
                    self.sync_metrics.record_failed_run(self.store.collection)
                raise
            logger.info(f"Loaded {len(snapshot)} rows from {snapshot.path}")

            self._transition(RunState.RECONCILING_ROWS)
            with trace_operation("reconcile_rows", rows=len(snapshot)):
                RowLevelReconciler(
                    self.store, delimiter=self.delimiter, on_progress=self.on_progress
                ).reconcile_rows(snapshot.rows, run)

            self._transition(RunState.EXECUTING_BATCH)
            BatchExecutor(self.store).execute(run)

            self._transition(RunState.REPORTING_METRICS)
            report = RunReport(
                collection=self.store.collection,
                snapshot_path=snapshot.path,
                rows_processed=run.rows_processed,
                metrics=run.metrics,
                row_faults=list(run.row_faults),
                batch_error=run.batch_error,
                duration_seconds=time.monotonic() - start,
                peak_memory_bytes=tracemalloc.get_traced_memory()[1],
            )
            add_span_attributes(
                rows_processed=report.rows_processed,
                status=report.status,
                **report.metrics.to_dict(),
            )
            self._log_metrics(report)
            self._record(report)

        return report

    def _transition(self, state: RunState) -> None:
        logger.debug(f"Reconciliation state: {self.state.value} -> {state.value}")
        self.state = state

    def _log_metrics(self, report: RunReport) -> None:
        metrics = report.metrics
        logger.info(f"Processed {report.rows_processed} CSV rows.")
        logger.info(f"Added {metrics.added} new products.")
        logger.info(f"Updated {metrics.updated} existing products.")
        logger.info(f"Deleted {metrics.deleted} products.")
        if report.row_faults:
            logger.info(f"Skipped {len(report.row_faults)} invalid rows.")
        if report.peak_memory_bytes is not None:
            logger.info(f"Peak memory: {report.peak_memory_bytes / 1024 / 1024:.2f} MB")

    def _record(self, report: RunReport) -> None:
        if self.sync_metrics is None:
            return
        self.sync_metrics.record_run(
            collection=report.collection,
            duration=report.duration_seconds,
            added=report.metrics.added,
            updated=report.metrics.updated,
            deleted=report.metrics.deleted,
            rows_processed=report.rows_processed,
            row_faults=len(report.row_faults),
            batch_failed=report.batch_error is not None,
        )


def reconcile_catalog(
    store: ProductStore,
    snapshot_path: str | Path,
    delimiter: str = DEFAULT_DELIMITER,
    sync_metrics: SyncMetrics | None = None,
) -> RunReport:
    """Run a single reconciliation pass with a fresh driver."""
    driver = ReconciliationDriver(store, delimiter=delimiter, sync_metrics=sync_metrics)
    return driver.run(snapshot_path)
