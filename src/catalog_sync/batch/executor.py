"""
Batch phase of a reconciliation run.

Runs once, after every snapshot row has been processed: replays the buffered
updates, then deletes every persisted product whose identity the snapshot
did not cover.
"""

import logging

from opentelemetry import trace

from ..run import ReconciliationRun
from ..store.base import DeleteOperation, ProductStore
from ..utils.logging import ContextLogger
from ..utils.tracing import trace_operation

logger = logging.getLogger(__name__)


class BatchExecutor:
    """Executes the buffered update batch and the deletion batch."""

    def __init__(self, store: ProductStore):
        self.store = store
        self._log = ContextLogger(__name__, collection=store.collection)

    def execute(self, run: ReconciliationRun) -> bool:
        """
        Execute the batch phase.

        Failures are logged and recorded on ``run.batch_error``; counters
        accumulated by the row phase are left intact.

        Returns:
            True if the phase completed, False if it was aborted by an error
        """
        try:
            with trace_operation(
                "execute_batch",
                kind=trace.SpanKind.INTERNAL,
                collection=self.store.collection,
                pending_updates=len(run.pending_updates),
            ) as span:
                self._replay_updates(run)
                deleted = self._delete_uncovered(run)
                span.set_attribute("deleted", deleted)
            return True
        except Exception as e:
            run.batch_error = f"{type(e).__name__}: {e}"
            self._log.error(f"Error executing bulk operations: {run.batch_error}")
            return False

    def _replay_updates(self, run: ReconciliationRun) -> None:
        if run.pending_updates:
            result = self.store.bulk_write(run.pending_updates)
            run.metrics.updated += result.modified_count
            logger.debug(
                f"Replayed {len(run.pending_updates)} updates "
                f"({result.modified_count} modified)"
            )
        run.pending_updates.clear()

    def _delete_uncovered(self, run: ReconciliationRun) -> int:
        persisted_ids = self.store.list_ids()
        # Covered set comes from the row phase, never from the cleared buffer
        to_delete = sorted(persisted_ids - run.covered_ids)

        if not to_delete:
            logger.debug("No products to delete.")
            return 0

        run.pending_deletes.extend(DeleteOperation(product_id) for product_id in to_delete)
        result = self.store.bulk_write(run.pending_deletes)
        run.pending_deletes.clear()
        run.metrics.deleted += result.deleted_count
        self._log.debug(f"Deleted {result.deleted_count} of {len(to_delete)} uncovered products")
        return result.deleted_count
