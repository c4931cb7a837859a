"""
Row-level reconciliation engine.

Applies each snapshot product to the store as soon as it is read (insert when
the identity is unknown, full-field replace otherwise) and buffers the
equivalent update for the batch phase.
"""

import logging
from collections.abc import Callable

from ..product import DEFAULT_DELIMITER, Product
from ..run import ReconciliationRun
from ..store.base import ProductStore, UpdateOperation
from ..utils.logging import ContextLogger

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def is_progress_checkpoint(row_index: int, total_rows: int) -> bool:
    """
    True when ``row_index`` scaled to a percentage of ``total_rows`` is an
    exact multiple of ten (0%, 10%, ... 90%).
    """
    if total_rows <= 0:
        return False
    scaled = row_index * 100
    return scaled % total_rows == 0 and (scaled // total_rows) % 10 == 0


class RowLevelReconciler:
    """Reconciles snapshot rows one at a time against a product store."""

    def __init__(
        self,
        store: ProductStore,
        delimiter: str = DEFAULT_DELIMITER,
        on_progress: ProgressCallback | None = None,
    ):
        """
        Initialize row-level reconciler.

        Args:
            store: Target product store
            delimiter: Snapshot field delimiter
            on_progress: Optional callback(row_index, percent) invoked at
                every 10% checkpoint
        """
        self.store = store
        self.delimiter = delimiter
        self.on_progress = on_progress
        self._log = ContextLogger(__name__, collection=store.collection)

    def reconcile_rows(self, rows: list[str], run: ReconciliationRun) -> None:
        """
        Reconcile every data row in order.

        A failure on one row is logged and recorded on ``run``; it never stops
        the loop.
        """
        total = len(rows)
        for row_index, row in enumerate(rows):
            try:
                product = Product.from_row(row, row_index, self.delimiter)
                self.reconcile_product(row_index, product, run)
            except Exception as e:
                run.record_fault(row_index, e)
                self._log.error(
                    f"Error processing row {row_index}: {type(e).__name__}: {e}",
                    row_index=row_index,
                )
            run.rows_processed += 1
            self._report_progress(row_index, total)

    def reconcile_product(
        self, row_index: int, product: Product, run: ReconciliationRun
    ) -> None:
        """
        Insert or update one product.

        Raises:
            Exception: Whatever the store raises; the caller isolates it
        """
        # The identity is in the snapshot even if the writes below fail
        run.covered_ids.add(product.product_id)

        existing = self.store.find_one(product.product_id)
        if existing is not None:
            result = self.store.update_one(product)
            run.metrics.updated += result.modified_count
            run.pending_updates.append(UpdateOperation(product))
            if result.modified_count:
                self._log.debug(
                    f"Row {row_index}: updated {product.product_id}", row_index=row_index
                )
        else:
            result = self.store.insert_one(product)
            run.metrics.added += result.inserted_count
            self._log.debug(
                f"Row {row_index}: inserted {product.product_id}", row_index=row_index
            )

    def _report_progress(self, row_index: int, total_rows: int) -> None:
        if not is_progress_checkpoint(row_index, total_rows):
            return

        percent = row_index * 100 // total_rows
        logger.debug(f"Processed {row_index} rows ({percent}%)...")
        if self.on_progress is not None:
            self.on_progress(row_index, percent)
