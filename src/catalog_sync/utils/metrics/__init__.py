"""
Prometheus metrics for catalog reconciliation

Usage:
    from catalog_sync.utils.metrics import MetricsPublisher, SyncMetrics

    publisher = MetricsPublisher(port=9091)
    publisher.start()

    sync_metrics = SyncMetrics()
    sync_metrics.record_run("products", duration=4.2, added=3, updated=1,
                            deleted=0, rows_processed=120, row_faults=0,
                            batch_failed=False)
"""

from .publisher import MetricsPublisher
from .registry import get_or_create_metric
from .sync import SyncMetrics

__all__ = [
    "MetricsPublisher",
    "SyncMetrics",
    "get_or_create_metric",
]
