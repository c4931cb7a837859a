"""
Row-level reconciliation.

Each snapshot row is classified as an insert or an update and applied
immediately; parse and store failures are isolated to their row.
"""

from .reconciler import ProgressCallback, RowLevelReconciler, is_progress_checkpoint

__all__ = [
    "RowLevelReconciler",
    "ProgressCallback",
    "is_progress_checkpoint",
]
