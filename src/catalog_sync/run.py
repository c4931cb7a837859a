"""
Transient state of one reconciliation pass.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from .counters import Metrics
from .store.base import DeleteOperation, UpdateOperation


@dataclass
class RowFault:
    """A snapshot row that was skipped."""

    row_index: int
    error_type: str
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_exception(cls, row_index: int, error: Exception) -> "RowFault":
        return cls(row_index=row_index, error_type=type(error).__name__, message=str(error))

    def to_dict(self) -> dict[str, Any]:
        return {
            "row_index": self.row_index,
            "error_type": self.error_type,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class ReconciliationRun:
    """
    Context of a single pass: counters, buffered batch operations and the
    identities the snapshot covers. Discarded once the run is reported.
    """

    metrics: Metrics = field(default_factory=Metrics.zero)
    pending_updates: list[UpdateOperation] = field(default_factory=list)
    pending_deletes: list[DeleteOperation] = field(default_factory=list)
    covered_ids: set[str] = field(default_factory=set)
    row_faults: list[RowFault] = field(default_factory=list)
    rows_processed: int = 0
    batch_error: str | None = None

    def record_fault(self, row_index: int, error: Exception) -> RowFault:
        fault = RowFault.from_exception(row_index, error)
        self.row_faults.append(fault)
        return fault
