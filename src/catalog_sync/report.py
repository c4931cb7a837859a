"""
Run report and its console/JSON renderings.
"""

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from .counters import Metrics
from .run import RowFault


@dataclass
class RunReport:
    """Summary of a completed reconciliation run."""

    collection: str
    snapshot_path: str
    rows_processed: int
    metrics: Metrics
    row_faults: list[RowFault] = field(default_factory=list)
    batch_error: str | None = None
    duration_seconds: float = 0.0
    peak_memory_bytes: int | None = None
    finished_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def status(self) -> str:
        return "PARTIAL" if self.batch_error else "SUCCESS"

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "collection": self.collection,
            "snapshot_path": self.snapshot_path,
            "rows_processed": self.rows_processed,
            "metrics": self.metrics.to_dict(),
            "row_faults": [fault.to_dict() for fault in self.row_faults],
            "batch_error": self.batch_error,
            "duration_seconds": round(self.duration_seconds, 3),
            "peak_memory_bytes": self.peak_memory_bytes,
            "finished_at": self.finished_at.isoformat(),
        }


def _percent(count: int, total: int) -> str:
    if total <= 0:
        return "0.00%"
    return f"{count * 100 / total:.2f}%"


def format_report_console(report: RunReport) -> str:
    """
    Format report for console output

    Args:
        report: Run report

    Returns:
        Formatted string for console display
    """
    metrics = report.metrics
    total = report.rows_processed

    lines = []
    lines.append("=" * 80)
    lines.append("CATALOG RECONCILIATION REPORT")
    lines.append("=" * 80)
    lines.append(f"Status: {report.status}")
    lines.append(f"Collection: {report.collection}")
    lines.append(f"Snapshot: {report.snapshot_path}")
    lines.append(f"Finished: {report.finished_at.isoformat()}")
    lines.append(f"Duration: {report.duration_seconds:.2f}s")
    if report.peak_memory_bytes is not None:
        lines.append(f"Peak memory: {report.peak_memory_bytes / 1024 / 1024:.2f} MB")
    lines.append("")
    lines.append("SUMMARY")
    lines.append("-" * 80)
    lines.append(f"Rows processed: {total:,}")
    lines.append(f"Added: {metrics.added:,} ({_percent(metrics.added, total)})")
    lines.append(f"Updated: {metrics.updated:,} ({_percent(metrics.updated, total)})")
    lines.append(f"Deleted: {metrics.deleted:,} ({_percent(metrics.deleted, total)})")
    lines.append(f"Rows skipped: {len(report.row_faults):,}")
    lines.append("")

    if report.row_faults:
        lines.append("ROW FAULTS")
        lines.append("-" * 80)
        for fault in report.row_faults:
            lines.append(f"Row {fault.row_index}: {fault.error_type}: {fault.message}")
        lines.append("")

    if report.batch_error:
        lines.append("BATCH ERROR")
        lines.append("-" * 80)
        lines.append(report.batch_error)
        lines.append("")

    lines.append("=" * 80)

    return "\n".join(lines)


def export_report_json(report: RunReport, output_path: str | Path) -> None:
    """Write the report as JSON to ``output_path``."""
    with open(output_path, "w") as f:
        json.dump(report.to_dict(), f, indent=2)
