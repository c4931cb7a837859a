"""
CLI command implementations.

- run: reconcile a collection against a snapshot
- generate: create a synthetic catalog and snapshot
"""

import argparse
import logging
from pathlib import Path

from ..driver import ReconciliationDriver
from ..fixtures import generate_dataset
from ..report import export_report_json, format_report_console
from ..utils.metrics import MetricsPublisher, SyncMetrics
from ..utils.tracing import initialize_tracing, shutdown_tracing
from .config import open_store

logger = logging.getLogger(__name__)


def _validate_delimiter(delimiter: str) -> None:
    if len(delimiter) != 1:
        raise ValueError(f"Delimiter must be a single character, got {delimiter!r}")


def cmd_run(args: argparse.Namespace) -> None:
    """
    Run one reconciliation pass.

    Raises:
        SnapshotLoadError: If the snapshot cannot be read
        psycopg2.Error: If the store cannot be reached
    """
    _validate_delimiter(args.delimiter)
    initialize_tracing(otlp_endpoint=args.otlp_endpoint)

    sync_metrics = SyncMetrics()
    if args.metrics_port:
        MetricsPublisher(port=args.metrics_port).start()

    logger.info(f"Reconciling '{args.collection}' against {args.snapshot}")

    try:
        with open_store(args) as store:
            driver = ReconciliationDriver(
                store, delimiter=args.delimiter, sync_metrics=sync_metrics
            )
            report = driver.run(args.snapshot)
    finally:
        shutdown_tracing()

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        if args.format == "json":
            export_report_json(report, output_path)
        else:
            output_path.write_text(format_report_console(report) + "\n")
        logger.info(f"Report saved to {output_path}")
    elif args.format == "json":
        logger.warning("--format json requires --output; printing console report")
        print(format_report_console(report))
    else:
        print(format_report_console(report))

    if report.batch_error:
        logger.warning(f"Batch phase failed: {report.batch_error}")


def cmd_generate(args: argparse.Namespace) -> None:
    """Generate an initial catalog in the store and a modified snapshot file."""
    _validate_delimiter(args.delimiter)
    logger.info(f"Generating {args.size} products into '{args.collection}'")

    with open_store(args) as store:
        generate_dataset(
            store,
            args.snapshot,
            size=args.size,
            seed=args.seed,
            delimiter=args.delimiter,
        )

    logger.info(f"Snapshot written to {args.snapshot}")
