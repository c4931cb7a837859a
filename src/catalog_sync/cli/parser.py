"""
Command-line argument parser configuration.
"""

import argparse
import os


def _add_store_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--snapshot',
        default=os.getenv('CATALOG_SNAPSHOT_FILE', 'updated-catalog.csv'),
        help='Snapshot file path (default: updated-catalog.csv)'
    )
    parser.add_argument(
        '--collection',
        default=os.getenv('CATALOG_COLLECTION', 'products'),
        help='Target collection (table) name (default: products)'
    )
    parser.add_argument(
        '--delimiter',
        default=',',
        help='Single-character field delimiter (default: ",")'
    )
    parser.add_argument(
        '--store',
        choices=['postgres', 'memory'],
        default='postgres',
        help='Store backend (default: postgres)'
    )
    parser.add_argument(
        '--create-schema',
        action='store_true',
        help='Create the collection table if it does not exist'
    )
    parser.add_argument('--db-host', help='PostgreSQL host')
    parser.add_argument('--db-port', help='PostgreSQL port')
    parser.add_argument('--db-name', help='PostgreSQL database name')
    parser.add_argument('--db-user', help='PostgreSQL username')
    parser.add_argument('--db-password', help='PostgreSQL password')


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog='catalog-sync',
        description="Reconcile a product catalog snapshot against a persisted collection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate a 10,000 product catalog and a modified snapshot of it
  catalog-sync generate --size 10000 --create-schema

  # Reconcile the collection against the snapshot
  catalog-sync run --snapshot updated-catalog.csv

  # Reconcile and save a JSON report, exposing Prometheus metrics
  catalog-sync run --output report.json --format json --metrics-port 9091
        """
    )

    parser.add_argument(
        '--log-level',
        type=str.upper,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default=os.getenv('LOG_LEVEL', 'INFO'),
        help='Logging level (default: LOG_LEVEL or INFO)'
    )
    parser.add_argument(
        '--log-json',
        action='store_true',
        default=os.getenv('LOG_JSON', 'false').lower() in ('true', '1', 'yes'),
        help='Emit logs as JSON (default: LOG_JSON)'
    )
    parser.add_argument(
        '--log-file',
        default=os.getenv('LOG_FILE'),
        help='Also write logs to this file (default: LOG_FILE)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # ========== Run command ==========
    run_parser = subparsers.add_parser('run', help='Reconcile the collection against a snapshot')
    _add_store_arguments(run_parser)
    run_parser.add_argument(
        '--output',
        help='Output file path for the run report'
    )
    run_parser.add_argument(
        '--format',
        choices=['console', 'json'],
        default='console',
        help='Report format (default: console)'
    )
    run_parser.add_argument(
        '--metrics-port',
        type=int,
        help='Expose Prometheus metrics on this port'
    )
    run_parser.add_argument(
        '--otlp-endpoint',
        help='OTLP collector endpoint for traces (e.g., localhost:4317)'
    )

    # ========== Generate command ==========
    generate_parser = subparsers.add_parser(
        'generate', help='Generate an initial catalog and a modified snapshot'
    )
    _add_store_arguments(generate_parser)
    generate_parser.add_argument(
        '--size',
        type=int,
        required=True,
        help='Number of products in the initial catalog'
    )
    generate_parser.add_argument(
        '--seed',
        type=int,
        help='Random seed for reproducible datasets'
    )

    return parser
