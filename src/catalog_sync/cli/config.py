"""
Store configuration resolution and logging setup for the CLI.

Command-line arguments take precedence over environment variables.
"""

import argparse
import os
from typing import Any

from ..store import InMemoryProductStore, PostgresProductStore, ProductStore
from ..utils.logging import setup_logging as _setup_logging


def setup_logging(args: argparse.Namespace) -> None:
    """Configure logging from the global CLI options."""
    _setup_logging(
        level=args.log_level,
        log_file=args.log_file,
        json_format=args.log_json,
    )


def get_store_config(args: argparse.Namespace) -> dict[str, Any]:
    """
    Resolve PostgreSQL connection settings.

    Returns:
        Dict with host, port, database, user, password and collection
    """
    return {
        "host": args.db_host or os.getenv("POSTGRES_HOST", "localhost"),
        "port": int(args.db_port or os.getenv("POSTGRES_PORT", "5432")),
        "database": args.db_name or os.getenv("POSTGRES_DB", "product_catalog"),
        "user": args.db_user or os.getenv("POSTGRES_USER", "postgres"),
        "password": args.db_password or os.getenv("POSTGRES_PASSWORD"),
        "collection": args.collection,
    }


def open_store(args: argparse.Namespace) -> ProductStore:
    """
    Open the store selected by ``--store``.

    Raises:
        psycopg2.Error: If PostgreSQL is unreachable
        ValueError: If the collection name is not a valid identifier
    """
    if args.store == "memory":
        return InMemoryProductStore(collection=args.collection)

    store = PostgresProductStore.connect(**get_store_config(args))
    if args.create_schema:
        store.ensure_schema()
    return store
