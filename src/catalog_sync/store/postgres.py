"""
PostgreSQL product store.

The collection maps to a table. Each immediate write commits on its own so
rows already reconciled survive an interrupted run; ``bulk_write`` runs in a
single transaction.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Any

import psycopg2
import psycopg2.extensions
import psycopg2.extras
from opentelemetry import trace

from ..product import Product
from ..utils.sql_safety import quote_collection
from ..utils.tracing import trace_operation
from .base import BulkOperation, DeleteOperation, ProductStore, UpdateOperation, WriteResult

logger = logging.getLogger(__name__)

_COLUMNS = "id, name, price, created_at, updated_at"


class PostgresProductStore(ProductStore):
    """Product store backed by a PostgreSQL table."""

    def __init__(self, connection: psycopg2.extensions.connection, collection: str = "products"):
        """
        Args:
            connection: Open psycopg2 connection (not in autocommit mode)
            collection: Table name, optionally schema-qualified
        """
        super().__init__(collection)
        self.connection = connection
        self._table = quote_collection(collection)

    @classmethod
    def connect(
        cls,
        host: str,
        port: int,
        database: str,
        user: str,
        password: str | None,
        collection: str = "products",
        connect_timeout: int = 10,
    ) -> "PostgresProductStore":
        """
        Open a connection and wrap it in a store.

        Raises:
            psycopg2.Error: If the database is unreachable
        """
        with trace_operation(
            "postgres_connect",
            kind=trace.SpanKind.CLIENT,
            db_host=host,
            db_name=database,
        ):
            conn = psycopg2.connect(
                host=host,
                port=port,
                database=database,
                user=user,
                password=password,
                connect_timeout=connect_timeout,
            )

        logger.info(f"Connected to PostgreSQL {host}:{port}/{database}")
        return cls(conn, collection=collection)

    def ensure_schema(self) -> None:
        """Create the collection table if it does not exist."""
        with self.connection, self.connection.cursor() as cursor:
            cursor.execute(
                f"CREATE TABLE IF NOT EXISTS {self._table} ("
                "id TEXT PRIMARY KEY, "
                "name TEXT NOT NULL, "
                "price NUMERIC NOT NULL CHECK (price >= 0), "
                "created_at TIMESTAMPTZ NOT NULL, "
                "updated_at TIMESTAMPTZ NOT NULL)"
            )
        logger.debug(f"Ensured table {self._table}")

    def find_one(self, product_id: str) -> Product | None:
        with self.connection, self.connection.cursor() as cursor:
            cursor.execute(
                f"SELECT {_COLUMNS} FROM {self._table} WHERE id = %s",
                (product_id,),
            )
            row = cursor.fetchone()

        return _row_to_product(row) if row else None

    def insert_one(self, product: Product) -> WriteResult:
        with self.connection, self.connection.cursor() as cursor:
            cursor.execute(
                f"INSERT INTO {self._table} ({_COLUMNS}) VALUES (%s, %s, %s, %s, %s)",
                _product_params(product),
            )
            return WriteResult(inserted_count=cursor.rowcount)

    def update_one(self, product: Product) -> WriteResult:
        with self.connection, self.connection.cursor() as cursor:
            return WriteResult(modified_count=self._update(cursor, product))

    def bulk_write(self, operations: Sequence[BulkOperation]) -> WriteResult:
        updates = [op.product for op in operations if isinstance(op, UpdateOperation)]
        deletes = [op.product_id for op in operations if isinstance(op, DeleteOperation)]
        if len(updates) + len(deletes) != len(operations):
            raise TypeError("bulk_write accepts only UpdateOperation and DeleteOperation")

        modified = 0
        deleted = 0
        with trace_operation(
            "postgres_bulk_write",
            kind=trace.SpanKind.CLIENT,
            collection=self.collection,
            updates=len(updates),
            deletes=len(deletes),
        ):
            # One transaction; psycopg2 rolls back if the block raises
            with self.connection, self.connection.cursor() as cursor:
                for product in updates:
                    modified += self._update(cursor, product)
                if deletes:
                    cursor.execute(
                        f"DELETE FROM {self._table} WHERE id = ANY(%s)",
                        (deletes,),
                    )
                    deleted = cursor.rowcount

        return WriteResult(modified_count=modified, deleted_count=deleted)

    def list_ids(self) -> set[str]:
        with self.connection, self.connection.cursor() as cursor:
            cursor.execute(f"SELECT id FROM {self._table}")
            return {row[0] for row in cursor.fetchall()}

    def insert_many(self, products: Iterable[Product]) -> WriteResult:
        params = [_product_params(product) for product in products]
        if not params:
            return WriteResult()

        with self.connection, self.connection.cursor() as cursor:
            psycopg2.extras.execute_values(
                cursor,
                f"INSERT INTO {self._table} ({_COLUMNS}) VALUES %s",
                params,
                page_size=1000,
            )
        return WriteResult(inserted_count=len(params))

    def clear(self) -> int:
        with self.connection, self.connection.cursor() as cursor:
            cursor.execute(f"DELETE FROM {self._table}")
            removed = cursor.rowcount
        logger.debug(f"Cleared {removed} rows from {self._table}")
        return removed

    def close(self) -> None:
        if not self.connection.closed:
            self.connection.close()

    def _update(self, cursor: Any, product: Product) -> int:
        """Full-field replace; affects no row when nothing differs."""
        values = product.mutable_values()
        cursor.execute(
            f"UPDATE {self._table} "
            "SET name = %s, price = %s, created_at = %s, updated_at = %s "
            "WHERE id = %s "
            "AND (name, price, created_at, updated_at) "
            "IS DISTINCT FROM (%s, %s::numeric, %s::timestamptz, %s::timestamptz)",
            (*values, product.product_id, *values),
        )
        return cursor.rowcount


def _product_params(product: Product) -> tuple:
    return (product.product_id, *product.mutable_values())


def _row_to_product(row: tuple) -> Product:
    product_id, name, price, created_at, updated_at = row
    return Product(
        product_id=product_id,
        name=name,
        price=price,
        created_at=created_at,
        updated_at=updated_at,
    )
