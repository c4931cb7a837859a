"""
Persisted product stores.

- base: store contract, bulk operations and write results
- postgres: PostgreSQL-backed store (psycopg2)
- memory: dict-backed store
"""

from ..errors import DuplicateProductError
from .base import BulkOperation, DeleteOperation, ProductStore, UpdateOperation, WriteResult
from .memory import InMemoryProductStore
from .postgres import PostgresProductStore

__all__ = [
    "ProductStore",
    "WriteResult",
    "UpdateOperation",
    "DeleteOperation",
    "BulkOperation",
    "InMemoryProductStore",
    "DuplicateProductError",
    "PostgresProductStore",
]
