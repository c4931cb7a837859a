"""
Persisted product store contract.

Every write reports what it actually changed through a ``WriteResult``; the
store, not the caller, decides whether an update modified anything.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..product import Product


@dataclass(frozen=True)
class WriteResult:
    """Outcome of one or more store writes."""

    inserted_count: int = 0
    modified_count: int = 0
    deleted_count: int = 0

    def __add__(self, other: "WriteResult") -> "WriteResult":
        if not isinstance(other, WriteResult):
            return NotImplemented
        return WriteResult(
            inserted_count=self.inserted_count + other.inserted_count,
            modified_count=self.modified_count + other.modified_count,
            deleted_count=self.deleted_count + other.deleted_count,
        )


@dataclass(frozen=True)
class UpdateOperation:
    """Full-field replace of the stored product with the same identity."""

    product: Product

    @property
    def product_id(self) -> str:
        return self.product.product_id


@dataclass(frozen=True)
class DeleteOperation:
    """Removal of the stored product with ``product_id``."""

    product_id: str


BulkOperation = UpdateOperation | DeleteOperation


class ProductStore(ABC):
    """A keyed collection of products addressable by collection name."""

    def __init__(self, collection: str = "products"):
        self.collection = collection

    @abstractmethod
    def find_one(self, product_id: str) -> Product | None:
        """Look up a product by identity."""

    @abstractmethod
    def insert_one(self, product: Product) -> WriteResult:
        """Insert a new product."""

    @abstractmethod
    def update_one(self, product: Product) -> WriteResult:
        """Overwrite all mutable fields of the stored product."""

    @abstractmethod
    def bulk_write(self, operations: Sequence[BulkOperation]) -> WriteResult:
        """Apply a batch of updates and deletes as a single unit."""

    @abstractmethod
    def list_ids(self) -> set[str]:
        """All identities currently persisted."""

    @abstractmethod
    def insert_many(self, products: Iterable[Product]) -> WriteResult:
        """Insert several new products."""

    @abstractmethod
    def clear(self) -> int:
        """Remove every product; returns the number removed."""

    def close(self) -> None:
        """Release store resources."""

    def __enter__(self) -> "ProductStore":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
