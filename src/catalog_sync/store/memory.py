"""In-memory product store with the same result semantics as the database backend."""

import logging
from collections.abc import Iterable, Sequence

from ..errors import DuplicateProductError
from ..product import Product
from .base import BulkOperation, DeleteOperation, ProductStore, UpdateOperation, WriteResult

logger = logging.getLogger(__name__)


class InMemoryProductStore(ProductStore):
    """Dict-backed store, keyed by product identity."""

    def __init__(self, collection: str = "products", products: Iterable[Product] = ()):
        super().__init__(collection)
        self._products: dict[str, Product] = {}
        for product in products:
            self._products[product.product_id] = product

    def find_one(self, product_id: str) -> Product | None:
        return self._products.get(product_id)

    def insert_one(self, product: Product) -> WriteResult:
        if product.product_id in self._products:
            raise DuplicateProductError(product.product_id, self.collection)
        self._products[product.product_id] = product
        return WriteResult(inserted_count=1)

    def update_one(self, product: Product) -> WriteResult:
        current = self._products.get(product.product_id)
        if current is None or current.mutable_values() == product.mutable_values():
            return WriteResult()
        self._products[product.product_id] = product
        return WriteResult(modified_count=1)

    def bulk_write(self, operations: Sequence[BulkOperation]) -> WriteResult:
        # Apply to a copy so the batch is all-or-nothing
        staged = dict(self._products)
        result = WriteResult()
        for op in operations:
            if isinstance(op, UpdateOperation):
                current = staged.get(op.product_id)
                if current is not None and current.mutable_values() != op.product.mutable_values():
                    staged[op.product_id] = op.product
                    result += WriteResult(modified_count=1)
            elif isinstance(op, DeleteOperation):
                if staged.pop(op.product_id, None) is not None:
                    result += WriteResult(deleted_count=1)
            else:
                raise TypeError(f"Unsupported bulk operation: {op!r}")

        self._products = staged
        return result

    def list_ids(self) -> set[str]:
        return set(self._products)

    def insert_many(self, products: Iterable[Product]) -> WriteResult:
        result = WriteResult()
        for product in products:
            result += self.insert_one(product)
        return result

    def clear(self) -> int:
        removed = len(self._products)
        self._products.clear()
        logger.debug(f"Cleared {removed} products from in-memory '{self.collection}'")
        return removed

    def snapshot(self) -> dict[str, Product]:
        """Copy of the current contents."""
        return dict(self._products)
