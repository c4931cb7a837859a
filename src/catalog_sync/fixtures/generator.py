"""
Synthetic dataset generator.

Fills a store with an initial catalog and writes a snapshot derived from it
in which some products are deleted, updated or accompanied by a new product.
The expected counters for a reconciliation of that snapshot are returned.
"""

import logging
import random
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path

from ..counters import Metrics
from ..product import DEFAULT_DELIMITER, Product, header_row
from ..row_level import is_progress_checkpoint
from ..store.base import ProductStore

logger = logging.getLogger(__name__)

# Event probabilities, in percent
P_DELETE = 10
P_UPDATE = 10
P_ADD = 20


@dataclass
class GenerationResult:
    """Size of the generated catalog and the changes its snapshot implies."""

    size: int
    expected: Metrics


class DatasetGenerator:
    """Generates an initial catalog and a modified snapshot of it."""

    def __init__(
        self,
        store: ProductStore,
        snapshot_path: str | Path,
        seed: int | None = None,
        delimiter: str = DEFAULT_DELIMITER,
    ):
        self.store = store
        self.snapshot_path = Path(snapshot_path)
        self.delimiter = delimiter
        self._random = random.Random(seed)

    def generate(self, size: int) -> GenerationResult:
        """
        Generate ``size`` products and the matching snapshot.

        Raises:
            ValueError: If size is not positive
        """
        if size <= 0:
            raise ValueError(f"size must be positive, got {size}")

        self._clear_existing_data()

        expected = Metrics.zero()
        created_at = datetime.now(UTC)
        initial: list[Product] = []

        with open(self.snapshot_path, "w", encoding="utf-8", newline="") as f:
            f.write(header_row(self.delimiter) + "\n")

            for index in range(size):
                product = self._generate_product(index, created_at)
                initial.append(product)

                rows, change = self._generate_update(product, index, size)
                for row_product in rows:
                    f.write(row_product.to_row(self.delimiter) + "\n")
                expected.merge(change)

                if is_progress_checkpoint(index, size):
                    logger.debug(f"Processing {index * 100 // size}%...")

        self.store.insert_many(initial)
        self._log_metrics(size, expected)
        return GenerationResult(size=size, expected=expected)

    def _clear_existing_data(self) -> None:
        removed = self.store.clear()
        if removed:
            logger.info(f"Removed {removed} existing products from '{self.store.collection}'")
        if self.snapshot_path.exists():
            self.snapshot_path.unlink()

    def _generate_product(self, index: int, created_at: datetime) -> Product:
        return Product(
            product_id=str(uuid.UUID(int=self._random.getrandbits(128), version=4)),
            name=f"Product_{index}",
            price=self._generate_price(),
            created_at=created_at,
            updated_at=created_at,
        )

    def _generate_price(self) -> Decimal:
        cents = self._random.randint(0, 100_000)
        return Decimal(cents).scaleb(-2)

    def _generate_update(
        self, product: Product, index: int, size: int
    ) -> tuple[list[Product], Metrics]:
        """Pick an event for ``product``; returns the snapshot rows and the expected change."""
        roll = self._random.random() * 100

        if roll < P_DELETE:
            return [], Metrics.one_deleted()

        if roll < P_DELETE + P_UPDATE:
            updated = product.with_changes(
                name=f"Product_{index + size}",
                price=self._generate_price(),
                updated_at=datetime.now(UTC),
            )
            if updated.mutable_values() == product.mutable_values():
                return [updated], Metrics.zero()
            return [updated], Metrics.one_updated()

        if roll < P_DELETE + P_UPDATE + P_ADD:
            added = self._generate_product(index + size, datetime.now(UTC))
            return [product, added], Metrics.one_added()

        return [product], Metrics.zero()

    def _log_metrics(self, size: int, expected: Metrics) -> None:
        logger.info(f"{size} products inserted in '{self.store.collection}'.")
        logger.info(f"{expected.added} products to be added.")
        logger.info(
            f"{expected.updated} products to be updated "
            f"{expected.updated * 100 / size:.2f}%."
        )
        logger.info(
            f"{expected.deleted} products to be deleted "
            f"{expected.deleted * 100 / size:.2f}%."
        )


def generate_dataset(
    store: ProductStore,
    snapshot_path: str | Path,
    size: int,
    seed: int | None = None,
    delimiter: str = DEFAULT_DELIMITER,
) -> GenerationResult:
    """Convenience wrapper around ``DatasetGenerator``."""
    return DatasetGenerator(store, snapshot_path, seed=seed, delimiter=delimiter).generate(size)
