"""
Exception hierarchy for catalog reconciliation.

Fatal errors (snapshot unreadable) propagate to the process exit; row-level
errors are caught by the row reconciler and never abort a run.
"""


class CatalogSyncError(Exception):
    """Base exception for catalog reconciliation errors."""

    pass


class SnapshotLoadError(CatalogSyncError):
    """Raised when the snapshot file cannot be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read snapshot {path}: {reason}")


class ProductParseError(CatalogSyncError):
    """Raised when a single snapshot row cannot be parsed into a product."""

    def __init__(self, row_index: int, reason: str):
        self.row_index = row_index
        self.reason = reason
        super().__init__(f"Invalid row {row_index}: {reason}")


class DuplicateProductError(CatalogSyncError):
    """Raised when inserting a product whose identity is already stored."""

    def __init__(self, product_id: str, collection: str):
        self.product_id = product_id
        self.collection = collection
        super().__init__(f"Product {product_id} already exists in '{collection}'")
