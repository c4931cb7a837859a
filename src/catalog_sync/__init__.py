"""
Product catalog reconciliation.

Brings a persisted product collection into exact agreement with a flat-file
snapshot: products only in the snapshot are inserted, changed products are
updated and products missing from the snapshot are deleted.

Components:
- product: record schema and row parser
- snapshot: snapshot file loading
- counters: per-run added/updated/deleted counters
- store: persisted store contract and backends
- row_level: per-row insert/update with fault isolation
- batch: update replay and deletion of uncovered products
- driver: the reconciliation state machine
- fixtures: synthetic dataset generation

Usage:
    from catalog_sync.driver import reconcile_catalog
    from catalog_sync.store import PostgresProductStore

    with PostgresProductStore.connect(host="localhost", port=5432,
                                      database="product_catalog",
                                      user="postgres", password=None) as store:
        report = reconcile_catalog(store, "updated-catalog.csv")
"""

__version__ = "1.0.0"
__all__ = ["product", "snapshot", "counters", "store", "row_level", "batch", "driver", "fixtures"]
