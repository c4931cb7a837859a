"""
Unit tests for the synthetic dataset generator.
"""

import pytest

from catalog_sync.counters import Metrics
from catalog_sync.driver import reconcile_catalog
from catalog_sync.fixtures import DatasetGenerator, generate_dataset
from catalog_sync.snapshot import load_snapshot
from catalog_sync.store import InMemoryProductStore
from factories import make_product


class TestDatasetGenerator:
    """Test DatasetGenerator class."""

    def test_initial_catalog_inserted(self, memory_store, snapshot_path):
        """Test the store receives exactly ``size`` products."""
        result = generate_dataset(memory_store, snapshot_path, size=50, seed=42)

        assert result.size == 50
        assert len(memory_store.list_ids()) == 50

    def test_snapshot_row_count_matches_expected(self, memory_store, snapshot_path):
        """Test rows = size - deleted + added."""
        result = generate_dataset(memory_store, snapshot_path, size=200, seed=3)

        snapshot = load_snapshot(snapshot_path)
        expected = result.expected
        assert snapshot.header == "_id,name,price,createdAt,updatedAt"
        assert len(snapshot) == 200 - expected.deleted + expected.added

    def test_reconciliation_matches_expected(self, memory_store, snapshot_path):
        """Test reconciling the generated snapshot reports the expected changes."""
        result = generate_dataset(memory_store, snapshot_path, size=500, seed=11)

        report = reconcile_catalog(memory_store, snapshot_path)

        assert report.metrics == result.expected
        assert report.row_faults == []
        assert memory_store.list_ids() == {
            line.split(",")[0] for line in load_snapshot(snapshot_path).rows
        }

    def test_seed_is_reproducible(self, tmp_path):
        """Test equal seeds produce equal outcomes."""
        first = generate_dataset(InMemoryProductStore(), tmp_path / "a.csv", size=100, seed=5)
        second = generate_dataset(InMemoryProductStore(), tmp_path / "b.csv", size=100, seed=5)

        assert first.expected == second.expected

    def test_existing_data_cleared(self, snapshot_path):
        """Test prior store contents and snapshot are replaced."""
        store = InMemoryProductStore(products=[make_product("old")])
        snapshot_path.write_text("stale\n", encoding="utf-8")

        generate_dataset(store, snapshot_path, size=10, seed=1)

        assert "old" not in store.list_ids()
        assert snapshot_path.read_text().startswith("_id,")

    def test_custom_delimiter(self, memory_store, snapshot_path):
        """Test snapshot rows use the configured delimiter."""
        generate_dataset(memory_store, snapshot_path, size=10, seed=1, delimiter=";")

        header = load_snapshot(snapshot_path).header
        assert header == "_id;name;price;createdAt;updatedAt"

    @pytest.mark.parametrize("size", [0, -1])
    def test_rejects_non_positive_size(self, memory_store, snapshot_path, size):
        """Test size must be positive."""
        with pytest.raises(ValueError, match="size"):
            DatasetGenerator(memory_store, snapshot_path).generate(size)

    def test_expected_counts_are_plausible(self, memory_store, snapshot_path):
        """Test event frequencies roughly follow their probabilities."""
        result = generate_dataset(memory_store, snapshot_path, size=2000, seed=9)

        expected = result.expected
        assert 100 < expected.deleted < 300
        assert 100 < expected.updated < 300
        assert 250 < expected.added < 550
        assert expected != Metrics.zero()
