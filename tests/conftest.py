"""
Pytest configuration and fixtures for catalog reconciliation tests.
Provides in-memory stores and snapshot file paths.
"""

import os
from pathlib import Path

import pytest

from catalog_sync.store import InMemoryProductStore


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


@pytest.fixture
def memory_store() -> InMemoryProductStore:
    return InMemoryProductStore(collection="products")


@pytest.fixture
def snapshot_path(tmp_path: Path) -> Path:
    return tmp_path / "updated-catalog.csv"


@pytest.fixture(autouse=True)
def set_test_env_vars() -> None:
    """Set default test environment variables if not already set."""
    defaults = {
        "POSTGRES_HOST": "localhost",
        "POSTGRES_PORT": "5432",
        "POSTGRES_DB": "product_catalog",
        "POSTGRES_USER": "postgres",
    }

    for key, value in defaults.items():
        if key not in os.environ:
            os.environ[key] = value
