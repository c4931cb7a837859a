"""
Unit tests for catalog_sync.utils.metrics

Covers MetricsPublisher, SyncMetrics and metric registration helpers.
"""

from unittest.mock import patch

import pytest
from prometheus_client import CollectorRegistry, Counter

from catalog_sync.utils.metrics import MetricsPublisher, SyncMetrics, get_or_create_metric


class TestMetricsPublisher:
    """Test MetricsPublisher class"""

    def test_init_with_defaults(self):
        """Test initialization with default port"""
        # Arrange & Act
        publisher = MetricsPublisher()

        # Assert
        assert publisher.port == 9091
        assert publisher.registry is not None
        assert publisher._server_started is False

    @patch("catalog_sync.utils.metrics.publisher.start_http_server")
    def test_start_successful(self, mock_start_http_server):
        """Test successful server start"""
        # Arrange
        registry = CollectorRegistry()
        publisher = MetricsPublisher(port=9191, registry=registry)

        # Act
        publisher.start()

        # Assert
        mock_start_http_server.assert_called_once_with(9191, registry=registry)
        assert publisher._server_started is True

    @patch("catalog_sync.utils.metrics.publisher.start_http_server")
    def test_start_twice_starts_once(self, mock_start_http_server):
        """Test that starting an already-started server is a no-op"""
        # Arrange
        publisher = MetricsPublisher()

        # Act
        publisher.start()
        publisher.start()

        # Assert
        mock_start_http_server.assert_called_once()

    @patch("catalog_sync.utils.metrics.publisher.start_http_server")
    def test_start_port_in_use(self, mock_start_http_server):
        """Test a busy port raises RuntimeError"""
        # Arrange
        mock_start_http_server.side_effect = OSError("[Errno 98] Address already in use")
        publisher = MetricsPublisher(port=9091)

        # Act & Assert
        with pytest.raises(RuntimeError, match="already in use"):
            publisher.start()
        assert publisher._server_started is False

    @patch("catalog_sync.utils.metrics.publisher.start_http_server")
    def test_start_other_os_error(self, mock_start_http_server):
        """Test other OS errors propagate unchanged"""
        # Arrange
        mock_start_http_server.side_effect = OSError("Permission denied")

        # Act & Assert
        with pytest.raises(OSError, match="Permission denied"):
            MetricsPublisher(port=80).start()


class TestSyncMetrics:
    """Test SyncMetrics class"""

    @pytest.fixture
    def registry(self):
        return CollectorRegistry()

    def test_record_successful_run(self, registry):
        """Test a successful run increments the run and change counters"""
        # Arrange
        metrics = SyncMetrics(registry=registry)

        # Act
        metrics.record_run(
            collection="products",
            duration=2.5,
            added=3,
            updated=2,
            deleted=1,
            rows_processed=10,
            row_faults=0,
            batch_failed=False,
        )

        # Assert
        labels = {"collection": "products"}
        assert registry.get_sample_value(
            "catalog_sync_runs_total", {**labels, "status": "success"}
        ) == 1.0
        assert registry.get_sample_value(
            "catalog_sync_products_total", {**labels, "change_type": "added"}
        ) == 3.0
        assert registry.get_sample_value(
            "catalog_sync_products_total", {**labels, "change_type": "deleted"}
        ) == 1.0
        assert registry.get_sample_value("catalog_sync_rows_processed_total", labels) == 10.0
        assert registry.get_sample_value("catalog_sync_run_duration_seconds_sum", labels) == 2.5
        assert registry.get_sample_value("catalog_sync_last_run_timestamp", labels) > 0
        assert registry.get_sample_value("catalog_sync_row_faults_total", labels) is None

    def test_record_partial_run(self, registry):
        """Test a run with a failed batch is recorded as partial"""
        # Arrange
        metrics = SyncMetrics(registry=registry)

        # Act
        metrics.record_run(
            collection="products",
            duration=1.0,
            added=0,
            updated=0,
            deleted=0,
            rows_processed=4,
            row_faults=2,
            batch_failed=True,
        )

        # Assert
        labels = {"collection": "products"}
        assert registry.get_sample_value(
            "catalog_sync_runs_total", {**labels, "status": "partial"}
        ) == 1.0
        assert registry.get_sample_value("catalog_sync_batch_failures_total", labels) == 1.0
        assert registry.get_sample_value("catalog_sync_row_faults_total", labels) == 2.0

    def test_record_failed_run(self, registry):
        """Test a fatal run failure is counted"""
        # Arrange
        metrics = SyncMetrics(registry=registry)

        # Act
        metrics.record_failed_run("products")

        # Assert
        assert registry.get_sample_value(
            "catalog_sync_runs_total", {"collection": "products", "status": "failed"}
        ) == 1.0

    def test_second_instance_reuses_collectors(self, registry):
        """Test that two instances on one registry share their metrics"""
        # Arrange & Act
        first = SyncMetrics(registry=registry)
        second = SyncMetrics(registry=registry)

        # Assert
        assert first.runs_total is second.runs_total


class TestGetOrCreateMetric:
    """Test get_or_create_metric helper"""

    def test_creates_new_metric(self):
        """Test a new metric is created"""
        # Arrange
        registry = CollectorRegistry()

        # Act
        counter = get_or_create_metric(
            lambda: Counter("test_events_total", "Events", registry=registry),
            "test_events_total",
            registry,
        )

        # Assert
        assert isinstance(counter, Counter)

    def test_returns_existing_metric(self):
        """Test an already registered metric is returned"""
        # Arrange
        registry = CollectorRegistry()
        factory = lambda: Counter("test_events_total", "Events", registry=registry)  # noqa: E731
        first = get_or_create_metric(factory, "test_events_total", registry)

        # Act
        second = get_or_create_metric(factory, "test_events_total", registry)

        # Assert
        assert first is second

    def test_unknown_conflict_reraises(self):
        """Test a registration error for an unknown name propagates"""
        # Arrange
        registry = CollectorRegistry()

        def factory():
            raise ValueError("Duplicated timeseries")

        # Act & Assert
        with pytest.raises(ValueError):
            get_or_create_metric(factory, "missing_metric", registry)
