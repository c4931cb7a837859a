"""
Unit tests for catalog_sync.utils.tracing
"""

from unittest.mock import MagicMock, patch

import pytest
from opentelemetry import trace

from catalog_sync.utils.tracing import add_span_attributes, trace_operation
from catalog_sync.utils.tracing import tracer as tracer_module


@pytest.fixture
def mock_span():
    span = MagicMock()
    mock_tracer = MagicMock()
    mock_tracer.start_as_current_span.return_value.__enter__.return_value = span
    with patch("catalog_sync.utils.tracing.context.get_tracer", return_value=mock_tracer):
        yield span, mock_tracer


class TestTraceOperation:
    """Test trace_operation context manager"""

    def test_span_created_with_attributes(self, mock_span):
        """Test span name, kind and stringified attributes"""
        # Arrange
        span, mock_tracer = mock_span

        # Act
        with trace_operation("execute_batch", kind=trace.SpanKind.CLIENT, deletes=3) as active:
            pass

        # Assert
        assert active is span
        mock_tracer.start_as_current_span.assert_called_once_with(
            "execute_batch", kind=trace.SpanKind.CLIENT
        )
        span.set_attribute.assert_called_once_with("deletes", "3")

    def test_exception_recorded_and_reraised(self, mock_span):
        """Test errors are recorded on the span and propagate"""
        # Arrange
        span, _ = mock_span
        error = RuntimeError("bulk rejected")

        # Act & Assert
        with pytest.raises(RuntimeError, match="bulk rejected"):
            with trace_operation("execute_batch"):
                raise error

        span.set_attribute.assert_any_call("error", True)
        span.set_attribute.assert_any_call("error.type", "RuntimeError")
        span.record_exception.assert_called_once_with(error)


class TestAddSpanAttributes:
    """Test add_span_attributes helper"""

    def test_only_recording_spans_updated(self):
        """Test attributes are skipped for non-recording spans"""
        # Arrange
        span = MagicMock()
        span.is_recording.return_value = False

        # Act
        with patch("catalog_sync.utils.tracing.context.trace.get_current_span", return_value=span):
            add_span_attributes(rows=10)

        # Assert
        span.set_attribute.assert_not_called()

    def test_recording_span_updated(self):
        """Test attributes are stringified onto a recording span"""
        # Arrange
        span = MagicMock()
        span.is_recording.return_value = True

        # Act
        with patch("catalog_sync.utils.tracing.context.trace.get_current_span", return_value=span):
            add_span_attributes(rows=10)

        # Assert
        span.set_attribute.assert_called_once_with("rows", "10")


class TestInitializeTracing:
    """Test tracer initialization"""

    @pytest.fixture(autouse=True)
    def reset_tracer_state(self, monkeypatch):
        monkeypatch.setattr(tracer_module, "_tracer", None)
        monkeypatch.setattr(tracer_module, "_is_initialized", False)
        monkeypatch.delenv("OTLP_ENDPOINT", raising=False)
        monkeypatch.delenv("TRACE_CONSOLE", raising=False)

    @patch("catalog_sync.utils.tracing.tracer.trace.set_tracer_provider")
    @patch("catalog_sync.utils.tracing.tracer.OTLPSpanExporter")
    def test_no_exporter_without_endpoint(self, mock_exporter, mock_set_provider):
        """Test no OTLP exporter is attached unless an endpoint is given"""
        # Act
        tracer_module.initialize_tracing()

        # Assert
        mock_exporter.assert_not_called()
        mock_set_provider.assert_called_once()

    @patch("catalog_sync.utils.tracing.tracer.trace.set_tracer_provider")
    @patch("catalog_sync.utils.tracing.tracer.OTLPSpanExporter")
    def test_otlp_exporter_from_environment(self, mock_exporter, mock_set_provider, monkeypatch):
        """Test the OTLP endpoint falls back to the environment"""
        # Arrange
        monkeypatch.setenv("OTLP_ENDPOINT", "collector:4317")

        # Act
        tracer_module.initialize_tracing()

        # Assert
        mock_exporter.assert_called_once_with(endpoint="collector:4317", insecure=True)

    @patch("catalog_sync.utils.tracing.tracer.trace.set_tracer_provider")
    def test_second_initialization_returns_existing(self, mock_set_provider):
        """Test repeated initialization keeps the first tracer"""
        # Act
        first = tracer_module.initialize_tracing()
        second = tracer_module.initialize_tracing()

        # Assert
        assert first is second
        mock_set_provider.assert_called_once()
