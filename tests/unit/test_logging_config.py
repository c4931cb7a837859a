"""
Unit tests for catalog_sync.utils.logging

Covers JSON and console formatting, context logging and handler setup.
"""

import json
import logging
import sys

import pytest

from catalog_sync.utils.logging import (
    ConsoleFormatter,
    ContextLogger,
    JSONFormatter,
    setup_logging,
)


def _record(msg="Test message", level=logging.INFO, **extra):
    record = logging.LogRecord(
        name="test_logger",
        level=level,
        pathname="/path/to/test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after setup_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestJSONFormatter:
    """Test JSONFormatter class"""

    def test_init_with_defaults(self):
        """Test initialization with default parameters"""
        # Arrange & Act
        formatter = JSONFormatter()

        # Assert
        assert formatter.include_timestamp is True
        assert formatter.app_name == "catalog-sync"
        assert formatter.hostname is not None

    def test_format_basic_log_record(self):
        """Test formatting a basic log record"""
        # Arrange
        formatter = JSONFormatter()

        # Act
        data = json.loads(formatter.format(_record()))

        # Assert
        assert data["level"] == "INFO"
        assert data["logger"] == "test_logger"
        assert data["message"] == "Test message"
        assert data["app"] == "catalog-sync"
        assert data["source"]["line"] == 42
        assert "timestamp" in data

    def test_format_without_timestamp_and_hostname(self):
        """Test optional fields can be disabled"""
        # Arrange
        formatter = JSONFormatter(include_timestamp=False, include_hostname=False)

        # Act
        data = json.loads(formatter.format(_record()))

        # Assert
        assert "timestamp" not in data
        assert "hostname" not in data

    def test_format_with_extra_context(self):
        """Test extra fields are grouped under context"""
        # Arrange
        formatter = JSONFormatter()

        # Act
        data = json.loads(formatter.format(_record(collection="products", row_index=3)))

        # Assert
        assert data["context"] == {"collection": "products", "row_index": 3}

    def test_format_with_exception(self):
        """Test exception info is serialized"""
        # Arrange
        formatter = JSONFormatter()
        try:
            raise ValueError("bad row")
        except ValueError:
            record = _record(level=logging.ERROR)
            record.exc_info = sys.exc_info()

        # Act
        data = json.loads(formatter.format(record))

        # Assert
        assert data["exception"]["type"] == "ValueError"
        assert data["exception"]["message"] == "bad row"


class TestConsoleFormatter:
    """Test ConsoleFormatter class"""

    def test_format_plain(self):
        """Test formatting without colors"""
        # Arrange
        formatter = ConsoleFormatter(use_colors=False)

        # Act
        result = formatter.format(_record())

        # Assert
        assert "[INFO] test_logger: Test message" in result

    def test_format_appends_context(self):
        """Test extra context is appended as key=value pairs"""
        # Arrange
        formatter = ConsoleFormatter(use_colors=False)

        # Act
        result = formatter.format(_record(row_index=7))

        # Assert
        assert result.endswith("[row_index=7]")

    def test_levelname_restored_after_coloring(self):
        """Test the record level name is not left colored"""
        # Arrange
        formatter = ConsoleFormatter(use_colors=False)
        formatter.use_colors = True
        record = _record()

        # Act
        result = formatter.format(record)

        # Assert
        assert "\033[32m" in result
        assert record.levelname == "INFO"


class TestContextLogger:
    """Test ContextLogger class"""

    def test_context_added_to_records(self, caplog):
        """Test bound context and call-site fields reach the record"""
        # Arrange
        logger = ContextLogger("catalog_sync.test", collection="products")

        # Act
        with caplog.at_level(logging.ERROR, logger="catalog_sync.test"):
            logger.error("Error processing row 3", row_index=3)

        # Assert
        record = caplog.records[0]
        assert record.collection == "products"
        assert record.row_index == 3
        assert record.getMessage() == "Error processing row 3"

    def test_call_fields_override_bound_context(self, caplog):
        """Test fields given at call time win over bound context"""
        # Arrange
        logger = ContextLogger("catalog_sync.test", collection="products")

        # Act
        with caplog.at_level(logging.DEBUG, logger="catalog_sync.test"):
            logger.debug("Row 1: inserted A", collection="archive", row_index=1)

        # Assert
        record = caplog.records[0]
        assert record.levelno == logging.DEBUG
        assert record.collection == "archive"
        assert record.row_index == 1


class TestSetupLogging:
    """Test setup_logging function"""

    def test_console_handler(self, restore_root_logger):
        """Test console handler with console formatter"""
        # Act
        setup_logging(level="DEBUG")

        # Assert
        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, ConsoleFormatter)

    def test_json_console_handler(self, restore_root_logger):
        """Test JSON console output"""
        # Act
        setup_logging(json_format=True)

        # Assert
        assert isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)

    def test_file_handler(self, restore_root_logger, tmp_path):
        """Test file logging creates missing directories"""
        # Arrange
        log_file = tmp_path / "logs" / "catalog-sync.log"

        # Act
        setup_logging(log_file=str(log_file), console_output=False)
        logging.getLogger("catalog_sync.test").info("hello")

        # Assert
        assert log_file.exists()
        assert "hello" in log_file.read_text()

    def test_third_party_loggers_quieted(self, restore_root_logger):
        """Test noisy library loggers are raised to WARNING"""
        # Act
        setup_logging(level="DEBUG")

        # Assert
        assert logging.getLogger("opentelemetry").level == logging.WARNING

