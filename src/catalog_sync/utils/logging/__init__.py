"""
Structured logging configuration for catalog reconciliation

Usage:
    from catalog_sync.utils.logging import setup_logging

    # Setup logging (call once at application startup)
    setup_logging(level="INFO", log_file="/var/log/catalog-sync/app.log")
"""

from .config import setup_logging
from .formatters import ConsoleFormatter, JSONFormatter
from .handlers import ContextLogger

__all__ = [
    "setup_logging",
    "JSONFormatter",
    "ConsoleFormatter",
    "ContextLogger",
]
