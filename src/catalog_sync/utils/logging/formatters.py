"""
Log formatters used by catalog-sync.

JSONFormatter emits one JSON document per record for log shippers;
ConsoleFormatter prints a single colored line meant for an operator's
terminal. Both carry the ``extra=`` context that ContextLogger binds
(collection, row_index, ...).
"""

import json
import logging
import os
import sys
import traceback
from datetime import UTC, datetime

# Attributes every LogRecord has; anything else came in through ``extra=``
_RECORD_ATTRIBUTES = frozenset({
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info",
    "taskName", "asctime",
})


def record_context(record: logging.LogRecord) -> dict:
    """
    Collect the caller-supplied context of a log record.

    Args:
        record: Record to inspect

    Returns:
        Mapping of extra attribute names to values, private names excluded
    """
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRIBUTES and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """
    Render records as single-line JSON documents.

    Every document has ``level``, ``logger``, ``message``, ``app`` and
    ``source``; ``timestamp``, ``hostname``, ``exception`` and ``context``
    are present when enabled or available.
    """

    def __init__(
        self,
        include_timestamp: bool = True,
        include_hostname: bool = True,
        app_name: str = "catalog-sync",
    ):
        """
        Args:
            include_timestamp: Add the record time as an ISO8601 UTC string
            include_hostname: Add the name of the emitting host
            app_name: Value of the ``app`` field
        """
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_hostname = include_hostname
        self.app_name = app_name
        self.hostname = os.uname().nodename if include_hostname else None

    def format(self, record: logging.LogRecord) -> str:
        document = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "app": self.app_name,
        }

        if self.include_timestamp:
            created = datetime.fromtimestamp(record.created, UTC)
            document["timestamp"] = created.isoformat()

        if self.hostname:
            document["hostname"] = self.hostname

        # Where the call was made
        document["source"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
        }

        if record.exc_info:
            document["exception"] = self._describe_exception(record.exc_info)

        context = record_context(record)
        if context:
            document["context"] = context

        # Context values such as Decimal or datetime fall back to str()
        return json.dumps(document, default=str)

    @staticmethod
    def _describe_exception(exc_info) -> dict:
        exc_type, exc_value, _ = exc_info
        return {
            "type": exc_type.__name__,
            "message": str(exc_value),
            "traceback": traceback.format_exception(*exc_info),
        }


class ConsoleFormatter(logging.Formatter):
    """
    One colored line per record for interactive use.

    Output looks like::

        2024-01-01 12:00:00 [ERROR] catalog_sync.row_level.reconciler: Error processing row 3 [collection=products, row_index=3]

    Colors are applied only when stderr is a terminal.
    """

    # ANSI escape per level name
    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        """
        Args:
            use_colors: Color level names when writing to a terminal
        """
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        plain_level = record.levelname
        color = self.LEVEL_COLORS.get(plain_level) if self.use_colors else None
        if color:
            record.levelname = f"{color}{plain_level}{self.RESET}"

        # Other handlers share the record, so put the level name back
        try:
            line = super().format(record)
        finally:
            record.levelname = plain_level

        pairs = ", ".join(f"{key}={value}" for key, value in record_context(record).items())
        return f"{line} [{pairs}]" if pairs else line
