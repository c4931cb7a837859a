"""
Root logger setup for catalog-sync processes.

The CLI calls ``setup_logging`` once, before any command runs. Modules log
through ``logging.getLogger(__name__)`` and never add handlers themselves.
"""

import logging
import logging.handlers
import os
import sys

from .formatters import ConsoleFormatter, JSONFormatter

PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
PLAIN_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that log every export or RPC at INFO
NOISY_LOGGERS = ("opentelemetry", "grpc")


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    console_output: bool = True,
    json_format: bool = False,
    app_name: str = "catalog-sync",
    max_bytes: int = 100 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """
    Replace the root logger's handlers with catalog-sync's.

    Console output goes to stderr so that reports printed on stdout stay
    clean. The optional file is rotated once it reaches ``max_bytes``.

    Args:
        level: Level name; unknown names fall back to INFO
        log_file: File to log to as well, parent directories are created
        console_output: Log to stderr
        json_format: Emit JSON documents instead of plain lines
        app_name: Value of the ``app`` field in JSON documents
        max_bytes: Size at which the log file is rotated (default: 100MB)
        backup_count: Rotated files kept next to ``log_file``
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    # Re-running setup must not duplicate output
    root_logger.handlers.clear()

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(
            JSONFormatter(app_name=app_name) if json_format else ConsoleFormatter()
        )
        root_logger.addHandler(console_handler)

    if log_file:
        root_logger.addHandler(
            _file_handler(log_file, numeric_level, json_format, app_name, max_bytes, backup_count)
        )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Logging initialized: level={level}, file={log_file or 'none'}, "
        f"console={console_output}, json={json_format}"
    )


def _file_handler(
    log_file: str,
    level: int,
    json_format: bool,
    app_name: str,
    max_bytes: int,
    backup_count: int,
) -> logging.Handler:
    """Rotating file handler; plain lines in files are never colored."""
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        filename=log_file,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setLevel(level)
    if json_format:
        handler.setFormatter(JSONFormatter(app_name=app_name))
    else:
        handler.setFormatter(logging.Formatter(fmt=PLAIN_FORMAT, datefmt=PLAIN_DATE_FORMAT))
    return handler
