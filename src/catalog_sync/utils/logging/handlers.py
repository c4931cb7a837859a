"""
Logger wrapper that binds context to every record it emits.
"""

import logging


class ContextLogger:
    """
    Attach fixed context, such as the collection name, to log records.

    Keyword arguments given at call time are added next to the bound
    context and win on conflicts. Both reach formatters as ``extra=``.

    Usage:
        log = ContextLogger(__name__, collection="products")
        log.error("Error processing row 12", row_index=12)
        # record carries collection="products" and row_index=12
    """

    def __init__(self, name: str, **context):
        """
        Args:
            name: Name of the underlying standard logger
            **context: Fields bound to every record
        """
        self.logger = logging.getLogger(name)
        self.context = context

    def _log(self, level: int, msg: str, *args, exc_info=None, **fields) -> None:
        extra = {**self.context, **fields}
        self.logger.log(level, msg, *args, exc_info=exc_info, extra=extra)

    def debug(self, msg: str, *args, **fields) -> None:
        """Log at DEBUG with the bound context."""
        self._log(logging.DEBUG, msg, *args, **fields)

    def error(self, msg: str, *args, exc_info=None, **fields) -> None:
        """Log at ERROR with the bound context."""
        self._log(logging.ERROR, msg, *args, exc_info=exc_info, **fields)
