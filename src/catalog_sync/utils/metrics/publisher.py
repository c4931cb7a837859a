"""
Prometheus exposition for catalog-sync.

``catalog-sync run --metrics-port N`` starts the HTTP endpoint before the
run so that a scraper can read run, product and row-fault metrics while the
process is alive.
"""

import logging
from typing import Optional

from prometheus_client import (
    start_http_server,
    CollectorRegistry,
    REGISTRY,
)

logger = logging.getLogger(__name__)


class MetricsPublisher:
    """
    Serve a registry on ``/metrics`` from a background HTTP server.

    The server runs in a daemon thread owned by prometheus_client and stops
    with the process.
    """

    def __init__(
        self,
        port: int = 9091,
        registry: Optional[CollectorRegistry] = None,
    ):
        """
        Args:
            port: TCP port of the endpoint (default: 9091)
            registry: Registry to serve; the process-wide REGISTRY if omitted
        """
        self.port = port
        self.registry = registry or REGISTRY
        self._server_started = False

    def start(self) -> None:
        """
        Start serving; a second call only logs a warning.

        Raises:
            RuntimeError: If the port is taken by another process
            OSError: For any other failure to bind
        """
        if self._server_started:
            logger.warning(f"Metrics server already running on port {self.port}")
            return

        try:
            start_http_server(self.port, registry=self.registry)
        except OSError as e:
            if "Address already in use" not in str(e):
                raise
            logger.error(f"Metrics port {self.port} is taken; catalog-sync metrics unavailable")
            raise RuntimeError(
                f"Metrics server port {self.port} is already in use. "
                f"Stop the conflicting process or pass another --metrics-port."
            ) from e

        self._server_started = True
        logger.info(f"Metrics server started on port {self.port}")
