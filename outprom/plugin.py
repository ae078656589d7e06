"""Host-facing lifecycle: init, start, emit, close."""

from __future__ import annotations

from typing import Any

import structlog
from prometheus_client import CollectorRegistry

from outprom.config import ExporterConfig, parse_config
from outprom.dispatcher import Dispatcher
from outprom.errors import ExporterError
from outprom.event import Event
from outprom.handlers import build_handler
from outprom.metrics import ExporterMetrics, start_metrics

log = structlog.get_logger(__name__)


class PrometheusOutput:
    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry
        self.config: ExporterConfig | None = None
        self.dispatcher: Dispatcher | None = None
        self._server = None

    def init(self, raw: Any) -> None:
        """Validate the config. Accepts a decoded mapping or an ``ExporterConfig``."""
        self.config = raw if isinstance(raw, ExporterConfig) else parse_config(raw)

    def start(self) -> None:
        if self.config is None:
            raise ExporterError("start() called before init()")
        if self.registry is None:
            self.registry = CollectorRegistry()

        handlers = [build_handler(d, self.registry) for d in self.config.metrics.values()]
        self.dispatcher = Dispatcher(handlers, ExporterMetrics(self.registry))

        host, port = self.config.address
        self._server = start_metrics(host, port, self.registry)
        log.info("exporter.started", listen=self.config.listen, port=self.address[1], metrics=len(handlers))

    @property
    def address(self) -> tuple[str, int] | None:
        if self._server is None:
            return None
        return self._server.server_address[:2]

    def emit(self, event: Event) -> int:
        if self.dispatcher is None:
            raise ExporterError("emit() called before start()")
        return self.dispatcher.dispatch(event)

    def close(self) -> None:
        if self._server is None:
            return
        self._server.shutdown()
        self._server.server_close()
        self._server = None
        log.info("exporter.closed")
