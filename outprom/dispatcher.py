from __future__ import annotations

from collections.abc import Iterable

import structlog

from outprom.event import Event
from outprom.handlers import MetricHandler
from outprom.metrics import ExporterMetrics


class Dispatcher:
    """Fans each event out to every handler.

    A failing handler is logged and counted, then the next one runs. Nothing
    raised by a handler escapes ``dispatch``.
    """

    def __init__(self, handlers: Iterable[MetricHandler], metrics: ExporterMetrics | None = None):
        self.handlers = tuple(handlers)
        self.metrics = metrics
        self.log = structlog.get_logger(__name__)

    def dispatch(self, event: Event) -> int:
        failures = 0
        for handler in self.handlers:
            try:
                handler.update(event)
            except Exception as exc:
                failures += 1
                self.log.error(
                    "handler.update_failed",
                    metric=handler.name,
                    tag=event.tag,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                if self.metrics is not None:
                    self.metrics.handler_errors_total.labels(metric=handler.name).inc()
        if self.metrics is not None:
            self.metrics.events_dispatched_total.inc()
        return failures
