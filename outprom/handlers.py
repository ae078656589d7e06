"""Per-metric event handlers bound to prometheus_client series."""

from __future__ import annotations

import abc
import math
from typing import Any

from prometheus_client import CollectorRegistry, Counter, Gauge

from outprom.definition import CountMode, MetricDefinition, MetricKind
from outprom.errors import ConfigError, CounterValueError
from outprom.event import Event
from outprom.path import resolve


class MetricHandler(abc.ABC):
    """Updates one registered metric from each event."""

    metric_cls: Any = None

    def __init__(self, definition: MetricDefinition, registry: CollectorRegistry):
        self.definition = definition
        try:
            self.metric = self.metric_cls(
                definition.name,
                definition.help,
                labelnames=definition.label_keys,
                registry=registry,
            )
        except ValueError as exc:
            raise ConfigError(f"metric {definition.name!r}: {exc}") from exc

    @property
    def name(self) -> str:
        return self.definition.name

    def series(self, event: Event) -> Any:
        # A metric registered without labels refuses .labels()
        if not self.definition.label_keys:
            return self.metric
        return self.metric.labels(*self.definition.label_values(event))

    @abc.abstractmethod
    def update(self, event: Event) -> None:
        """Apply one event to the bound series."""


class GaugeHandler(MetricHandler):
    metric_cls = Gauge

    def update(self, event: Event) -> None:
        # absent value sets 0 for the resolved label combination
        value = resolve(event.record, self.definition.value_path, float).unwrap(0.0)
        self.series(event).set(value)


class CounterHandler(MetricHandler):
    metric_cls = Counter

    def update(self, event: Event) -> None:
        counter = self.series(event)
        d = self.definition
        if d.value_path is None:
            counter.inc()
            return

        if d.count_mode is CountMode.VALUE:
            value = resolve(event.record, d.value_path, float).unwrap()
            if value is None:
                return
            if value < 0 or not math.isfinite(value):
                raise CounterValueError(f"counter value must be a finite number >= 0, got {value}")
            counter.inc(value)
            return

        present = resolve(event.record, d.value_path).found
        if present == (d.count_mode is CountMode.EXIST):
            counter.inc()


_HANDLERS = {
    MetricKind.GAUGE: GaugeHandler,
    MetricKind.COUNTER: CounterHandler,
}


def build_handler(definition: MetricDefinition, registry: CollectorRegistry) -> MetricHandler:
    """Create the handler for ``definition`` and register its metric."""
    return _HANDLERS[definition.kind](definition, registry)
