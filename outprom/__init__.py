"""Turn structured pipeline events into Prometheus gauges and counters."""

from outprom.config import ExporterConfig, load_config, parse_config
from outprom.definition import CountMode, MetricDefinition, MetricKind
from outprom.dispatcher import Dispatcher
from outprom.event import Event
from outprom.handlers import CounterHandler, GaugeHandler, build_handler
from outprom.plugin import PrometheusOutput

__all__ = [
    "CountMode",
    "CounterHandler",
    "Dispatcher",
    "Event",
    "ExporterConfig",
    "GaugeHandler",
    "MetricDefinition",
    "MetricKind",
    "PrometheusOutput",
    "build_handler",
    "load_config",
    "parse_config",
]
