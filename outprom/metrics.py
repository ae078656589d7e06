"""Exporter self-metrics and the HTTP exposition server.

prometheus_client's server answers GET on any path, /metrics included.
"""

from prometheus_client import CollectorRegistry, Counter, start_http_server


class ExporterMetrics:
    """The exporter's own series, registered next to the configured ones."""

    def __init__(self, registry: CollectorRegistry):
        self.events_dispatched_total = Counter(
            "outprom_events_dispatched_total", "Events fanned out to metric handlers", registry=registry
        )
        self.handler_errors_total = Counter(
            "outprom_handler_errors_total", "Metric handler update failures", ["metric"], registry=registry
        )


def start_metrics(host: str, port: int, registry: CollectorRegistry):
    """Serve ``registry`` in a daemon thread and return the HTTP server."""
    server, _thread = start_http_server(port, addr=host or "0.0.0.0", registry=registry)
    return server
