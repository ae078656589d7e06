from __future__ import annotations

import threading
from typing import Any, Iterable

from opentelemetry import trace

from outprom.event import Event
from outprom.plugin import PrometheusOutput


def run(
    consumer: Iterable[Any],
    output: PrometheusOutput,
    stop: threading.Event,
    tracer: trace.Tracer | None = None,
    idle_wait: float = 0.4,
) -> int:
    """Feed consumer messages to ``output`` until ``stop`` is set.

    The consumer is expected to end its iteration when idle (kafka-python's
    ``consumer_timeout_ms``), which lets the loop notice ``stop``.
    """
    tracer = tracer or trace.get_tracer(__name__)
    handled = 0
    while not stop.is_set():
        any_msg = False
        in_pass = 0
        with tracer.start_as_current_span("exporter_poll_loop") as span:
            for msg in consumer:
                any_msg = True
                output.emit(Event.from_message(msg))
                in_pass += 1
                if stop.is_set():
                    break
            span.set_attribute("outprom.events_handled", in_pass)
        handled += in_pass

        if not any_msg:
            stop.wait(idle_wait)
    return handled
