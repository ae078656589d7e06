import os
import signal
import threading
from dataclasses import replace

import structlog
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource

from outprom.config import load_config
from outprom.kafka import make_consumer
from outprom.log import setup_logging
from outprom.plugin import PrometheusOutput
from outprom.runner import run

log = structlog.get_logger("outprom.app")


def setup_tracing():
    service_name = os.environ.get("SERVICE_NAME", "prom-exporter")

    resource = Resource.create({
        SERVICE_NAME: service_name
    })

    provider = TracerProvider(resource=resource)

    processor = BatchSpanProcessor(
        OTLPSpanExporter(endpoint=os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT"))
    )
    provider.add_span_processor(processor)
    trace.set_tracer_provider(provider)

    return trace.get_tracer(__name__)


def load_exporter_config():
    conf = load_config(os.environ.get("EXPORTER_CONFIG", "/configs/exporter.yml"))
    listen = os.environ.get("METRICS_LISTEN")
    if listen:
        conf = replace(conf, listen=listen)
    return conf


def main():
    setup_logging(os.environ.get("LOG_LEVEL", "INFO"), os.environ.get("LOG_FORMAT", "json"))
    tracer = setup_tracing()

    output = PrometheusOutput()
    output.init(load_exporter_config())
    output.start()

    topics = [t.strip() for t in os.environ.get("EXPORTER_TOPICS", "events").split(",") if t.strip()]
    consumer = make_consumer(
        os.environ["KAFKA_BROKERS"],
        topics,
        group_id=os.environ.get("GROUP_ID", "prom-exporter"),
    )

    stop = threading.Event()
    signal.signal(signal.SIGTERM, lambda *_: stop.set())
    signal.signal(signal.SIGINT, lambda *_: stop.set())

    log.info("exporter.consuming", topics=topics)
    try:
        handled = run(consumer, output, stop, tracer=tracer)
    finally:
        consumer.close()
        output.close()
        trace.get_tracer_provider().shutdown()
    log.info("exporter.stopped", events=handled)


if __name__ == "__main__":
    main()
