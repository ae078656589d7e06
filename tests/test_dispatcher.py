"""Tests for fan-out and per-handler failure isolation."""

from __future__ import annotations

from structlog.testing import capture_logs

from outprom.definition import MetricDefinition
from outprom.dispatcher import Dispatcher
from outprom.handlers import build_handler
from outprom.metrics import ExporterMetrics


def _handlers(registry):
    settings = {
        "first_total": {"type": "counter"},
        "second": {"type": "gauge", "value": "reading"},
        "third": {"type": "counter", "value": "reading", "count_mode": "exist"},
    }
    return [build_handler(MetricDefinition.from_config(n, s), registry) for n, s in settings.items()]


class TestDispatch:
    def test_all_handlers_see_the_event(self, registry, make_event):
        d = Dispatcher(_handlers(registry))
        assert d.dispatch(make_event({"reading": 7})) == 0
        assert registry.get_sample_value("first_total") == 1
        assert registry.get_sample_value("second") == 7
        assert registry.get_sample_value("third_total") == 1

    def test_failing_handler_is_isolated(self, registry, make_event):
        d = Dispatcher(_handlers(registry))
        # "second" cannot read a string as a number, the others still run
        failures = d.dispatch(make_event({"reading": "n/a"}))
        assert failures == 1
        assert registry.get_sample_value("first_total") == 1
        assert registry.get_sample_value("second") == 0
        assert registry.get_sample_value("third_total") == 1

    def test_failure_is_logged_with_context(self, registry, make_event):
        d = Dispatcher(_handlers(registry))
        with capture_logs() as logs:
            d.dispatch(make_event({"reading": "n/a"}, tag="sensors"))
        errors = [e for e in logs if e["event"] == "handler.update_failed"]
        assert len(errors) == 1
        assert errors[0]["log_level"] == "error"
        assert errors[0]["metric"] == "second"
        assert errors[0]["tag"] == "sensors"
        assert errors[0]["error_type"] == "PathTypeError"

    def test_unexpected_exceptions_are_isolated(self, registry, make_event):
        class Exploding:
            name = "boom"

            def update(self, event):
                raise RuntimeError("kaboom")

        handlers = _handlers(registry)
        handlers.insert(1, Exploding())
        d = Dispatcher(handlers)
        assert d.dispatch(make_event({"reading": 1})) == 1
        assert registry.get_sample_value("first_total") == 1
        assert registry.get_sample_value("third_total") == 1

    def test_no_handlers(self, make_event):
        assert Dispatcher([]).dispatch(make_event({})) == 0


class TestExporterMetrics:
    def test_counts_events_and_errors(self, registry, make_event):
        d = Dispatcher(_handlers(registry), ExporterMetrics(registry))
        d.dispatch(make_event({"reading": 1}))
        d.dispatch(make_event({"reading": "bad"}))
        d.dispatch(make_event({"reading": "worse"}))
        assert registry.get_sample_value("outprom_events_dispatched_total") == 3
        assert registry.get_sample_value("outprom_handler_errors_total", {"metric": "second"}) == 2


class TestGaugeWithoutValue:
    def test_bad_label_is_reported_when_value_missing(self, registry, make_event):
        h = build_handler(
            MetricDefinition.from_config("room_temp", {"type": "gauge", "value": "t", "labels": {"room": "room"}}),
            registry,
        )
        d = Dispatcher([h])
        with capture_logs() as logs:
            assert d.dispatch(make_event({"room": ["a", "b"]})) == 1
        assert [e["metric"] for e in logs if e["event"] == "handler.update_failed"] == ["room_temp"]
