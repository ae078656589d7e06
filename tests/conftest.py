from __future__ import annotations

import pytest
from prometheus_client import CollectorRegistry

from outprom.event import Event


@pytest.fixture()
def registry():
    """Isolated registry so tests never touch the global REGISTRY."""
    return CollectorRegistry()


@pytest.fixture()
def make_event():
    def _make(record, tag="test.events"):
        return Event(tag=tag, record=record, time=0.0)

    return _make
