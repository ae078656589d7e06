import time
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Event:
    """One record delivered by the upstream pipeline."""

    tag: str
    record: Any
    time: float = field(default_factory=time.time)

    @classmethod
    def from_message(cls, msg: Any) -> "Event":
        # kafka-python timestamps are epoch milliseconds, -1 when unset
        ts = getattr(msg, "timestamp", None)
        when = ts / 1000.0 if ts is not None and ts >= 0 else time.time()
        return cls(tag=msg.topic, record=msg.value, time=when)
