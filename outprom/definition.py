"""Metric definitions built from the ``metrics`` section of the config."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from outprom.errors import ConfigError
from outprom.event import Event
from outprom.path import Path, parse_path, resolve


class MetricKind(str, enum.Enum):
    GAUGE = "gauge"
    COUNTER = "counter"


class CountMode(str, enum.Enum):
    VALUE = "value"
    EXIST = "exist"
    NON_EXIST = "non_exist"


def _enum_value(enum_cls: type[enum.Enum], raw: Any, what: str) -> Any:
    try:
        return enum_cls(raw)
    except ValueError:
        raise ConfigError(f"Unknown {what}: {raw}") from None


@dataclass(frozen=True)
class MetricDefinition:
    """One named metric and the paths that feed it.

    ``label_keys`` is the sorted tuple of label names. It is fixed at
    construction and is both the label schema registered with the registry
    and the order of values returned by ``label_values``.
    """

    name: str
    kind: MetricKind
    help: str = ""
    value: str = ""
    labels: Mapping[str, str] = field(default_factory=dict)
    count_mode: CountMode = CountMode.VALUE

    label_keys: tuple[str, ...] = field(init=False)
    value_path: Path | None = field(init=False, repr=False, compare=False)
    _label_paths: tuple[Path, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        kind = _enum_value(MetricKind, self.kind, "metric type")
        count_mode = _enum_value(CountMode, self.count_mode or CountMode.VALUE, "count mode")
        if kind is MetricKind.GAUGE and not self.value:
            raise ConfigError(f"metric {self.name!r}: gauge requires a value path")

        labels = dict(self.labels or {})
        keys = tuple(sorted(labels))
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "count_mode", count_mode)
        object.__setattr__(self, "help", self.help or "")
        object.__setattr__(self, "value", self.value or "")
        object.__setattr__(self, "labels", labels)
        object.__setattr__(self, "label_keys", keys)
        object.__setattr__(self, "value_path", parse_path(self.value) if self.value else None)
        object.__setattr__(self, "_label_paths", tuple(parse_path(labels[k]) for k in keys))

    @classmethod
    def from_config(cls, name: str, raw: Mapping[str, Any]) -> "MetricDefinition":
        return cls(
            name=name,
            kind=raw.get("type"),
            help=raw.get("help", ""),
            value=raw.get("value", ""),
            labels=raw.get("labels") or {},
            count_mode=raw.get("count_mode") or CountMode.VALUE,
        )

    def label_values(self, event: Event) -> list[str]:
        """Resolve one string per label key, in ``label_keys`` order.

        Absent paths give ``""``. A value that cannot be rendered as a string
        raises ``PathTypeError`` and no values are returned.
        """
        return [resolve(event.record, p, str).unwrap("") for p in self._label_paths]
