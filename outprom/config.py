from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import yaml

from outprom.contracts import load_schema, validate
from outprom.definition import MetricDefinition
from outprom.errors import ConfigError

DEFAULT_LISTEN = "0.0.0.0:9100"
SCHEMA_FILE = "config.schema.json"


@dataclass(frozen=True)
class ExporterConfig:
    listen: str = DEFAULT_LISTEN
    metrics: Mapping[str, MetricDefinition] = field(default_factory=dict)

    @property
    def address(self) -> tuple[str, int]:
        return parse_listen(self.listen)


def parse_listen(listen: str) -> tuple[str, int]:
    """Split ``host:port``. ``[::1]:9100`` and ``:9100`` are accepted."""
    host, sep, port = listen.rpartition(":")
    if not sep:
        raise ConfigError(f"invalid listen address {listen!r}: expected host:port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        number = int(port)
    except ValueError:
        raise ConfigError(f"invalid listen address {listen!r}: bad port {port!r}") from None
    if not 0 <= number <= 65535:
        raise ConfigError(f"invalid listen address {listen!r}: port out of range")
    return host, number


def parse_config(raw: Any) -> ExporterConfig:
    """Validate an already-decoded config mapping and build the definitions."""
    if raw is None:
        raw = {}
    problems = validate(load_schema(SCHEMA_FILE), raw)
    if problems:
        raise ConfigError("invalid exporter config", problems)

    listen = raw.get("listen") or DEFAULT_LISTEN
    parse_listen(listen)
    metrics = {
        name: MetricDefinition.from_config(name, settings)
        for name, settings in (raw.get("metrics") or {}).items()
    }
    return ExporterConfig(listen=listen, metrics=metrics)


def load_config(path: str) -> ExporterConfig:
    with open(path, "r", encoding="utf-8") as f:
        return parse_config(yaml.safe_load(f))
