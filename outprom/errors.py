"""Exception types raised by the exporter.

Configuration problems are fatal at startup. Everything else is raised out of
a single handler update and stops at the dispatcher.
"""

from __future__ import annotations


class ExporterError(Exception):
    """Base class for exporter errors."""


class ConfigError(ExporterError):
    """Invalid configuration or failed series registration."""

    def __init__(self, message: str, problems: list[str] | None = None):
        self.problems = list(problems or [])
        if self.problems:
            message = message + ": " + "; ".join(self.problems)
        super().__init__(message)


class PathSyntaxError(ConfigError):
    """A path expression that cannot be parsed."""


class PathTypeError(ExporterError):
    """A path exists in the record but holds a value of the wrong type."""


class CounterValueError(ExporterError, ValueError):
    """A counter was asked to move backwards."""
