"""Path expressions into nested event records.

A path is a run of key segments separated by ``.`` or ``/`` (a leading
separator is allowed), where any key may carry ``[N]`` index suffixes::

    cpu.load
    /cpu/load
    items[0].name
    matrix[1][0]

Resolution never raises for a missing path. It returns a ``Resolution`` whose
``outcome`` tells the caller whether the value was found, absent, or present
with an unusable type.
"""

from __future__ import annotations

import enum
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from outprom.errors import PathSyntaxError, PathTypeError

_SEPARATORS = "./"
_SEGMENT = re.compile(r"(?P<key>[^./\[\]]+)|\[(?P<index>\d+)\]")

Segment = Union[str, int]


@dataclass(frozen=True)
class Path:
    expr: str
    segments: tuple[Segment, ...]

    def __str__(self) -> str:
        return self.expr


def parse_path(expr: str) -> Path:
    if not isinstance(expr, str) or not expr:
        raise PathSyntaxError(f"invalid path expression {expr!r}: empty")

    segments: list[Segment] = []
    pos = 1 if expr[0] in _SEPARATORS else 0
    after_sep = True
    while pos < len(expr):
        if expr[pos] in _SEPARATORS:
            if after_sep:
                raise PathSyntaxError(f"invalid path expression {expr!r}: empty segment at {pos}")
            after_sep = True
            pos += 1
            continue
        m = _SEGMENT.match(expr, pos)
        if m is None:
            raise PathSyntaxError(f"invalid path expression {expr!r}: unexpected {expr[pos]!r} at {pos}")
        if m.group("key") is not None:
            if not after_sep:
                raise PathSyntaxError(f"invalid path expression {expr!r}: missing separator at {pos}")
            segments.append(m.group("key"))
        else:
            segments.append(int(m.group("index")))
        after_sep = False
        pos = m.end()

    if after_sep:
        raise PathSyntaxError(f"invalid path expression {expr!r}: trailing separator")
    return Path(expr, tuple(segments))


class Outcome(enum.Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    TYPE_MISMATCH = "type_mismatch"


@dataclass(frozen=True)
class Resolution:
    outcome: Outcome
    value: Any = None
    reason: str = ""

    @property
    def found(self) -> bool:
        return self.outcome is Outcome.FOUND

    def unwrap(self, default: Any = None) -> Any:
        """Return the value, ``default`` when absent, raise on a type mismatch."""
        if self.outcome is Outcome.FOUND:
            return self.value
        if self.outcome is Outcome.NOT_FOUND:
            return default
        raise PathTypeError(self.reason)


_NOT_FOUND = Resolution(Outcome.NOT_FOUND)


def _mismatch(path: Path, value: Any, target: type) -> Resolution:
    return Resolution(
        Outcome.TYPE_MISMATCH,
        reason=f"path {path.expr!r}: cannot use {type(value).__name__} value as {target.__name__}",
    )


def _as_float(path: Path, value: Any) -> Resolution:
    if isinstance(value, bool):
        return _mismatch(path, value, float)
    if isinstance(value, (int, float)):
        return Resolution(Outcome.FOUND, float(value))
    if isinstance(value, str):
        try:
            return Resolution(Outcome.FOUND, float(value.strip()))
        except ValueError:
            return Resolution(
                Outcome.TYPE_MISMATCH,
                reason=f"path {path.expr!r}: {value!r} is not a number",
            )
    return _mismatch(path, value, float)


def _as_str(path: Path, value: Any) -> Resolution:
    if isinstance(value, str):
        return Resolution(Outcome.FOUND, value)
    if isinstance(value, bool):
        return Resolution(Outcome.FOUND, "true" if value else "false")
    if isinstance(value, int):
        return Resolution(Outcome.FOUND, str(value))
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return Resolution(Outcome.FOUND, str(int(value)))
        return Resolution(Outcome.FOUND, repr(value))
    return _mismatch(path, value, str)


_CONVERTERS = {float: _as_float, str: _as_str}


def _step(node: Any, segment: Segment) -> tuple[bool, Any]:
    if isinstance(node, Mapping):
        if isinstance(segment, str) and segment in node:
            return True, node[segment]
        return False, None
    if isinstance(node, (list, tuple)):
        if isinstance(segment, str):
            if not segment.isdigit():
                return False, None
            segment = int(segment)
        if segment < len(node):
            return True, node[segment]
    return False, None


def resolve(record: Any, path: Path | str, target: type | None = None) -> Resolution:
    """Walk ``path`` through ``record`` and convert the leaf to ``target``.

    ``target`` is ``float``, ``str`` or ``None``. With ``None`` any present
    value counts as found, including ``None``, ``False`` and ``0``. Typed
    targets treat an explicit ``None`` as absent.
    """
    if isinstance(path, str):
        path = parse_path(path)
    if target is not None and target not in _CONVERTERS:
        raise TypeError(f"unsupported resolution target {target!r}")

    node = record
    for segment in path.segments:
        ok, node = _step(node, segment)
        if not ok:
            return _NOT_FOUND

    if target is None:
        return Resolution(Outcome.FOUND, node)
    if node is None:
        return _NOT_FOUND
    return _CONVERTERS[target](path, node)
