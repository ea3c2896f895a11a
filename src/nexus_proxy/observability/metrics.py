"""Thread-safe proxy-scope metrics: cache hits and misses, synthesis counts and timings."""

from __future__ import annotations

import json
import math
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]

_Labels = tuple[tuple[str, str], ...]

_NAME_MAX_LEN: Final[int] = 128
_LABEL_MAX_LEN: Final[int] = 256


@dataclass(frozen=True, order=True, slots=True)
class _SeriesKey:
    name: str
    labels: _Labels

    def identifier(self) -> str:
        if not self.labels:
            return self.name
        rendered = ",".join(f"{key}={value}" for key, value in self.labels)
        return f"{self.name}{{{rendered}}}"


@dataclass(slots=True)
class _Summary:
    count: int = 0
    total: float = 0.0
    minimum: float | None = None
    maximum: float | None = None

    def add(self, sample: float) -> None:
        self.count += 1
        self.total += sample
        self.minimum = sample if self.minimum is None else min(self.minimum, sample)
        self.maximum = sample if self.maximum is None else max(self.maximum, sample)

    def as_dict(self) -> dict[str, JSONValue]:
        return {
            "count": self.count,
            "sum": self.total,
            "min": self.minimum,
            "max": self.maximum,
            "avg": self.total / self.count if self.count else 0.0,
        }


class MetricsRegistry:
    """In-memory counters, gauges and summaries shared by one proxy scope."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[_SeriesKey, float] = {}
        self._gauges: dict[_SeriesKey, float] = {}
        self._summaries: dict[_SeriesKey, _Summary] = {}

    def inc(
        self, name: str, amount: float = 1.0, *, labels: Mapping[str, str] | None = None
    ) -> None:
        """Increment a counter by ``amount`` (>= 0)."""
        delta = _finite(amount, "amount")
        if delta < 0:
            raise ValueError("counter increment amount must be >= 0")
        key = _series(name, labels)
        with self._lock:
            self._counters[key] = self._counters.get(key, 0.0) + delta

    def set_gauge(
        self, name: str, value: float, *, labels: Mapping[str, str] | None = None
    ) -> None:
        key = _series(name, labels)
        parsed = _finite(value, "value")
        with self._lock:
            self._gauges[key] = parsed

    def observe(self, name: str, value: float, *, labels: Mapping[str, str] | None = None) -> None:
        key = _series(name, labels)
        sample = _finite(value, "value")
        with self._lock:
            self._summaries.setdefault(key, _Summary()).add(sample)

    @contextmanager
    def timer(self, name: str, *, labels: Mapping[str, str] | None = None) -> Iterator[None]:
        """Observe the wall-clock seconds spent inside the block, even when it raises."""
        started = time.perf_counter()
        try:
            yield
        finally:
            self.observe(name, time.perf_counter() - started, labels=labels)

    def get_counter(self, name: str, *, labels: Mapping[str, str] | None = None) -> float:
        key = _series(name, labels)
        with self._lock:
            return self._counters.get(key, 0.0)

    def get_gauge(self, name: str, *, labels: Mapping[str, str] | None = None) -> float | None:
        key = _series(name, labels)
        with self._lock:
            return self._gauges.get(key)

    def get_summary(
        self, name: str, *, labels: Mapping[str, str] | None = None
    ) -> dict[str, JSONValue] | None:
        key = _series(name, labels)
        with self._lock:
            summary = self._summaries.get(key)
            return None if summary is None else summary.as_dict()

    def total(self, name: str) -> float:
        """Sum of a counter across all label sets."""
        with self._lock:
            return sum(value for key, value in self._counters.items() if key.name == name)

    def snapshot(self) -> dict[str, JSONValue]:
        """Deterministic snapshot with stable key ordering."""
        with self._lock:
            counters = sorted(self._counters.items())
            gauges = sorted(self._gauges.items())
            summaries = sorted((key, value.as_dict()) for key, value in self._summaries.items())
        return {
            "counters": {key.identifier(): value for key, value in counters},
            "gauges": {key.identifier(): value for key, value in gauges},
            "summaries": {key.identifier(): value for key, value in summaries},
        }

    def to_json(self, *, indent: int | None = None) -> str:
        payload = self.snapshot()
        if indent is None:
            return json.dumps(payload, sort_keys=True, separators=(",", ":"))
        return json.dumps(payload, sort_keys=True, indent=indent)


def _series(name: str, labels: Mapping[str, str] | None) -> _SeriesKey:
    return _SeriesKey(name=_validate_name(name), labels=_normalize_labels(labels))


def _validate_name(name: str) -> str:
    if not isinstance(name, str):
        raise ValueError(f"metric name must be a string, got {type(name).__name__}")
    normalized = name.strip()
    if not normalized:
        raise ValueError("metric name must not be empty")
    if len(normalized) > _NAME_MAX_LEN:
        raise ValueError(f"metric name must be <= {_NAME_MAX_LEN} characters")
    return normalized


def _normalize_labels(labels: Mapping[str, str] | None) -> _Labels:
    if not labels:
        return ()
    out: list[tuple[str, str]] = []
    for key, value in labels.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise ValueError("metric labels must map strings to strings")
        key_name, val_name = key.strip(), value.strip()
        if not key_name or not val_name:
            raise ValueError(f"metric label {key!r} must have a non-empty key and value")
        if len(key_name) > _LABEL_MAX_LEN or len(val_name) > _LABEL_MAX_LEN:
            raise ValueError(f"metric label {key!r} exceeds {_LABEL_MAX_LEN} characters")
        out.append((key_name, val_name))
    out.sort()
    return tuple(out)


def _finite(value: float, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{path} must be numeric, got {type(value).__name__}")
    parsed = float(value)
    if not math.isfinite(parsed):
        raise ValueError(f"{path} must be finite")
    return parsed


__all__ = ["JSONScalar", "JSONValue", "MetricsRegistry"]
