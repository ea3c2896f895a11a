"""
nexus-proxy — unit tests for observability metrics

File: tests/unit/observability/test_metrics.py
Last updated: 2026-10-19

Purpose
- Verify thread-safe metric updates and deterministic snapshot/export behavior.

What this test file should cover
- Thread-safe counter increments.
- Labelled series, gauges, summaries and timers.
- Deterministic snapshot key stability and JSON export.
- Input validation.
"""

from __future__ import annotations

import json
import math
import threading

import pytest

from nexus_proxy.observability.metrics import MetricsRegistry


def test_thread_safe_counter_increments() -> None:
    registry = MetricsRegistry()

    def worker() -> None:
        for _ in range(2000):
            registry.inc("proxy_cache_hits_total", 1)

    threads = [threading.Thread(target=worker) for _ in range(6)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert registry.get_counter("proxy_cache_hits_total") == 12_000.0


def test_labelled_counters_are_separate_series() -> None:
    registry = MetricsRegistry()
    registry.inc("proxy_types_generated_total", labels={"kind": "class"})
    registry.inc("proxy_types_generated_total", 2, labels={"kind": "interface"})

    assert registry.get_counter("proxy_types_generated_total", labels={"kind": "class"}) == 1.0
    assert registry.get_counter("proxy_types_generated_total") == 0.0
    assert registry.total("proxy_types_generated_total") == 3.0
    assert registry.total("absent") == 0.0


def test_gauges_and_summaries() -> None:
    registry = MetricsRegistry()
    registry.set_gauge("proxy_cache_size", 3)
    registry.set_gauge("proxy_cache_size", 4)
    registry.observe("proxy_generation_seconds", 0.5)
    registry.observe("proxy_generation_seconds", 1.5)

    assert registry.get_gauge("proxy_cache_size") == 4.0
    assert registry.get_gauge("absent") is None
    assert registry.get_summary("proxy_generation_seconds") == {
        "count": 2,
        "sum": 2.0,
        "min": 0.5,
        "max": 1.5,
        "avg": 1.0,
    }
    assert registry.get_summary("absent") is None


def test_timer_observes_even_when_the_block_raises() -> None:
    registry = MetricsRegistry()

    with registry.timer("proxy_generation_seconds"):
        pass
    with pytest.raises(RuntimeError), registry.timer("proxy_generation_seconds"):
        raise RuntimeError("boom")

    summary = registry.get_summary("proxy_generation_seconds")
    assert summary is not None
    assert summary["count"] == 2
    assert isinstance(summary["min"], float)
    assert summary["min"] >= 0.0


def test_snapshot_is_deterministic_and_json_serializable() -> None:
    registry = MetricsRegistry()
    registry.inc("proxy_cache_misses_total", 2, labels={"z": "9", "a": "1"})
    registry.set_gauge("proxy_cache_size", 3)
    registry.observe("proxy_generation_seconds", 10)

    first = registry.snapshot()
    second = registry.snapshot()

    assert first == second
    assert first["counters"] == {"proxy_cache_misses_total{a=1,z=9}": 2.0}
    assert first["gauges"] == {"proxy_cache_size": 3.0}
    assert registry.to_json() == registry.to_json()
    assert json.loads(registry.to_json(indent=2)) == first


@pytest.mark.parametrize(
    ("call", "message"),
    [
        (lambda r: r.inc("x", -1), "must be >= 0"),
        (lambda r: r.inc("x", True), "must be numeric"),
        (lambda r: r.set_gauge("x", math.inf), "must be finite"),
        (lambda r: r.observe("  ", 1), "must not be empty"),
        (lambda r: r.inc("x" * 129), "<= 128 characters"),
        (lambda r: r.inc("x", labels={"kind": " "}), "non-empty key and value"),
        (lambda r: r.inc(3), "must be a string"),
    ],
)
def test_invalid_inputs_are_rejected(call: object, message: str) -> None:
    registry = MetricsRegistry()

    with pytest.raises(ValueError, match=message):
        call(registry)  # type: ignore[operator]

    assert registry.snapshot() == {"counters": {}, "gauges": {}, "summaries": {}}
