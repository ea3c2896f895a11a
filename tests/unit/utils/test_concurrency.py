"""Tests for the upgradeable reader/writer lock guarding the proxy type cache."""

from __future__ import annotations

import threading
import time

import pytest

from nexus_proxy.utils.concurrency import UpgradeableReadWriteLock

_TIMEOUT = 5.0


def _wait_until(predicate: object) -> None:
    deadline = time.monotonic() + _TIMEOUT
    while not predicate():  # type: ignore[operator]
        if time.monotonic() > deadline:
            raise AssertionError("condition not reached in time")
        time.sleep(0.005)


def _start(target: object) -> threading.Thread:
    thread = threading.Thread(target=target, daemon=True)  # type: ignore[arg-type]
    thread.start()
    return thread


def test_readers_hold_the_lock_together() -> None:
    lock = UpgradeableReadWriteLock()
    barrier = threading.Barrier(3, timeout=_TIMEOUT)
    seen: list[int] = []

    def reader() -> None:
        with lock.for_reading():
            barrier.wait()
            seen.append(int(lock.snapshot()["readers"]))
            barrier.wait()

    threads = [_start(reader) for _ in range(3)]
    for thread in threads:
        thread.join(_TIMEOUT)

    assert seen == [3, 3, 3]
    assert lock.snapshot() == {
        "readers": 0,
        "writer": False,
        "upgradeable_held": False,
        "pending_writers": 0,
    }


def test_upgradeable_reader_coexists_with_readers() -> None:
    lock = UpgradeableReadWriteLock()

    with lock.for_reading_upgradeable() as handle, lock.for_reading():
        state = lock.snapshot()

    assert state["readers"] == 1
    assert state["upgradeable_held"] is True
    assert not handle.is_upgraded


def test_upgrade_waits_for_readers_to_drain() -> None:
    lock = UpgradeableReadWriteLock()
    reader_in = threading.Event()
    release_reader = threading.Event()
    order: list[str] = []

    def reader() -> None:
        with lock.for_reading():
            reader_in.set()
            release_reader.wait(_TIMEOUT)
            order.append("reader-done")

    def upgrader() -> None:
        with lock.for_reading_upgradeable() as handle:
            handle.upgrade()
            handle.upgrade()
            order.append("upgraded")

    def late_reader() -> None:
        with lock.for_reading():
            order.append("late-reader")

    first = _start(reader)
    assert reader_in.wait(_TIMEOUT)
    second = _start(upgrader)
    _wait_until(lambda: lock.snapshot()["pending_writers"] == 1)
    third = _start(late_reader)
    release_reader.set()
    for thread in (first, second, third):
        thread.join(_TIMEOUT)

    assert order == ["reader-done", "upgraded", "late-reader"]
    assert lock.snapshot()["writer"] is False


def test_only_one_upgradeable_holder_at_a_time() -> None:
    lock = UpgradeableReadWriteLock()
    order: list[str] = []

    with lock.for_reading_upgradeable():
        contender = _start(lambda: _hold_upgradeable(lock, order))
        time.sleep(0.05)
        order.append("first")

    contender.join(_TIMEOUT)
    assert order == ["first", "second"]


def _hold_upgradeable(lock: UpgradeableReadWriteLock, order: list[str]) -> None:
    with lock.for_reading_upgradeable():
        order.append("second")


def test_writer_is_exclusive() -> None:
    lock = UpgradeableReadWriteLock()
    order: list[str] = []

    with lock.for_writing():
        state = lock.snapshot()
        reader = _start(lambda: _read_and_record(lock, order))
        time.sleep(0.05)
        order.append("writer-done")

    reader.join(_TIMEOUT)
    assert state["writer"] is True
    assert state["readers"] == 0
    assert order == ["writer-done", "reader"]


def _read_and_record(lock: UpgradeableReadWriteLock, order: list[str]) -> None:
    with lock.for_reading():
        order.append("reader")


def test_upgrade_is_released_when_the_block_raises() -> None:
    lock = UpgradeableReadWriteLock()

    with pytest.raises(KeyError), lock.for_reading_upgradeable() as handle:
        handle.upgrade()
        assert lock.snapshot()["writer"] is True
        raise KeyError("cache")

    assert handle.is_upgraded
    assert lock.snapshot() == {
        "readers": 0,
        "writer": False,
        "upgradeable_held": False,
        "pending_writers": 0,
    }
    with lock.for_writing():
        assert lock.snapshot()["writer"] is True
