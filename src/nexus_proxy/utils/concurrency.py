"""Thread concurrency primitives guarding the shared proxy type cache."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


class UpgradeableReadWriteLock:
    """Reader/writer lock with a single upgradeable-read slot.

    - Any number of readers may hold the lock together.
    - At most one thread holds the upgradeable slot; it coexists with readers.
    - ``upgrade()`` waits for current readers to drain and then grants exclusive
      access. While an upgrade or a writer is pending, new readers wait.

    The lock is not reentrant.
    """

    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._upgradeable_held = False
        self._pending_writers = 0

    @contextmanager
    def for_reading(self) -> Iterator[None]:
        with self._condition:
            while self._writer or self._pending_writers:
                self._condition.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._condition:
                self._readers -= 1
                if self._readers == 0:
                    self._condition.notify_all()

    @contextmanager
    def for_reading_upgradeable(self) -> Iterator[UpgradeableLockHandle]:
        with self._condition:
            while self._upgradeable_held or self._writer:
                self._condition.wait()
            self._upgradeable_held = True
        handle = UpgradeableLockHandle(self)
        try:
            yield handle
        finally:
            with self._condition:
                if handle.is_upgraded:
                    self._writer = False
                self._upgradeable_held = False
                self._condition.notify_all()

    @contextmanager
    def for_writing(self) -> Iterator[None]:
        with self._condition:
            self._pending_writers += 1
            try:
                while self._writer or self._readers or self._upgradeable_held:
                    self._condition.wait()
            finally:
                self._pending_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._condition:
                self._writer = False
                self._condition.notify_all()

    def _upgrade(self) -> None:
        with self._condition:
            self._pending_writers += 1
            try:
                while self._readers or self._writer:
                    self._condition.wait()
            finally:
                self._pending_writers -= 1
            self._writer = True

    def snapshot(self) -> dict[str, int | bool]:
        with self._condition:
            return {
                "readers": self._readers,
                "writer": self._writer,
                "upgradeable_held": self._upgradeable_held,
                "pending_writers": self._pending_writers,
            }


class UpgradeableLockHandle:
    """Handle yielded by :meth:`UpgradeableReadWriteLock.for_reading_upgradeable`."""

    __slots__ = ("_lock", "_upgraded")

    def __init__(self, lock: UpgradeableReadWriteLock) -> None:
        self._lock = lock
        self._upgraded = False

    @property
    def is_upgraded(self) -> bool:
        return self._upgraded

    def upgrade(self) -> None:
        """Escalate to exclusive access; a second call is a no-op."""
        if self._upgraded:
            return
        self._lock._upgrade()
        self._upgraded = True


__all__ = ["UpgradeableLockHandle", "UpgradeableReadWriteLock"]
