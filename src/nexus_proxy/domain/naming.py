"""Hierarchical unique-identifier allocation for synthesized types and members."""

from __future__ import annotations

import threading
from typing import Final

_SUFFIX_SEPARATOR: Final[str] = "_"


class NamingScope:
    """Allocates identifiers that never collide inside one scope tree.

    A child created with :meth:`safe_sub_scope` consults its ancestors before
    handing out a name and reserves every name it allocates in all of them, so
    siblings and ancestors can never receive the same identifier.
    """

    __slots__ = ("_counters", "_lock", "_parent")

    def __init__(self, parent: NamingScope | None = None) -> None:
        self._parent = parent
        self._counters: dict[str, int] = {}
        self._lock: threading.RLock = parent._lock if parent is not None else threading.RLock()

    @property
    def parent(self) -> NamingScope | None:
        return self._parent

    def get_unique_name(self, suggested_name: str) -> str:
        """Return ``suggested_name`` or the first free ``suggested_name_<n>``."""
        base = _validate_name(suggested_name)
        with self._lock:
            counter = self._find_counter(base)
            if counter is None:
                self._reserve(base, 0)
                return base

            while True:
                counter += 1
                candidate = f"{base}{_SUFFIX_SEPARATOR}{counter}"
                if not self._is_taken(candidate):
                    break
            self._reserve(base, counter)
            self._reserve(candidate, 0)
            return candidate

    def safe_sub_scope(self) -> NamingScope:
        """Return a child scope whose names are reserved in this scope as well."""
        return NamingScope(self)

    def is_taken(self, name: str) -> bool:
        with self._lock:
            return self._is_taken(name)

    def _find_counter(self, name: str) -> int | None:
        scope: NamingScope | None = self
        best: int | None = None
        while scope is not None:
            counter = scope._counters.get(name)
            if counter is not None and (best is None or counter > best):
                best = counter
            scope = scope._parent
        return best

    def _is_taken(self, name: str) -> bool:
        return self._find_counter(name) is not None

    def _reserve(self, name: str, counter: int) -> None:
        scope: NamingScope | None = self
        while scope is not None:
            if scope._counters.get(name, -1) < counter:
                scope._counters[name] = counter
            scope = scope._parent


def _validate_name(value: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"suggested name must be a string, got {type(value).__name__}")
    normalized = value.strip()
    if not all(part.isidentifier() for part in normalized.split(".")):
        raise ValueError(f"suggested name must be a dotted identifier, got {value!r}")
    return normalized


__all__ = ["NamingScope"]
