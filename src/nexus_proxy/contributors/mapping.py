"""Interface → contributor mapping built while planning a proxy type."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nexus_proxy.domain.errors import DuplicateInterfaceError
from nexus_proxy.domain.typeutil import qualified_name

if TYPE_CHECKING:
    from collections.abc import Iterator


class TypeImplementerMapping:
    """Ordered mapping where each interface is owned by exactly one contributor."""

    __slots__ = ("_mapping",)

    def __init__(self) -> None:
        self._mapping: dict[type, object] = {}

    def add(self, interface: type, contributor: object) -> None:
        """Map ``interface``; raise :class:`DuplicateInterfaceError` if it is already mapped."""
        existing = self._mapping.get(interface)
        if existing is not None:
            raise DuplicateInterfaceError(
                f"interface {qualified_name(interface)} is already implemented by "
                f"{_contributor_name(existing)}; it cannot also be implemented by "
                f"{_contributor_name(contributor)}"
            )
        self._mapping[interface] = contributor

    def add_if_absent(self, interface: type, contributor: object) -> bool:
        if interface in self._mapping:
            return False
        self._mapping[interface] = contributor
        return True

    def get(self, interface: type) -> object | None:
        return self._mapping.get(interface)

    @property
    def interfaces(self) -> tuple[type, ...]:
        return tuple(self._mapping)

    def items(self) -> tuple[tuple[type, object], ...]:
        return tuple(self._mapping.items())

    def __contains__(self, interface: object) -> bool:
        return interface in self._mapping

    def __iter__(self) -> Iterator[type]:
        return iter(tuple(self._mapping))

    def __len__(self) -> int:
        return len(self._mapping)


def _contributor_name(contributor: object) -> str:
    return str(getattr(contributor, "name", type(contributor).__name__))


__all__ = ["TypeImplementerMapping"]
