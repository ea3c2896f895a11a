"""Type inspection helpers: interface detection, interface closure, base ordering."""

from __future__ import annotations

import abc
import inspect
import types
import typing
from collections.abc import Iterable, Sequence
from typing import Final

from nexus_proxy.domain.descriptors import event
from nexus_proxy.domain.errors import GenericTypeDefinitionError, InvalidProxyRequestError

_NEVER_INTERFACES: Final[frozenset[object]] = frozenset(
    {object, abc.ABC, typing.Protocol, typing.Generic}
)


def is_interface(candidate: object) -> bool:
    """Return whether ``candidate`` is an interface.

    An interface is either a ``typing.Protocol`` class or an ABC whose own
    public members are all abstract and whose bases are interfaces as well.
    """
    if not inspect.isclass(candidate) or candidate in _NEVER_INTERFACES:
        return False
    if getattr(candidate, "_is_protocol", False):
        return True
    if not isinstance(candidate, abc.ABCMeta):
        return False
    for base in candidate.__bases__:
        if base not in _NEVER_INTERFACES and not is_interface(base):
            return False
    for name, value in vars(candidate).items():
        if _is_dunder(name) or not _is_member_value(value):
            continue
        if not getattr(value, "__isabstractmethod__", False):
            return False
    return True


def is_protocol(candidate: object) -> bool:
    return inspect.isclass(candidate) and bool(getattr(candidate, "_is_protocol", False))


def get_all_interfaces(*types_: type) -> list[type]:
    """Return every interface reachable from ``types_`` in MRO order, without duplicates."""
    seen: dict[type, None] = {}
    for item in types_:
        if item is None:
            continue
        for candidate in inspect.getmro(item):
            if candidate not in seen and is_interface(candidate):
                seen[candidate] = None
    return list(seen)


def implements(cls: type, interface: type) -> bool:
    """Nominal check that ``cls`` implements ``interface``.

    Protocols count only when they appear in the MRO; ABCs also honour ``register``.
    """
    if interface in inspect.getmro(cls):
        return True
    if is_protocol(interface) or not isinstance(interface, abc.ABCMeta):
        return False
    return issubclass(cls, interface)


def instance_implements(instance: object, interface: type) -> bool:
    """Runtime check that ``instance`` implements ``interface``.

    Protocols that are not ``runtime_checkable`` are matched nominally.
    """
    if is_protocol(interface) and not getattr(interface, "_is_runtime_protocol", False):
        return interface in inspect.getmro(type(instance))
    return isinstance(instance, interface)


def minimal_bases(candidates: Iterable[type]) -> tuple[type, ...]:
    """Drop every candidate already in the MRO of another candidate.

    Keeps first-seen order so C3 linearisation succeeds for the synthesized type.
    """
    ordered = list(dict.fromkeys(candidates))
    kept: list[type] = []
    for candidate in ordered:
        if any(other is not candidate and candidate in inspect.getmro(other) for other in ordered):
            continue
        kept.append(candidate)
    return tuple(kept)


def resolve_metaclass(name: str, bases: Sequence[type]) -> type:
    """Return the most derived metaclass of ``bases``, synthesizing one on conflict."""
    winner: type = type
    for base in bases:
        meta = type(base)
        if issubclass(winner, meta):
            continue
        if issubclass(meta, winner):
            winner = meta
            continue
        winner = type(f"{name}Meta", (meta, winner), {})
    return winner


def check_not_generic_type_definition(candidate: object, argument_name: str) -> None:
    """Reject subscripted generic aliases; proxies are built for plain classes only."""
    if typing.get_origin(candidate) is not None or isinstance(candidate, types.GenericAlias):
        raise GenericTypeDefinitionError(
            f"{argument_name}: cannot create a proxy for generic alias {candidate!r}; "
            "pass the unsubscripted class instead"
        )
    if not inspect.isclass(candidate):
        raise InvalidProxyRequestError(
            f"{argument_name}: expected a class, got {type(candidate).__name__}"
        )


def check_not_generic_type_definitions(candidates: Iterable[object], argument_name: str) -> None:
    for candidate in candidates:
        check_not_generic_type_definition(candidate, argument_name)


def qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _is_member_value(value: object) -> bool:
    return isinstance(value, (types.FunctionType, staticmethod, classmethod, property, event))


__all__ = [
    "check_not_generic_type_definition",
    "check_not_generic_type_definitions",
    "get_all_interfaces",
    "implements",
    "instance_implements",
    "is_interface",
    "is_protocol",
    "minimal_bases",
    "qualified_name",
    "resolve_metaclass",
]
