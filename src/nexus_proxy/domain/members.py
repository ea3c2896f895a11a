"""Declared member surface of a class or interface.

A member is a method, a property (getter / setter) or an ``event``
(adder / remover). Each callable part is described by a :class:`MethodInfo`,
which knows how to reach the same member on a target object (dynamic dispatch)
and how to call the declared function directly (a base-class call).
"""

from __future__ import annotations

import inspect
import types
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final

from nexus_proxy.domain.descriptors import BoundEvent, event
from nexus_proxy.domain.infrastructure import ProxyTargetAccessor
from nexus_proxy.domain.typeutil import is_protocol

_NEVER_COLLECTED: Final[frozenset[type]] = frozenset({object, ProxyTargetAccessor})


class MemberKind(Enum):
    METHOD = "method"
    PROPERTY = "property"
    EVENT = "event"


class AccessorRole(Enum):
    CALL = "call"
    GET = "get"
    SET = "set"
    ADD = "add"
    REMOVE = "remove"

    @property
    def kind(self) -> MemberKind:
        if self is AccessorRole.CALL:
            return MemberKind.METHOD
        if self in (AccessorRole.GET, AccessorRole.SET):
            return MemberKind.PROPERTY
        return MemberKind.EVENT


@dataclass(frozen=True, slots=True)
class MethodInfo:
    """One callable part of a declared member."""

    name: str
    role: AccessorRole
    declaring_type: type
    function: Callable[..., Any] | None = field(default=None, compare=False, repr=False)
    is_abstract: bool = False
    is_virtual: bool = True
    # ``staticmethod`` or ``classmethod`` when the member was declared with one.
    wrapper: type | None = None

    @property
    def kind(self) -> MemberKind:
        return self.role.kind

    @property
    def qualified_name(self) -> str:
        base = f"{self.declaring_type.__qualname__}.{self.name}"
        if self.role is AccessorRole.CALL:
            return base
        return f"{base}.{self.role.value}"

    def invoke(self, target: object, args: Sequence[object], kwargs: Mapping[str, object]) -> Any:
        """Dispatch to the member of the same name and role on ``target``."""
        role = self.role
        if role is AccessorRole.CALL:
            return getattr(target, self.name)(*args, **kwargs)
        if role is AccessorRole.GET:
            return getattr(target, self.name)
        if role is AccessorRole.SET:
            setattr(target, self.name, args[0])
            return None
        bound = getattr(target, self.name)
        if not isinstance(bound, BoundEvent):
            raise TypeError(f"{type(target).__name__}.{self.name} is not an event")
        if role is AccessorRole.ADD:
            bound.add(args[0])
        else:
            bound.remove(args[0])
        return None

    def invoke_declared(
        self, instance: object, args: Sequence[object], kwargs: Mapping[str, object]
    ) -> Any:
        """Call the declared function itself, bypassing overrides on ``instance``."""
        if self.function is None:
            raise TypeError(f"{self.qualified_name} has no declared implementation")
        return self.function(instance, *args, **kwargs)


@dataclass(frozen=True, slots=True)
class DeclaredMember:
    """A method, property or event together with its accessors."""

    name: str
    kind: MemberKind
    declaring_type: type
    accessors: tuple[MethodInfo, ...]
    doc: str | None = field(default=None, compare=False)

    def accessor(self, role: AccessorRole) -> MethodInfo | None:
        for item in self.accessors:
            if item.role is role:
                return item
        return None


def declared_members(owner: type, *, include_inherited: bool) -> list[DeclaredMember]:
    """Enumerate the members of ``owner`` in a deterministic order.

    With ``include_inherited`` the whole MRO is walked and the most derived
    definition of each name wins; otherwise only ``vars(owner)`` is used.
    Members of ``object`` and of the infrastructure interface are skipped.
    """
    sources = inspect.getmro(owner) if include_inherited else (owner,)
    seen: set[str] = set()
    members: list[DeclaredMember] = []
    for source in sources:
        if source in _NEVER_COLLECTED:
            continue
        assume_abstract = is_protocol(source)
        for name, value in vars(source).items():
            if name in seen:
                continue
            member = _describe(source, name, value, assume_abstract=assume_abstract)
            if member is None:
                continue
            seen.add(name)
            members.append(member)
    return members


def find_member(owner: type, name: str) -> DeclaredMember | None:
    """Return the most derived member called ``name`` on ``owner``."""
    for source in inspect.getmro(owner):
        if source in _NEVER_COLLECTED or name not in vars(source):
            continue
        return _describe(source, name, vars(source)[name], assume_abstract=is_protocol(source))
    return None


def iter_accessors(members: Sequence[DeclaredMember]) -> Iterator[MethodInfo]:
    for member in members:
        yield from member.accessors


def _describe(
    owner: type, name: str, value: object, *, assume_abstract: bool
) -> DeclaredMember | None:
    abstract = bool(getattr(value, "__isabstractmethod__", False))
    if _is_dunder(name) and not abstract:
        return None

    if isinstance(value, types.FunctionType):
        info = _method_info(owner, name, AccessorRole.CALL, value, assume_abstract=assume_abstract)
        return DeclaredMember(name, MemberKind.METHOD, owner, (info,), value.__doc__)

    if isinstance(value, (staticmethod, classmethod)):
        func = value.__func__
        info = MethodInfo(
            name=name,
            role=AccessorRole.CALL,
            declaring_type=owner,
            function=func,
            is_abstract=bool(getattr(func, "__isabstractmethod__", False)),
            is_virtual=False,
            wrapper=type(value),
        )
        return DeclaredMember(name, MemberKind.METHOD, owner, (info,), func.__doc__)

    if isinstance(value, property):
        accessors = tuple(
            _method_info(owner, name, role, func, assume_abstract=assume_abstract)
            for role, func in ((AccessorRole.GET, value.fget), (AccessorRole.SET, value.fset))
            if func is not None
        )
        if not accessors:
            return None
        return DeclaredMember(name, MemberKind.PROPERTY, owner, accessors, value.__doc__)

    if isinstance(value, event):
        accessors = tuple(
            _method_info(owner, name, role, func, assume_abstract=assume_abstract)
            for role, func in ((AccessorRole.ADD, value.fadd), (AccessorRole.REMOVE, value.fremove))
            if func is not None
        )
        if not accessors:
            return None
        return DeclaredMember(name, MemberKind.EVENT, owner, accessors, value.__doc__)

    return None


def _method_info(
    owner: type,
    name: str,
    role: AccessorRole,
    func: Callable[..., Any],
    *,
    assume_abstract: bool,
) -> MethodInfo:
    return MethodInfo(
        name=name,
        role=role,
        declaring_type=owner,
        function=func,
        is_abstract=assume_abstract or bool(getattr(func, "__isabstractmethod__", False)),
        is_virtual=not getattr(func, "__final__", False),
    )


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


__all__ = [
    "AccessorRole",
    "DeclaredMember",
    "MemberKind",
    "MethodInfo",
    "declared_members",
    "find_member",
    "iter_accessors",
]
