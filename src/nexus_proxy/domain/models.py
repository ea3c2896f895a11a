"""
nexus-proxy — module skeleton

File: src/nexus_proxy/domain/models.py
Last updated: 2026-10-19

Purpose
- Canonical value types shared by the collectors, contributors and generators.

What should be included in this file
- BodyStrategy: the three ways a generated member body can behave.
- MethodToGenerate plus the property / event groupings built from it.
- ProxyKind and CacheKey: identity of one synthesis request.
- PlannedMember / ProxyTypePlan: the plain descriptor of a finished proxy type.

Functional requirements
- Every type here is immutable and hashable unless it is a pure builder input.
- CacheKey uses value equality over target, interfaces, options, kind and
  proxy target type; interface order is significant.

Non-functional requirements
- No dependency on generator or contributor modules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from nexus_proxy.domain.members import AccessorRole, DeclaredMember, MemberKind, MethodInfo

if TYPE_CHECKING:
    from collections.abc import Sequence


class BodyStrategy(Enum):
    INTERCEPTED = "intercepted"
    DIRECT_FORWARD = "direct_forward"
    EMPTY_STUB = "empty_stub"


class ProxyKind(Enum):
    CLASS = "class"
    INTERFACE_WITH_TARGET = "interface_with_target"
    INTERFACE_WITH_TARGET_INTERFACE = "interface_with_target_interface"
    INTERFACE_WITHOUT_TARGET = "interface_without_target"


@dataclass(frozen=True, slots=True)
class MethodToGenerate:
    """One callable accessor together with its generation decision.

    ``target`` is the contributor that supplies the forwarding implementation;
    it is ``None`` when the member is abstract on its source and nothing backs it.
    ``standalone`` is ``False`` for property and event accessors, whose bodies
    are assembled into a single descriptor.
    """

    method: MethodInfo
    standalone: bool
    target: Any | None
    method_on_target: MethodInfo
    accepted: bool

    @property
    def proxyable(self) -> bool:
        return self.accepted

    @property
    def strategy(self) -> BodyStrategy:
        if self.accepted:
            return BodyStrategy.INTERCEPTED
        if self.target is not None:
            return BodyStrategy.DIRECT_FORWARD
        return BodyStrategy.EMPTY_STUB

    @property
    def name(self) -> str:
        return self.method.name

    @property
    def role(self) -> AccessorRole:
        return self.method.role


@dataclass(frozen=True, slots=True)
class PropertyToGenerate:
    member: DeclaredMember
    getter: MethodToGenerate | None
    setter: MethodToGenerate | None

    @property
    def name(self) -> str:
        return self.member.name

    @property
    def can_read(self) -> bool:
        return self.getter is not None

    @property
    def can_write(self) -> bool:
        return self.setter is not None


@dataclass(frozen=True, slots=True)
class EventToGenerate:
    member: DeclaredMember
    adder: MethodToGenerate | None
    remover: MethodToGenerate | None

    @property
    def name(self) -> str:
        return self.member.name


@dataclass(frozen=True, slots=True)
class CacheKey:
    """Identity of one synthesis request inside a proxy scope."""

    target: type | None
    interfaces: tuple[type, ...]
    options: Any
    kind: ProxyKind = ProxyKind.CLASS
    proxy_target_type: type | None = None

    @classmethod
    def build(
        cls,
        target: type | None,
        interfaces: Sequence[type] | None,
        options: Any,
        *,
        kind: ProxyKind,
        proxy_target_type: type | None = None,
    ) -> CacheKey:
        return cls(
            target=target,
            interfaces=tuple(interfaces or ()),
            options=options,
            kind=kind,
            proxy_target_type=proxy_target_type,
        )


@dataclass(frozen=True, slots=True)
class PlannedMember:
    name: str
    kind: MemberKind
    declaring_type: type
    contributor: str
    strategies: tuple[tuple[AccessorRole, BodyStrategy], ...]
    token: str

    def strategy_for(self, role: AccessorRole) -> BodyStrategy | None:
        for item_role, strategy in self.strategies:
            if item_role is role:
                return strategy
        return None


@dataclass(frozen=True, slots=True)
class ProxyTypePlan:
    """Which members, with which body strategy, belong in a synthesized type."""

    type_name: str
    kind: ProxyKind
    bases: tuple[type, ...]
    interfaces: tuple[type, ...]
    members: tuple[PlannedMember, ...] = field(default_factory=tuple)

    def member(self, name: str) -> PlannedMember | None:
        for item in self.members:
            if item.name == name:
                return item
        return None

    def strategy_of(self, name: str, role: AccessorRole = AccessorRole.CALL) -> BodyStrategy | None:
        planned = self.member(name)
        return None if planned is None else planned.strategy_for(role)


__all__ = [
    "BodyStrategy",
    "CacheKey",
    "EventToGenerate",
    "MethodToGenerate",
    "PlannedMember",
    "PropertyToGenerate",
    "ProxyKind",
    "ProxyTypePlan",
]
