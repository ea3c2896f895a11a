"""
nexus-proxy — module skeleton

File: src/nexus_proxy/contributors/collectors.py
Last updated: 2026-10-19

Purpose
- Classify the declared members of one source type (a class or an interface)
  into MethodToGenerate records.

What should be included in this file
- MembersCollector base with the shared acceptance rule.
- ClassMembersCollector, InterfaceMembersCollector, InterfaceMembersOnTargetCollector.

Functional requirements
- Non-virtual members are reported to the hook and never accepted.
- Abstract members always receive a record, so they always receive a body.
- Deterministic for a given (source type, hook) pair; read-only traversal.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from nexus_proxy.domain.members import (
    AccessorRole,
    DeclaredMember,
    MemberKind,
    MethodInfo,
    declared_members,
    find_member,
)
from nexus_proxy.domain.models import (
    BodyStrategy,
    EventToGenerate,
    MethodToGenerate,
    PropertyToGenerate,
)

if TYPE_CHECKING:
    from nexus_proxy.interception.hooks import ProxyGenerationHook


class MembersCollector(ABC):
    """Collects the members of ``source`` that a proxy type must (re)define."""

    def __init__(self, source: type, contributor: object | None) -> None:
        self._source = source
        self._contributor = contributor
        self._methods: list[MethodToGenerate] = []
        self._properties: list[PropertyToGenerate] = []
        self._events: list[EventToGenerate] = []

    @property
    def source(self) -> type:
        return self._source

    @property
    def methods(self) -> tuple[MethodToGenerate, ...]:
        return tuple(self._methods)

    @property
    def properties(self) -> tuple[PropertyToGenerate, ...]:
        return tuple(self._properties)

    @property
    def events(self) -> tuple[EventToGenerate, ...]:
        return tuple(self._events)

    def collect_members_to_proxy(self, hook: ProxyGenerationHook) -> list[MethodToGenerate]:
        """Classify every member of the source and return all accessor records."""
        self._methods.clear()
        self._properties.clear()
        self._events.clear()
        collected: list[MethodToGenerate] = []

        for member in self._members():
            if member.kind is MemberKind.METHOD:
                method = self._method_to_generate(member.accessors[0], hook, standalone=True)
                if method is not None:
                    self._methods.append(method)
                    collected.append(method)
                continue

            first = self._group_accessor(member, _FIRST_ROLE[member.kind], hook)
            second = self._group_accessor(member, _SECOND_ROLE[member.kind], hook)
            parts = [item for item in (first, second) if item is not None]
            if not parts or not self._needs_regeneration(parts):
                continue
            if member.kind is MemberKind.PROPERTY:
                self._properties.append(PropertyToGenerate(member, first, second))
            else:
                self._events.append(EventToGenerate(member, first, second))
            collected.extend(parts)
        return collected

    def _group_accessor(
        self, member: DeclaredMember, role: AccessorRole, hook: ProxyGenerationHook
    ) -> MethodToGenerate | None:
        accessor = member.accessor(role)
        if accessor is None:
            return None
        return self._method_to_generate(accessor, hook, standalone=False)

    def _needs_regeneration(self, parts: list[MethodToGenerate]) -> bool:
        return True

    def _accept(self, method: MethodInfo, hook: ProxyGenerationHook) -> bool:
        if not method.is_virtual:
            reason = (
                f"declared as {method.wrapper.__name__}"
                if method.wrapper is not None
                else "marked final"
            )
            hook.non_proxyable_member_notification(method, reason)
            return False
        return bool(hook.should_intercept(method))

    @abstractmethod
    def _members(self) -> list[DeclaredMember]:
        """Members of the source in collection order."""

    @abstractmethod
    def _method_to_generate(
        self, method: MethodInfo, hook: ProxyGenerationHook, *, standalone: bool
    ) -> MethodToGenerate | None:
        """Classify one accessor; ``None`` leaves the inherited member untouched."""


class ClassMembersCollector(MembersCollector):
    """Walks the whole MRO of a class; the most derived definition of a name wins."""

    def _members(self) -> list[DeclaredMember]:
        return declared_members(self._source, include_inherited=True)

    def _method_to_generate(
        self, method: MethodInfo, hook: ProxyGenerationHook, *, standalone: bool
    ) -> MethodToGenerate | None:
        accepted = self._accept(method, hook)
        if not accepted and not method.is_abstract and standalone:
            return None
        target = None if method.is_abstract else self._contributor
        return MethodToGenerate(method, standalone, target, method, accepted)

    def _needs_regeneration(self, parts: list[MethodToGenerate]) -> bool:
        # A property or event whose accessors all forward is inherited unchanged.
        return any(part.strategy is not BodyStrategy.DIRECT_FORWARD for part in parts)


class InterfaceMembersCollector(MembersCollector):
    """Members declared by one interface; nothing backs them."""

    def _members(self) -> list[DeclaredMember]:
        return declared_members(self._source, include_inherited=False)

    def _method_to_generate(
        self, method: MethodInfo, hook: ProxyGenerationHook, *, standalone: bool
    ) -> MethodToGenerate | None:
        if _inherited_static(method):
            return None
        accepted = self._accept(method, hook)
        return MethodToGenerate(method, standalone, None, method, accepted)


class InterfaceMembersOnTargetCollector(MembersCollector):
    """Members declared by one interface, forwarded to the contributor's target."""

    def __init__(self, source: type, contributor: object, target_type: type | None) -> None:
        super().__init__(source, contributor)
        self._target_type = target_type

    def _members(self) -> list[DeclaredMember]:
        return declared_members(self._source, include_inherited=False)

    def _method_to_generate(
        self, method: MethodInfo, hook: ProxyGenerationHook, *, standalone: bool
    ) -> MethodToGenerate | None:
        if _inherited_static(method):
            return None
        accepted = self._accept(method, hook)
        # Static and class methods receive no instance, so they cannot reach a target.
        target = None if method.wrapper is not None else self._contributor
        on_target = self._method_on_target(method)
        return MethodToGenerate(method, standalone, target, on_target, accepted)

    def _method_on_target(self, method: MethodInfo) -> MethodInfo:
        if self._target_type is None or self._target_type is self._source:
            return method
        member = find_member(self._target_type, method.name)
        if member is None:
            return method
        return member.accessor(method.role) or method


def _inherited_static(method: MethodInfo) -> bool:
    return method.wrapper is not None and not method.is_abstract


_FIRST_ROLE = {MemberKind.PROPERTY: AccessorRole.GET, MemberKind.EVENT: AccessorRole.ADD}
_SECOND_ROLE = {MemberKind.PROPERTY: AccessorRole.SET, MemberKind.EVENT: AccessorRole.REMOVE}


__all__ = [
    "ClassMembersCollector",
    "InterfaceMembersCollector",
    "InterfaceMembersOnTargetCollector",
    "MembersCollector",
]
