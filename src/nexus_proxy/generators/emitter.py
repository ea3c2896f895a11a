"""
nexus-proxy — module skeleton

File: src/nexus_proxy/generators/emitter.py
Last updated: 2026-10-19

Purpose
- Assemble the namespace of one proxy type from contributor output and create
  the class, recording a ProxyTypePlan alongside it.

What should be included in this file
- ProxyTypeBuilder: add_method / add_property / add_event for collected
  members, add_function for infrastructure members, add_attribute for static
  state, claim for names that must stay inherited, build().

Functional requirements
- One Python namespace per type: the first contributor to define a name owns
  it; later contributors skip that name unless they override explicitly.
- Each generated accessor receives a unique token from the type's naming scope.
- A type that still has abstract members after assembly is a generation defect.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from nexus_proxy.constants import OPTIONS_ATTRIBUTE, PLAN_ATTRIBUTE, SELECTOR_TOKEN_PREFIX
from nexus_proxy.domain.descriptors import event
from nexus_proxy.domain.errors import ProxyGenerationError
from nexus_proxy.domain.members import AccessorRole, MemberKind
from nexus_proxy.domain.models import BodyStrategy, PlannedMember, ProxyTypePlan
from nexus_proxy.domain.typeutil import resolve_metaclass
from nexus_proxy.generators.methods import generate_member_body

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from nexus_proxy.contributors.base import TargetBinding
    from nexus_proxy.domain.models import (
        EventToGenerate,
        MethodToGenerate,
        PropertyToGenerate,
        ProxyKind,
    )
    from nexus_proxy.domain.naming import NamingScope
    from nexus_proxy.generators.options import ProxyGenerationOptions

logger = logging.getLogger(__name__)


class ProxyTypeBuilder:
    """Collects members for one proxy type and creates it."""

    def __init__(
        self,
        *,
        type_name: str,
        kind: ProxyKind,
        bases: tuple[type, ...],
        interfaces: tuple[type, ...],
        options: ProxyGenerationOptions,
        naming_scope: NamingScope,
    ) -> None:
        module_name, _, short_name = type_name.rpartition(".")
        self._type_name = type_name
        self._module_name = module_name
        self._short_name = short_name
        self._kind = kind
        self._bases = bases
        self._interfaces = interfaces
        self._options = options
        self._naming_scope = naming_scope
        self._namespace: dict[str, Any] = {}
        self._owners: dict[str, str] = {}
        self._planned: dict[str, PlannedMember] = {}
        self._built: type | None = None

    @property
    def type_name(self) -> str:
        return self._type_name

    @property
    def options(self) -> ProxyGenerationOptions:
        return self._options

    def owner_of(self, name: str) -> str | None:
        return self._owners.get(name)

    def claim(self, names: Iterable[str], *, contributor: str) -> None:
        """Reserve ``names`` for ``contributor`` without defining anything (inherited members)."""
        for name in names:
            self._owners.setdefault(name, contributor)

    def add_method(
        self, method: MethodToGenerate, binding: TargetBinding, *, contributor: str
    ) -> None:
        name = method.name
        if not self._take(name, contributor):
            return
        token = self._token(name)
        self._namespace[name] = generate_member_body(method, binding, self._options, token)
        self._plan(
            name,
            MemberKind.METHOD,
            method.method.declaring_type,
            contributor,
            ((AccessorRole.CALL, method.strategy),),
            token,
        )

    def add_property(
        self, item: PropertyToGenerate, binding: TargetBinding, *, contributor: str
    ) -> None:
        name = item.name
        if not self._take(name, contributor):
            return
        token = self._token(name)
        fget = self._accessor_body(item.getter, binding, token, "get")
        fset = self._accessor_body(item.setter, binding, token, "set")
        self._namespace[name] = property(fget, fset, None, item.member.doc)
        self._plan(
            name,
            MemberKind.PROPERTY,
            item.member.declaring_type,
            contributor,
            _strategies(item.getter, item.setter),
            token,
        )

    def add_event(self, item: EventToGenerate, binding: TargetBinding, *, contributor: str) -> None:
        name = item.name
        if not self._take(name, contributor):
            return
        token = self._token(name)
        fadd = self._accessor_body(item.adder, binding, token, "add")
        fremove = self._accessor_body(item.remover, binding, token, "remove")
        self._namespace[name] = event(fadd, fremove, item.member.doc)
        self._plan(
            name,
            MemberKind.EVENT,
            item.member.declaring_type,
            contributor,
            _strategies(item.adder, item.remover),
            token,
        )

    def add_function(
        self,
        name: str,
        function: Callable[..., Any],
        *,
        contributor: str,
        override: bool = False,
        declaring_type: type | None = None,
    ) -> None:
        """Define an infrastructure member.

        With ``override`` it replaces a member already owned by another contributor.
        """
        if override:
            previous = self._owners.get(name)
            if previous is not None and previous != contributor:
                logger.debug(
                    "%s: %s replaces %s from %s", self._short_name, contributor, name, previous
                )
            self._owners[name] = contributor
        elif not self._take(name, contributor):
            return
        self._namespace[name] = function
        self._plan(
            name,
            MemberKind.METHOD,
            declaring_type if declaring_type is not None else object,
            contributor,
            ((AccessorRole.CALL, BodyStrategy.DIRECT_FORWARD),),
            "",
        )

    def add_attribute(self, name: str, value: object) -> None:
        self._namespace[name] = value

    def build(self) -> type:
        """Create the proxy type. May be called once."""
        if self._built is not None:
            raise ProxyGenerationError(f"{self._type_name}: type was already built")
        plan = ProxyTypePlan(
            type_name=self._type_name,
            kind=self._kind,
            bases=self._bases,
            interfaces=self._interfaces,
            members=tuple(self._planned.values()),
        )
        base_names = [base.__qualname__ for base in self._bases]
        namespace = dict(self._namespace)
        namespace.update(
            {
                "__module__": self._module_name,
                "__qualname__": self._short_name,
                "__doc__": f"Proxy type generated for {', '.join(base_names)}.",
                OPTIONS_ATTRIBUTE: self._options,
                PLAN_ATTRIBUTE: plan,
            }
        )
        metaclass = resolve_metaclass(self._short_name, self._bases)
        try:
            proxy_type = metaclass(self._short_name, self._bases, namespace)
        except TypeError as exc:
            raise ProxyGenerationError(
                f"{self._type_name}: cannot create proxy type: {exc}"
            ) from exc

        leftovers = sorted(getattr(proxy_type, "__abstractmethods__", ()))
        if leftovers:
            raise ProxyGenerationError(
                f"{self._type_name}: abstract members left without a body: {', '.join(leftovers)}"
            )
        self._built = proxy_type
        logger.debug(
            "built %s with %d members over bases %s",
            self._type_name,
            len(plan.members),
            base_names,
        )
        return proxy_type

    def _take(self, name: str, contributor: str) -> bool:
        owner = self._owners.get(name)
        if owner is None or (owner == contributor and name not in self._namespace):
            self._owners[name] = contributor
            return True
        if owner != contributor:
            logger.debug(
                "%s: member %s already defined by %s; %s skips it",
                self._short_name,
                name,
                owner,
                contributor,
            )
        return False

    def _token(self, name: str) -> str:
        return self._naming_scope.get_unique_name(SELECTOR_TOKEN_PREFIX + name.lstrip("_"))

    def _accessor_body(
        self, method: MethodToGenerate | None, binding: TargetBinding, token: str, suffix: str
    ) -> Any:
        if method is None:
            return None
        return generate_member_body(method, binding, self._options, f"{token}.{suffix}")

    def _plan(
        self,
        name: str,
        kind: MemberKind,
        declaring_type: type,
        contributor: str,
        strategies: tuple[tuple[AccessorRole, BodyStrategy], ...],
        token: str,
    ) -> None:
        self._planned[name] = PlannedMember(
            name=name,
            kind=kind,
            declaring_type=declaring_type,
            contributor=contributor,
            strategies=strategies,
            token=token,
        )


def _strategies(*parts: MethodToGenerate | None) -> tuple[tuple[AccessorRole, BodyStrategy], ...]:
    return tuple((part.role, part.strategy) for part in parts if part is not None)


__all__ = ["ProxyTypeBuilder"]
