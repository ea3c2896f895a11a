"""Contributor contract and the shared composite implementation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from nexus_proxy.domain.errors import DuplicateInterfaceError
from nexus_proxy.domain.typeutil import qualified_name

if TYPE_CHECKING:
    from collections.abc import Iterable

    from nexus_proxy.contributors.collectors import MembersCollector
    from nexus_proxy.domain.members import MethodInfo
    from nexus_proxy.domain.naming import NamingScope
    from nexus_proxy.generators.emitter import ProxyTypeBuilder
    from nexus_proxy.generators.options import ProxyGenerationOptions
    from nexus_proxy.interception.hooks import ProxyGenerationHook
    from nexus_proxy.interception.invocation import Invocation

logger = logging.getLogger(__name__)

TargetResolver = Callable[[object], object | None]
Forwarder = Callable[[object, "MethodInfo", Sequence[object], Mapping[str, object]], Any]


@dataclass(frozen=True, slots=True)
class TargetBinding:
    """How generated bodies of one contributor reach their target at call time.

    ``resolve_target(proxy)`` returns the invocation target (or ``None``);
    ``forward(proxy, member, args, kwargs)`` performs a direct, unintercepted call.
    """

    invocation_type: type[Invocation]
    resolve_target: TargetResolver
    forward: Forwarder


@runtime_checkable
class TypeContributor(Protocol):
    def collect_elements_to_proxy(self, hook: ProxyGenerationHook) -> None: ...

    def generate(self, builder: ProxyTypeBuilder, options: ProxyGenerationOptions) -> None: ...


class CompositeTypeContributor(ABC):
    """Owns a list of interfaces and emits the members collected for each of them."""

    def __init__(self, naming_scope: NamingScope) -> None:
        self._naming_scope = naming_scope
        self._interfaces: list[type] = []
        self._collectors: list[MembersCollector] = []

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def interfaces(self) -> tuple[type, ...]:
        return tuple(self._interfaces)

    @property
    def collectors(self) -> tuple[MembersCollector, ...]:
        return tuple(self._collectors)

    def add_interface_to_proxy(self, interface: type) -> None:
        if interface in self._interfaces:
            raise DuplicateInterfaceError(
                f"{self.name}: interface {qualified_name(interface)} was added twice"
            )
        self._interfaces.append(interface)

    def collect_elements_to_proxy(self, hook: ProxyGenerationHook) -> None:
        self._collectors = list(self._get_collectors())
        for collector in self._collectors:
            collector.collect_members_to_proxy(hook)

    def generate(self, builder: ProxyTypeBuilder, options: ProxyGenerationOptions) -> None:
        for collector in self._collectors:
            binding = self.binding_for(collector.source)
            for method in collector.methods:
                builder.add_method(method, binding, contributor=self.name)
            for item in collector.properties:
                builder.add_property(item, binding, contributor=self.name)
            for item in collector.events:
                builder.add_event(item, binding, contributor=self.name)

    @abstractmethod
    def _get_collectors(self) -> Iterable[MembersCollector]:
        """Fresh collectors, one per source type, in emission order."""

    @abstractmethod
    def binding_for(self, source: type) -> TargetBinding:
        """Target binding used for members collected from ``source``."""

    def __repr__(self) -> str:
        names = ", ".join(item.__qualname__ for item in self._interfaces)
        return f"{self.name}([{names}])"


__all__ = [
    "CompositeTypeContributor",
    "Forwarder",
    "TargetBinding",
    "TargetResolver",
    "TypeContributor",
]
