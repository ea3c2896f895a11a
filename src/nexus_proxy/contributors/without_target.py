"""Contributor for interfaces proxied without a backing implementation."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from nexus_proxy.contributors.base import CompositeTypeContributor, TargetBinding
from nexus_proxy.contributors.collectors import InterfaceMembersCollector
from nexus_proxy.domain.errors import MissingTargetError
from nexus_proxy.interception.invocation import InterfaceMethodInvocation

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from nexus_proxy.contributors.collectors import MembersCollector
    from nexus_proxy.domain.members import MethodInfo
    from nexus_proxy.domain.naming import NamingScope
    from nexus_proxy.interception.invocation import Invocation

InterfaceTargetResolver = Callable[[object, type], object | None]


class InterfaceProxyWithoutTargetContributor(CompositeTypeContributor):
    """Interfaces whose intercepted calls have no target unless a resolver finds one.

    Without a resolver the chain ends in :class:`MissingTargetError`; abstract
    members the hook declines become empty stubs.
    """

    def __init__(
        self,
        naming_scope: NamingScope,
        target_resolver: InterfaceTargetResolver | None = None,
        *,
        invocation_type: type[Invocation] = InterfaceMethodInvocation,
    ) -> None:
        super().__init__(naming_scope)
        self._target_resolver = target_resolver
        self._invocation_type = invocation_type

    def _get_collectors(self) -> Iterable[MembersCollector]:
        return [InterfaceMembersCollector(interface, self) for interface in self._interfaces]

    def binding_for(self, source: type) -> TargetBinding:
        resolver = self._target_resolver
        if resolver is None:
            return TargetBinding(self._invocation_type, _no_target, _no_forward)

        def resolve(proxy: object) -> object | None:
            return resolver(proxy, source)

        return TargetBinding(self._invocation_type, resolve, _no_forward)


def _no_target(proxy: object) -> None:
    return None


def _no_forward(
    proxy: object, member: MethodInfo, args: Sequence[object], kwargs: Mapping[str, object]
) -> Any:
    raise MissingTargetError(f"{member.qualified_name}: proxy has no target to forward to")


__all__ = ["InterfaceProxyWithoutTargetContributor", "InterfaceTargetResolver"]
