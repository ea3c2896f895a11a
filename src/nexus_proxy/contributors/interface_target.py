"""Contributor for interfaces whose calls forward to the proxy's target object."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from nexus_proxy.constants import TARGET_FIELD
from nexus_proxy.contributors.base import CompositeTypeContributor, TargetBinding
from nexus_proxy.contributors.collectors import InterfaceMembersOnTargetCollector
from nexus_proxy.domain.typeutil import instance_implements
from nexus_proxy.interception.invocation import (
    ChangeableTargetInvocation,
    InterfaceMethodInvocation,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from nexus_proxy.contributors.collectors import MembersCollector
    from nexus_proxy.domain.members import MethodInfo
    from nexus_proxy.domain.naming import NamingScope


class InterfaceProxyTargetContributor(CompositeTypeContributor):
    """Interfaces implemented by both the proxy and its target.

    ``proxy_target_type`` is the target's class for with-target proxies and the
    proxied interface itself for target-interface proxies, whose invocations may
    swap the target.
    """

    def __init__(
        self,
        proxy_target_type: type,
        naming_scope: NamingScope,
        *,
        can_change_target: bool = False,
    ) -> None:
        super().__init__(naming_scope)
        self._proxy_target_type = proxy_target_type
        self._binding = TargetBinding(
            invocation_type=(
                ChangeableTargetInvocation if can_change_target else InterfaceMethodInvocation
            ),
            resolve_target=proxy_target,
            forward=_forward_to_target,
        )

    def _get_collectors(self) -> Iterable[MembersCollector]:
        return [
            InterfaceMembersOnTargetCollector(interface, self, self._proxy_target_type)
            for interface in self._interfaces
        ]

    def binding_for(self, source: type) -> TargetBinding:
        return self._binding


def proxy_target(proxy: object) -> object | None:
    """Current value of the proxy's target field."""
    return object.__getattribute__(proxy, TARGET_FIELD)


def target_if_implements(proxy: object, interface: type) -> object | None:
    """The proxy's target when it implements ``interface``, else ``None``."""
    target = proxy_target(proxy)
    if target is None or not instance_implements(target, interface):
        return None
    return target


def _forward_to_target(
    proxy: object, member: MethodInfo, args: Sequence[object], kwargs: Mapping[str, object]
) -> Any:
    return member.invoke(proxy_target(proxy), args, kwargs)


__all__ = ["InterfaceProxyTargetContributor", "proxy_target", "target_if_implements"]
