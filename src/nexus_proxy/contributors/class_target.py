"""Contributor for the proxied class of a class proxy."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from nexus_proxy.contributors.base import CompositeTypeContributor, TargetBinding
from nexus_proxy.contributors.collectors import ClassMembersCollector
from nexus_proxy.interception.invocation import ClassMethodInvocation

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from nexus_proxy.contributors.collectors import MembersCollector
    from nexus_proxy.domain.members import MethodInfo
    from nexus_proxy.domain.naming import NamingScope


class ClassProxyTargetContributor(CompositeTypeContributor):
    """Members of the proxied class; calls proceed to the base implementation.

    Interfaces mapped here are implemented by the class already, so the MRO walk
    of the class covers their members.
    """

    def __init__(self, target_type: type, naming_scope: NamingScope) -> None:
        super().__init__(naming_scope)
        self._target_type = target_type

    @property
    def target_type(self) -> type:
        return self._target_type

    def _get_collectors(self) -> Iterable[MembersCollector]:
        return (ClassMembersCollector(self._target_type, self),)

    def binding_for(self, source: type) -> TargetBinding:
        return _CLASS_BINDING


def _proxy_is_target(proxy: object) -> object:
    return proxy


def _call_base(
    proxy: object, member: MethodInfo, args: Sequence[object], kwargs: Mapping[str, object]
) -> Any:
    return member.invoke_declared(proxy, args, kwargs)


_CLASS_BINDING = TargetBinding(
    invocation_type=ClassMethodInvocation,
    resolve_target=_proxy_is_target,
    forward=_call_base,
)


__all__ = ["ClassProxyTargetContributor"]
