"""Generation hooks: decide which members are intercepted."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from nexus_proxy.domain.members import MethodInfo

logger = logging.getLogger(__name__)


@runtime_checkable
class ProxyGenerationHook(Protocol):
    """Policy consulted while the members of a proxy type are collected.

    Hooks take part in the type cache key, so implementations should define
    value equality; a hook relying on identity produces one proxy type per
    hook instance.
    """

    def should_intercept(self, member: MethodInfo) -> bool: ...

    def non_proxyable_member_notification(self, member: MethodInfo, reason: str) -> None: ...

    def methods_inspected(self) -> None: ...


@runtime_checkable
class DefaultReturnPolicy(Protocol):
    """Optional hook capability: value returned when a chain ends without a target."""

    def default_return_value(self, member: MethodInfo) -> Any: ...


class AllMethodsHook:
    """Intercepts every proxyable member. All instances compare equal."""

    __slots__ = ()

    def should_intercept(self, member: MethodInfo) -> bool:
        return True

    def non_proxyable_member_notification(self, member: MethodInfo, reason: str) -> None:
        logger.debug("member %s cannot be intercepted: %s", member.qualified_name, reason)

    def methods_inspected(self) -> None:
        return None

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def has_value_equality(hook: object) -> bool:
    """Return whether ``hook`` overrides identity ``__eq__``."""
    return type(hook).__eq__ is not object.__eq__


__all__ = ["AllMethodsHook", "DefaultReturnPolicy", "ProxyGenerationHook", "has_value_equality"]
