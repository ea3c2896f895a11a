"""Generation options and mixin bookkeeping; both take part in the type cache key."""

from __future__ import annotations

import inspect
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from nexus_proxy.domain.errors import InvalidProxyRequestError
from nexus_proxy.domain.typeutil import (
    check_not_generic_type_definition,
    get_all_interfaces,
    is_interface,
    qualified_name,
)
from nexus_proxy.interception.hooks import AllMethodsHook, ProxyGenerationHook
from nexus_proxy.interception.interceptors import InterceptorSelector

if TYPE_CHECKING:
    from collections.abc import Iterator


class MixinData:
    """Mixin instances keyed by the interfaces they implement.

    Interfaces are ordered by qualified name so that two requests listing the
    same mixins in a different order produce the same proxy type. ``mixins``
    holds one entry per interface, in that order.
    """

    __slots__ = ("_by_interface", "_interfaces")

    def __init__(self, mixin_instances: Iterable[object] = ()) -> None:
        by_interface: dict[type, object] = {}
        for mixin in mixin_instances:
            if mixin is None:
                raise InvalidProxyRequestError("mixins: None is not a valid mixin instance")
            interfaces = get_all_interfaces(type(mixin))
            if not interfaces:
                raise InvalidProxyRequestError(
                    f"mixins: {qualified_name(type(mixin))} implements no interface; "
                    "a mixin contributes members only through the interfaces it implements"
                )
            for interface in interfaces:
                existing = by_interface.get(interface)
                if existing is not None:
                    raise InvalidProxyRequestError(
                        "mixins: the list of mixins contains two mixins implementing the same "
                        f"interface {qualified_name(interface)}: {qualified_name(type(existing))} "
                        f"and {qualified_name(type(mixin))}. An interface cannot be added by more "
                        "than one mixin."
                    )
                by_interface[interface] = mixin
        self._interfaces: tuple[type, ...] = tuple(sorted(by_interface, key=qualified_name))
        self._by_interface = by_interface

    @property
    def mixin_interfaces(self) -> tuple[type, ...]:
        return self._interfaces

    @property
    def mixins(self) -> tuple[object, ...]:
        return tuple(self._by_interface[interface] for interface in self._interfaces)

    @property
    def mixin_types(self) -> dict[type, type]:
        """Interface → class of the mixin backing it."""
        return {interface: type(self._by_interface[interface]) for interface in self._interfaces}

    def contains_mixin(self, interface: type) -> bool:
        return interface in self._by_interface

    def get_mixin(self, interface: type) -> object | None:
        return self._by_interface.get(interface)

    def _key(self) -> tuple[tuple[type, type], ...]:
        by_interface = self._by_interface
        return tuple((interface, type(by_interface[interface])) for interface in self._interfaces)

    def __bool__(self) -> bool:
        return bool(self._interfaces)

    def __iter__(self) -> Iterator[type]:
        return iter(self._interfaces)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MixinData):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        names = ", ".join(
            f"{item.__qualname__}={mixin.__qualname__}" for item, mixin in self._key()
        )
        return f"MixinData({names})"


@dataclass(frozen=True, eq=False, slots=True)
class ProxyGenerationOptions:
    """Per-request generation settings.

    Equality covers the hook, whether a selector is present, the mixin
    interface/type pairs, the base type for interface proxies and the metadata
    flag. The selector instance itself is not compared: proxies receive it at
    construction time.
    """

    hook: ProxyGenerationHook = field(default_factory=AllMethodsHook)
    selector: InterceptorSelector | None = None
    mixins: MixinData = field(default_factory=MixinData)
    base_type_for_interface_proxy: type = object
    copy_member_metadata: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.hook, ProxyGenerationHook):
            raise TypeError(
                f"hook: expected a ProxyGenerationHook, got {type(self.hook).__name__}"
            )
        if self.selector is not None and not isinstance(self.selector, InterceptorSelector):
            raise TypeError(
                f"selector: expected an InterceptorSelector, got {type(self.selector).__name__}"
            )
        if not isinstance(self.mixins, MixinData):
            object.__setattr__(self, "mixins", MixinData(self.mixins))
        base = self.base_type_for_interface_proxy
        check_not_generic_type_definition(base, "base_type_for_interface_proxy")
        if is_interface(base) or inspect.isabstract(base):
            raise InvalidProxyRequestError(
                "base_type_for_interface_proxy: expected a concrete class, got "
                f"{qualified_name(base)}"
            )

    @property
    def has_mixins(self) -> bool:
        return bool(self.mixins)

    def _key(self) -> tuple[Any, ...]:
        return (
            self.hook,
            self.selector is not None,
            self.mixins,
            self.base_type_for_interface_proxy,
            self.copy_member_metadata,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProxyGenerationOptions):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        # Hooks with value equality need not be hashable; equal hooks share a type.
        return hash(
            (
                type(self.hook),
                self.selector is not None,
                self.mixins,
                self.base_type_for_interface_proxy,
                self.copy_member_metadata,
            )
        )


__all__ = ["MixinData", "ProxyGenerationOptions"]
