"""Contributor for interfaces backed by mixin instances held by the proxy."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from nexus_proxy.constants import MIXIN_FIELD_PREFIX
from nexus_proxy.contributors.base import CompositeTypeContributor, TargetBinding
from nexus_proxy.contributors.collectors import InterfaceMembersOnTargetCollector
from nexus_proxy.domain.errors import DuplicateInterfaceError
from nexus_proxy.domain.typeutil import qualified_name
from nexus_proxy.interception.invocation import InterfaceMethodInvocation

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from nexus_proxy.contributors.collectors import MembersCollector
    from nexus_proxy.domain.members import MethodInfo
    from nexus_proxy.domain.naming import NamingScope


class MixinContributor(CompositeTypeContributor):
    """One backing field per mixin interface.

    Interfaces added with :meth:`add_interface_to_proxy` are intercepted and
    forward to the mixin. Interfaces added with :meth:`add_empty_interface` are
    already satisfied by the target; the mixin is stored but no member is emitted.
    """

    def __init__(self, naming_scope: NamingScope, mixin_types: Mapping[type, type]) -> None:
        super().__init__(naming_scope)
        self._mixin_types = dict(mixin_types)
        self._empty_interfaces: list[type] = []
        self._fields: dict[type, str] = {}

    @property
    def empty_interfaces(self) -> tuple[type, ...]:
        return tuple(self._empty_interfaces)

    @property
    def fields(self) -> dict[str, type]:
        """Backing field name → mixin interface, in registration order."""
        return {field_name: interface for interface, field_name in self._fields.items()}

    def add_interface_to_proxy(self, interface: type) -> None:
        super().add_interface_to_proxy(interface)
        self._ensure_field(interface)

    def add_empty_interface(self, interface: type) -> None:
        if interface in self._empty_interfaces:
            raise DuplicateInterfaceError(
                f"{self.name}: empty interface {qualified_name(interface)} was added twice"
            )
        self._empty_interfaces.append(interface)
        self._ensure_field(interface)

    def _ensure_field(self, interface: type) -> None:
        if interface in self._fields:
            return
        path = qualified_name(interface)
        suggested = MIXIN_FIELD_PREFIX + "".join(
            char if char.isalnum() or char == "_" else "_" for char in path
        )
        self._fields[interface] = self._naming_scope.get_unique_name(suggested)

    def _get_collectors(self) -> Iterable[MembersCollector]:
        return [
            InterfaceMembersOnTargetCollector(interface, self, self._mixin_types.get(interface))
            for interface in self._interfaces
        ]

    def binding_for(self, source: type) -> TargetBinding:
        field_name = self._fields[source]

        def resolve(proxy: object) -> object | None:
            return object.__getattribute__(proxy, field_name)

        def forward(
            proxy: object, member: MethodInfo, args: Sequence[object], kwargs: Mapping[str, object]
        ) -> Any:
            return member.invoke(resolve(proxy), args, kwargs)

        return TargetBinding(InterfaceMethodInvocation, resolve, forward)


__all__ = ["MixinContributor"]
