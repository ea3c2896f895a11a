"""Generators for interface proxies: new types implementing an interface and extras."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING

from nexus_proxy.contributors.interface_target import (
    InterfaceProxyTargetContributor,
    target_if_implements,
)
from nexus_proxy.contributors.mapping import TypeImplementerMapping
from nexus_proxy.contributors.without_target import InterfaceProxyWithoutTargetContributor
from nexus_proxy.domain.errors import InvalidProxyRequestError
from nexus_proxy.domain.models import CacheKey, ProxyKind
from nexus_proxy.domain.typeutil import (
    check_not_generic_type_definition,
    get_all_interfaces,
    implements,
    is_interface,
    minimal_bases,
    qualified_name,
)
from nexus_proxy.generators.base import BaseProxyGenerator
from nexus_proxy.generators.constructors import install_interface_proxy_constructor
from nexus_proxy.interception.invocation import ChangeableTargetInvocation

if TYPE_CHECKING:
    from collections.abc import Sequence

    from nexus_proxy.contributors.base import CompositeTypeContributor
    from nexus_proxy.domain.naming import NamingScope
    from nexus_proxy.generators.options import ProxyGenerationOptions
    from nexus_proxy.generators.scope import ProxyScope


class InterfaceProxyGenerator(BaseProxyGenerator):
    """Common precedence and assembly of the interface proxy shapes.

    Step one maps every interface of the proxied interface to the shape's own
    contributor; mixins, additional interfaces and the infrastructure interface
    follow in that order.
    """

    def validate_target(self) -> None:
        if not is_interface(self._target_type):
            raise InvalidProxyRequestError(
                f"interface_to_proxy: {qualified_name(self._target_type)} is not an interface"
            )

    def generate_type(self, type_name: str, naming_scope: NamingScope) -> type:
        additional = self.all_additional_interfaces()
        target = self.target_contributor(naming_scope)
        mixins = self.new_mixin_contributor(naming_scope)
        no_target = self.additional_contributor(naming_scope)
        instance = self.new_instance_contributor(proxy_is_target=False)
        implementer = self.implementer_type()

        mapping = TypeImplementerMapping()
        proxied = get_all_interfaces(self._target_type)
        for interface in proxied:
            mapping.add(interface, target)
            target.add_interface_to_proxy(interface)
        self.map_target_implemented(mapping, target, implementer, proxied, additional)
        self.map_mixins(mapping, mixins, target, implementer, additional)
        self.map_additional_interfaces(mapping, None, implementer, no_target, additional)
        self.map_infrastructure(mapping, instance, implementer, additional)

        bases = minimal_bases((self._options.base_type_for_interface_proxy, *mapping.interfaces))
        builder = self.new_builder(type_name, naming_scope, mapping, bases)
        proxy_type = self.emit(builder, (target, mixins, no_target, instance), mixins)
        install_interface_proxy_constructor(proxy_type)
        return proxy_type

    def map_target_implemented(
        self,
        mapping: TypeImplementerMapping,
        target: CompositeTypeContributor,
        implementer: type,
        proxied: Sequence[type],
        additional: Sequence[type],
    ) -> None:
        """Additional interfaces the target implements forward to it as well."""
        for interface in additional:
            if interface in proxied or not implements(implementer, interface):
                continue
            mapping.add(interface, target)
            target.add_interface_to_proxy(interface)

    @abstractmethod
    def implementer_type(self) -> type:
        """Type whose interfaces count as implemented by the target."""

    @abstractmethod
    def target_contributor(self, naming_scope: NamingScope) -> CompositeTypeContributor:
        """Contributor owning the proxied interface."""

    @abstractmethod
    def additional_contributor(self, naming_scope: NamingScope) -> CompositeTypeContributor:
        """Contributor for requested interfaces nothing else implements."""


class InterfaceProxyWithTargetGenerator(InterfaceProxyGenerator):
    """Forwards to a target object of a fixed class."""

    kind = ProxyKind.INTERFACE_WITH_TARGET

    def __init__(
        self,
        scope: ProxyScope,
        interface_to_proxy: type,
        interfaces: Sequence[type] | None = None,
        options: ProxyGenerationOptions | None = None,
        *,
        proxy_target_type: type,
    ) -> None:
        super().__init__(scope, interface_to_proxy, interfaces, options)
        self._proxy_target_type = proxy_target_type

    @property
    def proxy_target_type(self) -> type:
        return self._proxy_target_type

    def validate_target(self) -> None:
        super().validate_target()
        check_not_generic_type_definition(self._proxy_target_type, "proxy_target_type")

    def cache_key(self) -> CacheKey:
        return CacheKey.build(
            self._target_type,
            self._interfaces,
            self._options,
            kind=self.kind,
            proxy_target_type=self._proxy_target_type,
        )

    def implementer_type(self) -> type:
        return self._proxy_target_type

    def target_contributor(self, naming_scope: NamingScope) -> CompositeTypeContributor:
        return InterfaceProxyTargetContributor(self._proxy_target_type, naming_scope)

    def additional_contributor(self, naming_scope: NamingScope) -> CompositeTypeContributor:
        return InterfaceProxyWithoutTargetContributor(naming_scope)


class InterfaceProxyWithTargetInterfaceGenerator(InterfaceProxyGenerator):
    """Forwards to any object implementing the interface; interceptors may swap it.

    Additional interfaces reach the current target whenever it happens to
    implement them.
    """

    kind = ProxyKind.INTERFACE_WITH_TARGET_INTERFACE

    def cache_key(self) -> CacheKey:
        return CacheKey.build(
            self._target_type,
            self._interfaces,
            self._options,
            kind=self.kind,
            proxy_target_type=self._target_type,
        )

    def implementer_type(self) -> type:
        return self._target_type

    def target_contributor(self, naming_scope: NamingScope) -> CompositeTypeContributor:
        return InterfaceProxyTargetContributor(
            self._target_type, naming_scope, can_change_target=True
        )

    def additional_contributor(self, naming_scope: NamingScope) -> CompositeTypeContributor:
        return InterfaceProxyWithoutTargetContributor(
            naming_scope, target_if_implements, invocation_type=ChangeableTargetInvocation
        )


class InterfaceProxyWithoutTargetGenerator(InterfaceProxyGenerator):
    """No target at all: interceptors must produce every return value."""

    kind = ProxyKind.INTERFACE_WITHOUT_TARGET

    def cache_key(self) -> CacheKey:
        return CacheKey.build(self._target_type, self._interfaces, self._options, kind=self.kind)

    def implementer_type(self) -> type:
        return self._target_type

    def target_contributor(self, naming_scope: NamingScope) -> CompositeTypeContributor:
        return InterfaceProxyWithoutTargetContributor(naming_scope)

    def additional_contributor(self, naming_scope: NamingScope) -> CompositeTypeContributor:
        return InterfaceProxyWithoutTargetContributor(naming_scope)


__all__ = [
    "InterfaceProxyGenerator",
    "InterfaceProxyWithTargetGenerator",
    "InterfaceProxyWithTargetInterfaceGenerator",
    "InterfaceProxyWithoutTargetGenerator",
]
