"""Proxy type factory: one method per proxy shape, all sharing one scope."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nexus_proxy.generators.class_proxy import ClassProxyGenerator
from nexus_proxy.generators.interface_proxy import (
    InterfaceProxyWithoutTargetGenerator,
    InterfaceProxyWithTargetGenerator,
    InterfaceProxyWithTargetInterfaceGenerator,
)
from nexus_proxy.generators.scope import ProxyScope

if TYPE_CHECKING:
    from collections.abc import Sequence

    from nexus_proxy.generators.options import ProxyGenerationOptions


class DefaultProxyBuilder:
    """Returns proxy types; instances are created by :class:`~nexus_proxy.ProxyGenerator`."""

    def __init__(self, scope: ProxyScope | None = None) -> None:
        self._scope = scope if scope is not None else ProxyScope()

    @property
    def scope(self) -> ProxyScope:
        return self._scope

    def create_class_proxy_type(
        self,
        class_to_proxy: type,
        additional_interfaces: Sequence[type] | None = None,
        options: ProxyGenerationOptions | None = None,
    ) -> type:
        generator = ClassProxyGenerator(self._scope, class_to_proxy, additional_interfaces, options)
        return generator.get_proxy_type()

    def create_interface_proxy_type_with_target(
        self,
        interface_to_proxy: type,
        additional_interfaces: Sequence[type] | None,
        target_type: type,
        options: ProxyGenerationOptions | None = None,
    ) -> type:
        generator = InterfaceProxyWithTargetGenerator(
            self._scope,
            interface_to_proxy,
            additional_interfaces,
            options,
            proxy_target_type=target_type,
        )
        return generator.get_proxy_type()

    def create_interface_proxy_type_with_target_interface(
        self,
        interface_to_proxy: type,
        additional_interfaces: Sequence[type] | None = None,
        options: ProxyGenerationOptions | None = None,
    ) -> type:
        generator = InterfaceProxyWithTargetInterfaceGenerator(
            self._scope, interface_to_proxy, additional_interfaces, options
        )
        return generator.get_proxy_type()

    def create_interface_proxy_type_without_target(
        self,
        interface_to_proxy: type,
        additional_interfaces: Sequence[type] | None = None,
        options: ProxyGenerationOptions | None = None,
    ) -> type:
        generator = InterfaceProxyWithoutTargetGenerator(
            self._scope, interface_to_proxy, additional_interfaces, options
        )
        return generator.get_proxy_type()


__all__ = ["DefaultProxyBuilder"]
