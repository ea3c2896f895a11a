"""Generator for class proxies: a subclass of the proxied class."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nexus_proxy.contributors.class_target import ClassProxyTargetContributor
from nexus_proxy.contributors.mapping import TypeImplementerMapping
from nexus_proxy.contributors.without_target import InterfaceProxyWithoutTargetContributor
from nexus_proxy.domain.errors import InvalidProxyRequestError
from nexus_proxy.domain.members import declared_members
from nexus_proxy.domain.models import CacheKey, ProxyKind
from nexus_proxy.domain.typeutil import is_interface, minimal_bases, qualified_name
from nexus_proxy.generators.base import BaseProxyGenerator
from nexus_proxy.generators.constructors import install_class_proxy_constructors

if TYPE_CHECKING:
    from nexus_proxy.domain.naming import NamingScope


class ClassProxyGenerator(BaseProxyGenerator):
    """Subclasses ``target_type``; intercepted calls proceed to the base implementation.

    Members the proxied class defines and does not regenerate stay inherited:
    no mixin or additional interface can shadow them.
    """

    kind = ProxyKind.CLASS

    def validate_target(self) -> None:
        target = self._target_type
        if is_interface(target):
            raise InvalidProxyRequestError(
                f"target_type: {qualified_name(target)} is an interface; use an interface proxy"
            )
        if getattr(target, "__final__", False):
            raise InvalidProxyRequestError(
                f"target_type: {qualified_name(target)} is marked final and cannot be subclassed"
            )

    def cache_key(self) -> CacheKey:
        return CacheKey.build(self._target_type, self._interfaces, self._options, kind=self.kind)

    def generate_type(self, type_name: str, naming_scope: NamingScope) -> type:
        target_type = self._target_type
        additional = self.all_additional_interfaces()

        target = ClassProxyTargetContributor(target_type, naming_scope)
        mixins = self.new_mixin_contributor(naming_scope)
        no_target = InterfaceProxyWithoutTargetContributor(naming_scope)
        instance = self.new_instance_contributor(proxy_is_target=True)

        mapping = TypeImplementerMapping()
        self.map_mixins(mapping, mixins, target, target_type, additional)
        self.map_additional_interfaces(mapping, target, target_type, no_target, additional)
        self.map_infrastructure(mapping, instance, target_type, additional)

        bases = minimal_bases((target_type, *mapping.interfaces))
        builder = self.new_builder(type_name, naming_scope, mapping, bases)
        builder.claim(
            (member.name for member in declared_members(target_type, include_inherited=True)),
            contributor=target.name,
        )
        proxy_type = self.emit(builder, (target, mixins, no_target, instance), mixins)
        install_class_proxy_constructors(proxy_type)
        return proxy_type


__all__ = ["ClassProxyGenerator"]
