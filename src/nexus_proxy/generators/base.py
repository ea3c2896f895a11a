"""
nexus-proxy — module skeleton

File: src/nexus_proxy/generators/base.py
Last updated: 2026-10-19

Purpose
- Shared coordinator for every proxy shape: validate a request, look it up in
  the scope's type cache and synthesize the type at most once per cache key.

What should be included in this file
- Request validation (generic aliases, non-interfaces, duplicates, proxy of a proxy).
- Cache lookup: shared read, then an upgradeable read that synthesizes and
  upgrades to exclusive access only for the insert.
- Interface → contributor precedence shared by the concrete generators
  (mixins, additional interfaces, infrastructure interface).
- Diagnosis of collisions on the infrastructure interface.

Functional requirements
- Invalid requests fail before any synthesis work; nothing is cached on failure.
- Concurrent first requests for one key synthesize exactly once; requests for
  cached keys only take the shared read lock and never wait on synthesis.

Non-functional requirements
- Emits cache hit / miss and generation timing metrics into the scope registry.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from nexus_proxy.constants import (
    METRIC_CACHE_HITS,
    METRIC_CACHE_MISSES,
    METRIC_GENERATION_SECONDS,
    METRIC_TYPES_GENERATED,
    MIXIN_FIELDS_ATTRIBUTE,
)
from nexus_proxy.contributors.instance import ProxyInstanceContributor
from nexus_proxy.contributors.mapping import TypeImplementerMapping
from nexus_proxy.contributors.mixins import MixinContributor
from nexus_proxy.domain.errors import (
    DuplicateInterfaceError,
    InfrastructureCollisionError,
    InvalidProxyRequestError,
    ProxyGenerationError,
    ProxyOfProxyError,
)
from nexus_proxy.domain.infrastructure import ProxyTargetAccessor
from nexus_proxy.domain.typeutil import (
    check_not_generic_type_definition,
    check_not_generic_type_definitions,
    get_all_interfaces,
    implements,
    is_interface,
    qualified_name,
)
from nexus_proxy.generators.emitter import ProxyTypeBuilder
from nexus_proxy.generators.options import ProxyGenerationOptions
from nexus_proxy.interception.hooks import has_value_equality
from nexus_proxy.observability.logging import correlation_scope

if TYPE_CHECKING:
    from collections.abc import Sequence

    from nexus_proxy.contributors.base import CompositeTypeContributor, TypeContributor
    from nexus_proxy.domain.models import CacheKey, ProxyKind
    from nexus_proxy.domain.naming import NamingScope
    from nexus_proxy.generators.scope import ProxyScope

logger = logging.getLogger(__name__)


class BaseProxyGenerator(ABC):
    """Produces one proxy type for ``target_type`` plus ``interfaces``."""

    kind: ClassVar[ProxyKind]

    def __init__(
        self,
        scope: ProxyScope,
        target_type: type,
        interfaces: Sequence[type] | None = None,
        options: ProxyGenerationOptions | None = None,
    ) -> None:
        self._scope = scope
        self._target_type = target_type
        self._interfaces: tuple[type, ...] = tuple(interfaces or ())
        self._options = options if options is not None else ProxyGenerationOptions()

    @property
    def scope(self) -> ProxyScope:
        return self._scope

    @property
    def target_type(self) -> type:
        return self._target_type

    @property
    def interfaces(self) -> tuple[type, ...]:
        return self._interfaces

    @property
    def options(self) -> ProxyGenerationOptions:
        return self._options

    def get_proxy_type(self) -> type:
        """Return the cached proxy type for this request, synthesizing it on first use."""
        self.validate()
        key = self.cache_key()
        scope = self._scope

        with scope.lock.for_reading():
            cached = scope.get_from_cache(key)
        if cached is not None:
            return self._cache_hit(cached)

        with scope.lock.for_reading_upgradeable() as handle:
            cached = scope.get_from_cache(key)
            if cached is not None:
                return self._cache_hit(cached)

            scope.metrics.inc(METRIC_CACHE_MISSES, labels={"kind": self.kind.value})
            self._warn_on_identity_equality()
            type_name = scope.naming_scope.get_unique_name(
                f"{scope.module_name}.{self._target_type.__name__}{scope.type_suffix}"
            )
            # Only the upgradeable slot is held here: readers of cached keys proceed.
            with correlation_scope(
                proxy_kind=self.kind.value, target_type=qualified_name(self._target_type)
            ), scope.metrics.timer(METRIC_GENERATION_SECONDS, labels={"kind": self.kind.value}):
                proxy_type = self.generate_type(type_name, scope.naming_scope.safe_sub_scope())
            handle.upgrade()
            scope.register_in_cache(key, proxy_type)
        scope.metrics.inc(METRIC_TYPES_GENERATED, labels={"kind": self.kind.value})
        logger.info("generated proxy type %s for %s", type_name, qualified_name(self._target_type))
        return proxy_type

    def validate(self) -> None:
        """Reject malformed requests before anything is looked up or generated."""
        check_not_generic_type_definition(self._target_type, "target_type")
        check_not_generic_type_definitions(self._interfaces, "interfaces")
        seen: set[type] = set()
        for interface in self._interfaces:
            if not is_interface(interface):
                raise InvalidProxyRequestError(
                    f"interfaces: {qualified_name(interface)} is not an interface; only "
                    "ABCs with abstract members and Protocol classes can be added"
                )
            if interface in seen:
                raise DuplicateInterfaceError(
                    f"interfaces: {qualified_name(interface)} was requested more than once"
                )
            seen.add(interface)
        if issubclass(self._target_type, ProxyTargetAccessor):
            raise ProxyOfProxyError(
                f"target_type: {qualified_name(self._target_type)} implements "
                f"{ProxyTargetAccessor.__qualname__}, an infrastructure interface that only "
                "proxies implement. Are you trying to proxy an existing proxy?"
            )
        self.validate_target()

    @abstractmethod
    def validate_target(self) -> None:
        """Shape-specific checks of the proxied type."""

    @abstractmethod
    def cache_key(self) -> CacheKey:
        """Identity of this request inside the scope."""

    @abstractmethod
    def generate_type(self, type_name: str, naming_scope: NamingScope) -> type:
        """Synthesize the proxy type; called with exclusive access to the cache."""

    # --- shared precedence steps ---------------------------------------------------------

    def all_additional_interfaces(self) -> tuple[type, ...]:
        """Requested interfaces together with every interface they extend."""
        return tuple(get_all_interfaces(*self._interfaces))

    def map_mixins(
        self,
        mapping: TypeImplementerMapping,
        mixins: MixinContributor,
        target: CompositeTypeContributor,
        target_type: type,
        additional: Sequence[type],
    ) -> None:
        """Map mixin interfaces, letting the target keep interfaces it already implements."""
        for interface in self._options.mixins.mixin_interfaces:
            if implements(target_type, interface):
                if interface in additional and interface not in mapping:
                    mapping.add(interface, target)
                    target.add_interface_to_proxy(interface)
                mixins.add_empty_interface(interface)
            elif mapping.add_if_absent(interface, mixins):
                mixins.add_interface_to_proxy(interface)

    def map_additional_interfaces(
        self,
        mapping: TypeImplementerMapping,
        target: CompositeTypeContributor | None,
        target_type: type,
        no_target: CompositeTypeContributor,
        additional: Sequence[type],
    ) -> None:
        """Forward requested interfaces the target implements; the rest have no target."""
        for interface in additional:
            if interface in mapping:
                continue
            if target is not None and implements(target_type, interface):
                mapping.add(interface, target)
                target.add_interface_to_proxy(interface)
            elif not self._options.mixins.contains_mixin(interface):
                mapping.add(interface, no_target)
                no_target.add_interface_to_proxy(interface)

    def map_infrastructure(
        self,
        mapping: TypeImplementerMapping,
        instance: ProxyInstanceContributor,
        target_type: type,
        additional: Sequence[type],
    ) -> None:
        try:
            mapping.add(ProxyTargetAccessor, instance)
        except DuplicateInterfaceError as exc:
            raise self._infrastructure_collision(target_type, additional) from exc

    def new_mixin_contributor(self, naming_scope: NamingScope) -> MixinContributor:
        return MixinContributor(naming_scope, self._options.mixins.mixin_types)

    def emit(
        self,
        builder: ProxyTypeBuilder,
        contributors: Sequence[TypeContributor],
        mixins: MixinContributor,
    ) -> type:
        """Collect, generate and build; the hook hears ``methods_inspected`` once in between."""
        hook = self._options.hook
        for contributor in contributors:
            contributor.collect_elements_to_proxy(hook)
        hook.methods_inspected()
        for contributor in contributors:
            contributor.generate(builder, self._options)
        builder.add_attribute(MIXIN_FIELDS_ATTRIBUTE, dict(mixins.fields))
        return builder.build()

    def new_builder(
        self,
        type_name: str,
        naming_scope: NamingScope,
        mapping: TypeImplementerMapping,
        bases: tuple[type, ...],
    ) -> ProxyTypeBuilder:
        return ProxyTypeBuilder(
            type_name=type_name,
            kind=self.kind,
            bases=bases,
            interfaces=mapping.interfaces,
            options=self._options,
            naming_scope=naming_scope,
        )

    def new_instance_contributor(self, *, proxy_is_target: bool) -> ProxyInstanceContributor:
        return ProxyInstanceContributor(proxy_is_target=proxy_is_target)

    # --- internals -------------------------------------------------------------------------

    def _cache_hit(self, proxy_type: type) -> type:
        self._scope.metrics.inc(METRIC_CACHE_HITS, labels={"kind": self.kind.value})
        logger.debug("found cached proxy type %s", proxy_type.__qualname__)
        return proxy_type

    def _warn_on_identity_equality(self) -> None:
        hook = self._options.hook
        if self._scope.warn_on_identity_equality and not has_value_equality(hook):
            logger.warning(
                "generation hook %s does not override __eq__ and __hash__; every hook instance "
                "produces its own proxy type, which defeats the proxy type cache",
                qualified_name(type(hook)),
            )

    def _infrastructure_collision(
        self, target_type: type, additional: Sequence[type]
    ) -> Exception:
        accessor = ProxyTargetAccessor.__qualname__
        if implements(target_type, ProxyTargetAccessor):
            return InfrastructureCollisionError(
                f"target type {qualified_name(target_type)} implements {accessor}, an "
                "infrastructure interface you should never implement yourself. Are you "
                "trying to proxy an existing proxy?"
            )
        mixin = self._options.mixins.get_mixin(ProxyTargetAccessor)
        if mixin is not None:
            return InfrastructureCollisionError(
                f"mixin type {qualified_name(type(mixin))} implements {accessor}, an "
                "infrastructure interface you should never implement yourself. Are you "
                "trying to mix in an existing proxy?"
            )
        if ProxyTargetAccessor in additional:
            return InfrastructureCollisionError(
                f"{accessor} was passed as an additional interface to proxy. It is an "
                "infrastructure interface implemented by every proxy anyway; remove it from "
                "the list of additional interfaces."
            )
        return ProxyGenerationError(
            f"{accessor} was claimed by an unknown contributor while generating a proxy for "
            f"{qualified_name(target_type)}"
        )


__all__ = ["BaseProxyGenerator"]
