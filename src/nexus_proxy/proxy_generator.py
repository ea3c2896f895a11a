"""
nexus-proxy — module skeleton

File: src/nexus_proxy/proxy_generator.py
Last updated: 2026-10-19

Purpose
- Public entry points creating proxy instances for each proxy shape.

What should be included in this file
- Argument validation (interceptors, target presence, target implements the
  proxied interface) before any type is generated.
- Construction of proxy instances from cached proxy types.
- from_config: scope and default options built from a validated config.

Functional requirements
- A request with invalid arguments raises before the type cache is touched.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from nexus_proxy.domain.errors import InvalidProxyRequestError
from nexus_proxy.domain.typeutil import (
    check_not_generic_type_definition,
    instance_implements,
    qualified_name,
)
from nexus_proxy.generators.builder import DefaultProxyBuilder
from nexus_proxy.generators.options import ProxyGenerationOptions
from nexus_proxy.generators.scope import ProxyScope
from nexus_proxy.interception.hooks import AllMethodsHook, ProxyGenerationHook
from nexus_proxy.interception.interceptors import Interceptor, validate_interceptors
from nexus_proxy.interception.policy import load_policy_hook
from nexus_proxy.observability.metrics import MetricsRegistry

logger = logging.getLogger(__name__)


class ProxyGenerator:
    """Creates proxy instances; proxy types are cached in the builder's scope."""

    def __init__(
        self,
        builder: DefaultProxyBuilder | None = None,
        *,
        default_options: ProxyGenerationOptions | None = None,
    ) -> None:
        self._builder = builder if builder is not None else DefaultProxyBuilder()
        self._default_options = (
            default_options if default_options is not None else ProxyGenerationOptions()
        )

    @classmethod
    def from_config(
        cls, config: Mapping[str, Any], *, metrics: MetricsRegistry | None = None
    ) -> ProxyGenerator:
        """Build scope and default options from a validated config.

        The default hook is loaded from ``generation.policy_file`` when it is set.
        """
        generation = config.get("generation", {})
        policy_file = generation.get("policy_file", "")
        hook: ProxyGenerationHook = (
            load_policy_hook(policy_file) if policy_file else AllMethodsHook()
        )
        options = ProxyGenerationOptions(
            hook=hook,
            copy_member_metadata=bool(generation.get("copy_member_metadata", True)),
        )
        scope = ProxyScope.from_config(config, metrics=metrics)
        logger.debug("proxy generator configured for module %s", scope.module_name)
        return cls(DefaultProxyBuilder(scope), default_options=options)

    @property
    def builder(self) -> DefaultProxyBuilder:
        return self._builder

    @property
    def scope(self) -> ProxyScope:
        return self._builder.scope

    @property
    def default_options(self) -> ProxyGenerationOptions:
        return self._default_options

    def create_class_proxy(
        self,
        class_to_proxy: type,
        interceptors: Sequence[Interceptor],
        *,
        additional_interfaces: Sequence[type] | None = None,
        options: ProxyGenerationOptions | None = None,
        constructor_args: Sequence[object] = (),
        constructor_kwargs: Mapping[str, object] | None = None,
    ) -> Any:
        """Instantiate a subclass of ``class_to_proxy``, passing it the constructor arguments."""
        checked = validate_interceptors(interceptors, "interceptors")
        options = self._options(options)
        proxy_type = self._builder.create_class_proxy_type(
            class_to_proxy, additional_interfaces, options
        )
        return proxy_type(
            checked,
            options.mixins.mixins,
            options.selector,
            *constructor_args,
            **dict(constructor_kwargs or {}),
        )

    def create_interface_proxy_with_target(
        self,
        interface_to_proxy: type,
        target: object,
        interceptors: Sequence[Interceptor],
        *,
        additional_interfaces: Sequence[type] | None = None,
        options: ProxyGenerationOptions | None = None,
    ) -> Any:
        """Proxy ``interface_to_proxy``, forwarding to ``target``.

        The proxy type is cached per class of ``target``.
        """
        checked = validate_interceptors(interceptors, "interceptors")
        if target is None:
            raise InvalidProxyRequestError("target: a target instance is required")
        _check_target_implements(interface_to_proxy, target)
        options = self._options(options)
        proxy_type = self._builder.create_interface_proxy_type_with_target(
            interface_to_proxy, additional_interfaces, type(target), options
        )
        return proxy_type(checked, options.mixins.mixins, target, options.selector)

    def create_interface_proxy_with_target_interface(
        self,
        interface_to_proxy: type,
        target: object | None,
        interceptors: Sequence[Interceptor],
        *,
        additional_interfaces: Sequence[type] | None = None,
        options: ProxyGenerationOptions | None = None,
    ) -> Any:
        """Proxy ``interface_to_proxy`` over a replaceable target; ``target`` may be ``None``."""
        checked = validate_interceptors(interceptors, "interceptors")
        if target is not None:
            _check_target_implements(interface_to_proxy, target)
        options = self._options(options)
        proxy_type = self._builder.create_interface_proxy_type_with_target_interface(
            interface_to_proxy, additional_interfaces, options
        )
        return proxy_type(checked, options.mixins.mixins, target, options.selector)

    def create_interface_proxy_without_target(
        self,
        interface_to_proxy: type,
        interceptors: Sequence[Interceptor],
        *,
        additional_interfaces: Sequence[type] | None = None,
        options: ProxyGenerationOptions | None = None,
    ) -> Any:
        """Proxy ``interface_to_proxy`` with no target; interceptors produce the results."""
        checked = validate_interceptors(interceptors, "interceptors")
        options = self._options(options)
        proxy_type = self._builder.create_interface_proxy_type_without_target(
            interface_to_proxy, additional_interfaces, options
        )
        return proxy_type(checked, options.mixins.mixins, None, options.selector)

    def _options(self, options: ProxyGenerationOptions | None) -> ProxyGenerationOptions:
        return options if options is not None else self._default_options


def _check_target_implements(interface: type, target: object) -> None:
    check_not_generic_type_definition(interface, "interface_to_proxy")
    try:
        implemented = instance_implements(target, interface)
    except TypeError as exc:
        raise InvalidProxyRequestError(
            f"interface_to_proxy: {interface!r} cannot be checked against a target: {exc}"
        ) from exc
    if not implemented:
        raise InvalidProxyRequestError(
            f"target: {qualified_name(type(target))} does not implement "
            f"{qualified_name(interface)}"
        )


__all__ = ["ProxyGenerator"]
