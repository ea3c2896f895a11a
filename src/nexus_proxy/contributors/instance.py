"""Infrastructure contributor: implements ProxyTargetAccessor on every proxy."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from nexus_proxy.constants import INTERCEPTORS_FIELD, TARGET_FIELD
from nexus_proxy.domain.infrastructure import ProxyTargetAccessor

if TYPE_CHECKING:
    from nexus_proxy.generators.emitter import ProxyTypeBuilder
    from nexus_proxy.generators.options import ProxyGenerationOptions
    from nexus_proxy.interception.hooks import ProxyGenerationHook


class ProxyInstanceContributor:
    """Adds ``proxy_target`` and ``proxy_interceptors``; never intercepted.

    Class proxies are their own target; interface proxies return their target field.
    """

    def __init__(self, *, proxy_is_target: bool) -> None:
        self._proxy_is_target = proxy_is_target

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def interfaces(self) -> tuple[type, ...]:
        return (ProxyTargetAccessor,)

    def collect_elements_to_proxy(self, hook: ProxyGenerationHook) -> None:
        return None

    def generate(self, builder: ProxyTypeBuilder, options: ProxyGenerationOptions) -> None:
        target_getter = _self_as_target if self._proxy_is_target else _field_as_target
        builder.add_function("proxy_target", target_getter, contributor=self.name, override=True)
        builder.add_function(
            "proxy_interceptors", _interceptors, contributor=self.name, override=True
        )


def _self_as_target(self: Any) -> Any:
    return self


def _field_as_target(self: Any) -> Any:
    return object.__getattribute__(self, TARGET_FIELD)


def _interceptors(self: Any) -> tuple[Any, ...]:
    return tuple(object.__getattribute__(self, INTERCEPTORS_FIELD))


__all__ = ["ProxyInstanceContributor"]
