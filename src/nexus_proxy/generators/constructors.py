"""Constructors installed on synthesized proxy types."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from nexus_proxy.constants import (
    INTERCEPTORS_FIELD,
    MIXIN_FIELDS_ATTRIBUTE,
    OPTIONS_ATTRIBUTE,
    SELECTED_INTERCEPTORS_FIELD,
    SELECTOR_FIELD,
    TARGET_FIELD,
)
from nexus_proxy.domain.typeutil import instance_implements
from nexus_proxy.interception.interceptors import validate_interceptors

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from nexus_proxy.interception.interceptors import Interceptor, InterceptorSelector


def install_class_proxy_constructors(proxy_type: type) -> None:
    """Give a class proxy ``(interceptors, mixins=(), selector=None, /, *args, **kwargs)``.

    Proxy state is stored before the base ``__init__`` runs, so calls the base
    makes on ``self`` are intercepted too. A custom base ``__new__`` receives
    the constructor arguments only.
    """

    def __new__(
        cls: type,
        interceptors: Sequence[Interceptor],
        mixins: Iterable[object] = (),
        selector: InterceptorSelector | None = None,
        /,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        parent_new = super(proxy_type, cls).__new__
        if parent_new is object.__new__:
            return parent_new(cls)
        return parent_new(cls, *args, **kwargs)

    def __init__(
        self: Any,
        interceptors: Sequence[Interceptor],
        mixins: Iterable[object] = (),
        selector: InterceptorSelector | None = None,
        /,
        *args: Any,
        **kwargs: Any,
    ) -> None:
        initialize_proxy_state(self, interceptors, mixins, selector)
        super(proxy_type, self).__init__(*args, **kwargs)

    __new__.__qualname__ = f"{proxy_type.__qualname__}.__new__"
    __init__.__qualname__ = f"{proxy_type.__qualname__}.__init__"
    type.__setattr__(proxy_type, "__new__", staticmethod(__new__))
    type.__setattr__(proxy_type, "__init__", __init__)


def install_interface_proxy_constructor(proxy_type: type) -> None:
    """Give an interface proxy ``(interceptors, mixins=(), target=None, selector=None)``."""

    def __init__(
        self: Any,
        interceptors: Sequence[Interceptor],
        mixins: Iterable[object] = (),
        target: object | None = None,
        selector: InterceptorSelector | None = None,
    ) -> None:
        initialize_proxy_state(self, interceptors, mixins, selector)
        object.__setattr__(self, TARGET_FIELD, target)
        super(proxy_type, self).__init__()

    __init__.__qualname__ = f"{proxy_type.__qualname__}.__init__"
    type.__setattr__(proxy_type, "__init__", __init__)


def initialize_proxy_state(
    proxy: Any,
    interceptors: Sequence[Interceptor],
    mixins: Iterable[object],
    selector: InterceptorSelector | None,
) -> None:
    proxy_type = type(proxy)
    if selector is None:
        selector = getattr(proxy_type, OPTIONS_ATTRIBUTE).selector
    checked = validate_interceptors(interceptors, "interceptors")
    object.__setattr__(proxy, INTERCEPTORS_FIELD, checked)
    object.__setattr__(proxy, SELECTOR_FIELD, selector)
    object.__setattr__(proxy, SELECTED_INTERCEPTORS_FIELD, {})

    instances = tuple(mixins or ())
    fields: dict[str, type] = getattr(proxy_type, MIXIN_FIELDS_ATTRIBUTE, {})
    for field_name, interface in fields.items():
        backing = next((item for item in instances if instance_implements(item, interface)), None)
        object.__setattr__(proxy, field_name, backing)


__all__ = [
    "initialize_proxy_state",
    "install_class_proxy_constructors",
    "install_interface_proxy_constructor",
]
