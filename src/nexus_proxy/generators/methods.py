"""
nexus-proxy — module skeleton

File: src/nexus_proxy/generators/methods.py
Last updated: 2026-10-19

Purpose
- Turn one classified accessor (MethodToGenerate) into a callable body.

What should be included in this file
- A single dispatcher over BodyStrategy.
- Intercepted bodies: one Invocation per call, interceptors chosen per member
  through the proxy's selector when the options carry one.
- Direct-forward bodies: straight call through the contributor's forwarder.
- Empty stubs: reset Out arguments, return None.

Functional requirements
- Selector results are cached per proxy instance and member token, computed on
  the first call of that member.
- Bodies copy name, qualname, doc and module of the source function when the
  options ask for it.

Non-functional requirements
- Bodies hold no locks; per-call state lives in the Invocation only.
"""

from __future__ import annotations

import functools
import itertools
from typing import TYPE_CHECKING, Any, Final

from nexus_proxy.constants import (
    INTERCEPTORS_FIELD,
    SELECTED_INTERCEPTORS_FIELD,
    SELECTOR_FIELD,
)
from nexus_proxy.domain.descriptors import Out
from nexus_proxy.domain.errors import ProxyGenerationError
from nexus_proxy.domain.models import BodyStrategy

if TYPE_CHECKING:
    from collections.abc import Callable

    from nexus_proxy.contributors.base import TargetBinding
    from nexus_proxy.domain.members import MethodInfo
    from nexus_proxy.domain.models import MethodToGenerate
    from nexus_proxy.generators.options import ProxyGenerationOptions
    from nexus_proxy.interception.interceptors import Interceptor

_METADATA_FIELDS: Final[tuple[str, ...]] = ("__module__", "__name__", "__qualname__", "__doc__")


def generate_member_body(
    method: MethodToGenerate,
    binding: TargetBinding,
    options: ProxyGenerationOptions,
    token: str,
) -> Any:
    """Build the body for ``method``; wrapped in staticmethod/classmethod when declared so."""
    strategy = method.strategy
    if strategy is BodyStrategy.INTERCEPTED:
        body = build_intercepted_body(method, binding, options, token)
    elif strategy is BodyStrategy.DIRECT_FORWARD:
        body = build_forwarding_body(method, binding)
    elif strategy is BodyStrategy.EMPTY_STUB:
        body = build_empty_stub()
    else:
        raise ProxyGenerationError(f"unsupported body strategy {strategy!r}")

    source = method.method.function
    if options.copy_member_metadata and source is not None:
        functools.update_wrapper(body, source, assigned=_METADATA_FIELDS, updated=())

    wrapper = method.method.wrapper
    if wrapper is not None:
        if strategy is not BodyStrategy.EMPTY_STUB:
            raise ProxyGenerationError(
                f"{method.method.qualified_name}: {wrapper.__name__} members can only be stubbed"
            )
        return wrapper(body)
    return body


def build_intercepted_body(
    method: MethodToGenerate,
    binding: TargetBinding,
    options: ProxyGenerationOptions,
    token: str,
) -> Callable[..., Any]:
    member = method.method
    member_on_target = method.method_on_target
    invocation_type = binding.invocation_type
    resolve_target = binding.resolve_target
    hook = options.hook

    if options.selector is None:

        def intercepted(self: Any, *args: Any, **kwargs: Any) -> Any:
            invocation = invocation_type(
                proxy=self,
                target=resolve_target(self),
                method=member,
                method_on_target=member_on_target,
                interceptors=object.__getattribute__(self, INTERCEPTORS_FIELD),
                arguments=args,
                keyword_arguments=kwargs,
                hook=hook,
            )
            invocation.proceed()
            return invocation.complete()

        return intercepted

    def intercepted_with_selector(self: Any, *args: Any, **kwargs: Any) -> Any:
        invocation = invocation_type(
            proxy=self,
            target=resolve_target(self),
            method=member,
            method_on_target=member_on_target,
            interceptors=selected_interceptors(self, member, token),
            arguments=args,
            keyword_arguments=kwargs,
            hook=hook,
        )
        invocation.proceed()
        return invocation.complete()

    return intercepted_with_selector


def build_forwarding_body(method: MethodToGenerate, binding: TargetBinding) -> Callable[..., Any]:
    member_on_target = method.method_on_target
    forward = binding.forward

    def forwarding(self: Any, *args: Any, **kwargs: Any) -> Any:
        return forward(self, member_on_target, args, kwargs)

    return forwarding


def build_empty_stub() -> Callable[..., Any]:
    def empty_stub(*args: Any, **kwargs: Any) -> None:
        for value in itertools.chain(args, kwargs.values()):
            if isinstance(value, Out):
                value.value = None
        return None

    return empty_stub


def selected_interceptors(proxy: object, member: MethodInfo, token: str) -> tuple[Interceptor, ...]:
    """Interceptors chosen for ``member`` on ``proxy``; asks the selector once per token."""
    cache: dict[str, tuple[Interceptor, ...]] = object.__getattribute__(
        proxy, SELECTED_INTERCEPTORS_FIELD
    )
    selected = cache.get(token)
    if selected is not None:
        return selected
    defaults: tuple[Interceptor, ...] = object.__getattribute__(proxy, INTERCEPTORS_FIELD)
    selector = object.__getattribute__(proxy, SELECTOR_FIELD)
    chosen = defaults if selector is None else selector.select_interceptors(member, defaults)
    # Concurrent first calls may both ask the selector; the first answer stored wins.
    return cache.setdefault(token, tuple(chosen or ()))


__all__ = [
    "build_empty_stub",
    "build_forwarding_body",
    "build_intercepted_body",
    "generate_member_body",
    "selected_interceptors",
]
