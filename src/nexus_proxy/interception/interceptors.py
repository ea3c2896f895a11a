"""Interceptor and selector contracts plus the standard interceptor base."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from nexus_proxy.domain.members import MethodInfo
    from nexus_proxy.interception.invocation import Invocation


@runtime_checkable
class Interceptor(Protocol):
    def intercept(self, invocation: Invocation) -> None: ...


@runtime_checkable
class InterceptorSelector(Protocol):
    """Chooses, per member, which of a proxy's interceptors run.

    Called once per proxy instance and member, on the first call.
    """

    def select_interceptors(
        self, member: MethodInfo, interceptors: Sequence[Interceptor]
    ) -> Sequence[Interceptor]: ...


class StandardInterceptor:
    """Interceptor that proceeds, with overridable before / after steps."""

    def intercept(self, invocation: Invocation) -> None:
        self.pre_proceed(invocation)
        self.perform_proceed(invocation)
        self.post_proceed(invocation)

    def pre_proceed(self, invocation: Invocation) -> None:
        return None

    def perform_proceed(self, invocation: Invocation) -> None:
        invocation.proceed()

    def post_proceed(self, invocation: Invocation) -> None:
        return None


def validate_interceptors(
    interceptors: Sequence[object], argument_name: str
) -> tuple[Interceptor, ...]:
    """Return ``interceptors`` as a tuple, rejecting entries without ``intercept``."""
    checked: list[Interceptor] = []
    for index, item in enumerate(interceptors):
        if item is None or not isinstance(item, Interceptor):
            raise TypeError(
                f"{argument_name}[{index}]: expected an interceptor, got {type(item).__name__}"
            )
        checked.append(item)
    return tuple(checked)


__all__ = ["Interceptor", "InterceptorSelector", "StandardInterceptor", "validate_interceptors"]
