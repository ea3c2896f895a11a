"""
nexus-proxy — module skeleton

File: src/nexus_proxy/interception/invocation.py
Last updated: 2026-10-19

Purpose
- Per-call state record that drives the interceptor chain of one proxied call.

What should be included in this file
- InvocationState lifecycle: CREATED -> PROCEEDING -> COMPLETED.
- Invocation base with an explicit chain cursor, argument buffer and return value.
- ClassMethodInvocation, InterfaceMethodInvocation, ChangeableTargetInvocation.

Functional requirements
- proceed() runs interceptor i while i < N and the target member when i == N.
- After each step the cursor moves back, so an interceptor may proceed again.
- A chain that reaches the end with no target raises MissingTargetError unless
  the generation hook supplies a DefaultReturnPolicy.
- Ref / Out arguments are unboxed into the buffer, re-boxed for the target call
  and copied back into the caller's boxes by complete().

Non-functional requirements
- An invocation is owned by one call on one thread and takes no locks.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any

from nexus_proxy.constants import TARGET_FIELD
from nexus_proxy.domain.descriptors import Ref
from nexus_proxy.domain.errors import InvocationStateError, MissingTargetError
from nexus_proxy.interception.hooks import DefaultReturnPolicy

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from nexus_proxy.domain.members import MethodInfo
    from nexus_proxy.interception.interceptors import Interceptor


class InvocationState(Enum):
    CREATED = "created"
    PROCEEDING = "proceeding"
    COMPLETED = "completed"


class Invocation(ABC):
    """Call state shared by the interceptors of one proxied call."""

    __slots__ = (
        "_arguments",
        "_boxes",
        "_hook",
        "_index",
        "_interceptors",
        "_keyword_arguments",
        "_keyword_boxes",
        "_method",
        "_method_on_target",
        "_proxy",
        "_return_value",
        "_state",
        "_target",
    )

    def __init__(
        self,
        *,
        proxy: object,
        target: object | None,
        method: MethodInfo,
        method_on_target: MethodInfo,
        interceptors: Sequence[Interceptor],
        arguments: Sequence[object] = (),
        keyword_arguments: Mapping[str, object] | None = None,
        hook: object | None = None,
    ) -> None:
        self._proxy = proxy
        self._target = target
        self._method = method
        self._method_on_target = method_on_target
        self._interceptors = tuple(interceptors)
        self._hook = hook
        self._boxes: tuple[Ref[Any] | None, ...] = tuple(
            item if isinstance(item, Ref) else None for item in arguments
        )
        self._arguments: list[object] = [
            item.value if isinstance(item, Ref) else item for item in arguments
        ]
        keywords = dict(keyword_arguments or {})
        self._keyword_boxes: dict[str, Ref[Any]] = {
            key: value for key, value in keywords.items() if isinstance(value, Ref)
        }
        self._keyword_arguments: dict[str, object] = {
            key: value.value if isinstance(value, Ref) else value
            for key, value in keywords.items()
        }
        self._index = -1
        self._state = InvocationState.CREATED
        self._return_value: Any = None

    # --- read-only call description -------------------------------------------------

    @property
    def proxy(self) -> object:
        return self._proxy

    @property
    def invocation_target(self) -> object | None:
        return self._target

    @property
    def target_type(self) -> type | None:
        return None if self._target is None else type(self._target)

    @property
    def method(self) -> MethodInfo:
        return self._method

    @property
    def method_invocation_target(self) -> MethodInfo:
        return self._method_on_target

    @property
    def interceptors(self) -> tuple[Interceptor, ...]:
        return self._interceptors

    @property
    def state(self) -> InvocationState:
        return self._state

    # --- mutable call state ------------------------------------------------------------

    @property
    def arguments(self) -> tuple[object, ...]:
        return tuple(self._arguments)

    @property
    def keyword_arguments(self) -> dict[str, object]:
        return dict(self._keyword_arguments)

    def get_argument_value(self, index: int) -> object:
        return self._arguments[index]

    def set_argument_value(self, index: int, value: object) -> None:
        self._ensure_not_completed("set_argument_value")
        self._arguments[index] = value

    def set_keyword_argument(self, name: str, value: object) -> None:
        self._ensure_not_completed("set_keyword_argument")
        if name not in self._keyword_arguments:
            raise KeyError(name)
        self._keyword_arguments[name] = value

    @property
    def return_value(self) -> Any:
        return self._return_value

    @return_value.setter
    def return_value(self, value: Any) -> None:
        self._ensure_not_completed("return_value")
        self._return_value = value

    # --- chain ---------------------------------------------------------------------------

    def proceed(self) -> None:
        """Run the next interceptor, or the target member once the chain is exhausted."""
        self._ensure_not_completed("proceed")
        self._state = InvocationState.PROCEEDING
        self._index += 1
        try:
            count = len(self._interceptors)
            if self._index < count:
                self._interceptors[self._index].intercept(self)
            elif self._index == count:
                self._return_value = self.invoke_method_on_target()
            else:
                raise InvocationStateError(
                    f"{self._method.qualified_name}: proceed() called past the end of the "
                    "interceptor chain"
                )
        finally:
            self._index -= 1

    def complete(self) -> Any:
        """Freeze the call, copy by-ref arguments back to the caller and return the result."""
        if self._state is not InvocationState.COMPLETED:
            for index, box in enumerate(self._boxes):
                if box is not None:
                    box.value = self._arguments[index]
            for name, box in self._keyword_boxes.items():
                box.value = self._keyword_arguments[name]
            self._state = InvocationState.COMPLETED
        return self._return_value

    @abstractmethod
    def invoke_method_on_target(self) -> Any:
        """Call the real member; implemented per proxy shape."""

    # --- helpers for subclasses ------------------------------------------------------------

    def _call_with_arguments(
        self, call: Callable[[Sequence[object], Mapping[str, object]], Any]
    ) -> Any:
        args = [
            type(box)(value) if box is not None else value
            for box, value in zip(self._boxes, self._arguments, strict=True)
        ]
        kwargs: dict[str, object] = {
            key: type(self._keyword_boxes[key])(value) if key in self._keyword_boxes else value
            for key, value in self._keyword_arguments.items()
        }
        result = call(args, kwargs)
        for index, box in enumerate(self._boxes):
            if box is not None:
                self._arguments[index] = args[index].value  # type: ignore[attr-defined]
        for key in self._keyword_boxes:
            self._keyword_arguments[key] = kwargs[key].value  # type: ignore[attr-defined]
        return result

    def _missing_target(self) -> Any:
        hook = self._hook
        if hook is not None and isinstance(hook, DefaultReturnPolicy):
            return hook.default_return_value(self._method)
        raise MissingTargetError(
            f"{self._method.qualified_name}: there is no target to proceed to; an interceptor "
            "must set the return value instead of calling proceed()"
        )

    def _ensure_not_completed(self, operation: str) -> None:
        if self._state is InvocationState.COMPLETED:
            raise InvocationStateError(
                f"{self._method.qualified_name}: {operation} is not allowed after completion"
            )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(method={self._method.qualified_name!r}, "
            f"state={self._state.value}, index={self._index})"
        )


class ClassMethodInvocation(Invocation):
    """Invocation whose target is the proxy itself; proceeds to the base implementation."""

    __slots__ = ()

    def invoke_method_on_target(self) -> Any:
        member = self._method_on_target
        if member.is_abstract or member.function is None:
            return self._missing_target()
        return self._call_with_arguments(
            lambda args, kwargs: member.invoke_declared(self._proxy, args, kwargs)
        )


class InterfaceMethodInvocation(Invocation):
    """Invocation dispatching by name to a separate target object, if any."""

    __slots__ = ()

    def invoke_method_on_target(self) -> Any:
        target = self._target
        if target is None:
            return self._missing_target()
        member = self._method_on_target
        return self._call_with_arguments(lambda args, kwargs: member.invoke(target, args, kwargs))


class ChangeableTargetInvocation(InterfaceMethodInvocation):
    """Interface invocation whose target may be swapped by an interceptor."""

    __slots__ = ()

    def change_invocation_target(self, target: object | None) -> None:
        """Use ``target`` for this call only."""
        self._ensure_not_completed("change_invocation_target")
        self._target = target

    def change_proxy_target(self, target: object | None) -> None:
        """Use ``target`` for this call and every later call on the proxy."""
        self._ensure_not_completed("change_proxy_target")
        object.__setattr__(self._proxy, TARGET_FIELD, target)
        self._target = target


__all__ = [
    "ChangeableTargetInvocation",
    "ClassMethodInvocation",
    "InterfaceMethodInvocation",
    "Invocation",
    "InvocationState",
]
