"""Shared sample types and interceptors for proxy generator tests."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Protocol

from nexus_proxy.domain.descriptors import Out, Ref, event
from nexus_proxy.interception.hooks import AllMethodsHook

if TYPE_CHECKING:
    from nexus_proxy.domain.members import MethodInfo
    from nexus_proxy.interception.invocation import Invocation


class IOne(ABC):
    @abstractmethod
    def one_method(self) -> int: ...


class ITwo(ABC):
    @abstractmethod
    def two_method(self) -> int: ...


class IAudit(ABC):
    @abstractmethod
    def audit(self) -> str: ...


class IParser(ABC):
    @abstractmethod
    def try_parse(self, text: str, result: Out[int]) -> bool: ...


class IObservable(ABC):
    @property
    @abstractmethod
    def name(self) -> str: ...

    @name.setter
    @abstractmethod
    def name(self, value: str) -> None: ...

    @event
    @abstractmethod
    def changed(self, handler: Any) -> None: ...

    @changed.remover
    @abstractmethod
    def changed(self, handler: Any) -> None: ...


class Greeter(Protocol):
    def greet(self, who: str) -> str: ...


class One(IOne):
    def one_method(self) -> int:
        return 3


class OneTwo(IOne, ITwo):
    def one_method(self) -> int:
        return 1

    def two_method(self) -> int:
        return 2


class Audit(IAudit):
    def audit(self) -> str:
        return "mixin"


class OneAudit(IOne, IAudit):
    def one_method(self) -> int:
        return 11

    def audit(self) -> str:
        return "target"


class Observable(IObservable):
    def __init__(self) -> None:
        self._name = "initial"
        self.handlers: list[Any] = []

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = value

    @event
    def changed(self, handler: Any) -> None:
        self.handlers.append(handler)

    @changed.remover
    def changed(self, handler: Any) -> None:
        self.handlers.remove(handler)


class Counter:
    """Counts upwards."""

    def __init__(self, start: int = 0) -> None:
        self.value = start

    def increment(self, step: int = 1) -> int:
        """Add ``step`` and return the new value."""
        self.value += step
        return self.value

    @property
    def doubled(self) -> int:
        return self.value * 2

    @staticmethod
    def zero() -> int:
        return 0


class Splitter:
    def split(self, text: str, head: Ref[str]) -> str:
        head.value = text[:1]
        return text[1:]


class RecordingInterceptor:
    """Logs ``<name>:<member>`` before and after proceeding."""

    def __init__(self, name: str, log: list[str]) -> None:
        self.name = name
        self.log = log

    def intercept(self, invocation: Invocation) -> None:
        self.log.append(f"{self.name}:before:{invocation.method.name}")
        invocation.proceed()
        self.log.append(f"{self.name}:after:{invocation.method.name}")


class ReturningInterceptor:
    """Short-circuits every call with a fixed value."""

    def __init__(self, value: object) -> None:
        self.value = value

    def intercept(self, invocation: Invocation) -> None:
        invocation.return_value = self.value


class ProceedingInterceptor:
    def __init__(self) -> None:
        self.members: list[str] = []

    def intercept(self, invocation: Invocation) -> None:
        self.members.append(invocation.method.name)
        invocation.proceed()


class CountingHook(AllMethodsHook):
    """Intercepts everything and counts ``methods_inspected`` notifications."""

    def __init__(self) -> None:
        self.inspected = 0
        self.notifications: list[tuple[str, str]] = []

    def non_proxyable_member_notification(self, member: MethodInfo, reason: str) -> None:
        self.notifications.append((member.name, reason))

    def methods_inspected(self) -> None:
        self.inspected += 1


__all__ = [
    "Audit",
    "CountingHook",
    "Counter",
    "Greeter",
    "IAudit",
    "IObservable",
    "IOne",
    "IParser",
    "ITwo",
    "Observable",
    "One",
    "OneAudit",
    "OneTwo",
    "ProceedingInterceptor",
    "RecordingInterceptor",
    "ReturningInterceptor",
    "Splitter",
]
