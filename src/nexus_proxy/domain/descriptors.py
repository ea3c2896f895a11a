"""Member shapes Python lacks natively: events and by-reference argument boxes."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")

_Accessor = Callable[[Any, Any], None]


class event:  # noqa: N801 - mirrors the builtin ``property`` spelling
    """Descriptor declaring a pair of subscribe / unsubscribe accessors.

    Declared like ``property``::

        class Observable(ABC):
            @event
            @abstractmethod
            def changed(self, handler): ...

            @changed.remover
            @abstractmethod
            def changed(self, handler): ...

    ``obj.changed += handler`` calls the adder, ``obj.changed -= handler`` the remover.
    """

    def __init__(
        self,
        fadd: _Accessor | None = None,
        fremove: _Accessor | None = None,
        doc: str | None = None,
    ) -> None:
        self.fadd = fadd
        self.fremove = fremove
        self.name: str | None = getattr(fadd, "__name__", None)
        if doc is None and fadd is not None:
            doc = fadd.__doc__
        self.__doc__ = doc

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    @property
    def __isabstractmethod__(self) -> bool:
        return any(
            getattr(accessor, "__isabstractmethod__", False)
            for accessor in (self.fadd, self.fremove)
            if accessor is not None
        )

    def adder(self, fadd: _Accessor) -> event:
        return type(self)(fadd, self.fremove, self.__doc__)

    def remover(self, fremove: _Accessor) -> event:
        return type(self)(self.fadd, fremove, self.__doc__)

    def __get__(self, instance: object, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return BoundEvent(self, instance)

    def __set__(self, instance: object, value: object) -> None:
        # ``obj.evt += h`` rebinds the attribute to the BoundEvent it returned.
        if (
            isinstance(value, BoundEvent)
            and value.descriptor is self
            and value.instance is instance
        ):
            return
        raise AttributeError(f"event {self.name!r} supports only += and -=")


class BoundEvent:
    """An event bound to one instance."""

    __slots__ = ("descriptor", "instance")

    def __init__(self, descriptor: event, instance: object) -> None:
        self.descriptor = descriptor
        self.instance = instance

    def add(self, handler: Any) -> None:
        if self.descriptor.fadd is None:
            raise AttributeError(f"event {self.descriptor.name!r} has no adder")
        self.descriptor.fadd(self.instance, handler)

    def remove(self, handler: Any) -> None:
        if self.descriptor.fremove is None:
            raise AttributeError(f"event {self.descriptor.name!r} has no remover")
        self.descriptor.fremove(self.instance, handler)

    def __iadd__(self, handler: Any) -> BoundEvent:
        self.add(handler)
        return self

    def __isub__(self, handler: Any) -> BoundEvent:
        self.remove(handler)
        return self


@dataclass(slots=True)
class Ref(Generic[T]):
    """Mutable box passed in place of a by-reference argument."""

    value: T | None = None


@dataclass(slots=True)
class Out(Ref[T]):
    """Box for an output-only argument; empty stubs reset it to ``None``."""


__all__ = ["BoundEvent", "Out", "Ref", "event"]
