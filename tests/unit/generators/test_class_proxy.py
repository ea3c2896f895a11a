"""
nexus-proxy — unit tests for class proxies

File: tests/unit/generators/test_class_proxy.py
Last updated: 2026-10-19

Purpose
- Validate class proxies: subclasses of the proxied class whose intercepted
  calls proceed to the base implementation.

What this test file should cover
- Construction, base-constructor arguments and custom __new__.
- Intercepted methods and properties; inherited non-virtual members.
- Abstract members: missing target, empty stubs.
- Additional interfaces with and without an implementation on the class.
- Request validation errors.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, final

import pytest

from nexus_proxy import (
    DuplicateInterfaceError,
    GenericTypeDefinitionError,
    InvalidProxyRequestError,
    Invocation,
    MissingTargetError,
    PatternHook,
    ProxyGenerationOptions,
    ProxyGenerator,
    ProxyOfProxyError,
    ProxyTargetAccessor,
)
from nexus_proxy.constants import PLAN_ATTRIBUTE
from nexus_proxy.domain.descriptors import Ref
from nexus_proxy.domain.models import BodyStrategy, ProxyKind
from nexus_proxy.interception.policy import PolicyRule

from . import (
    Counter,
    IOne,
    ITwo,
    OneTwo,
    ProceedingInterceptor,
    RecordingInterceptor,
    ReturningInterceptor,
    Splitter,
)


class Shape(ABC):
    @abstractmethod
    def area(self) -> float: ...

    def describe(self) -> str:
        return f"area={self.area()}"


class AreaInterceptor:
    def intercept(self, invocation: Invocation) -> None:
        if invocation.method.name == "area":
            invocation.return_value = 4.0
        else:
            invocation.proceed()


class Greeting:
    def __init__(self) -> None:
        self.greeting = self.build()

    def build(self) -> str:
        return "hello"


class Token:
    def __new__(cls, raw: str) -> Token:
        instance = super().__new__(cls)
        instance.raw = raw
        return instance

    def __init__(self, raw: str) -> None:
        self.value = raw.upper()

    def render(self) -> str:
        return self.value


class Locked:
    @final
    def sealed(self) -> str:
        return "sealed"

    def open(self) -> str:
        return "open"


@final
class FinalClass:
    def run(self) -> None:
        return None


class Café:
    def __init__(self) -> None:
        self.orders: list[str] = []

    def commander(self, boisson: str) -> int:
        self.orders.append(boisson)
        return len(self.orders)

    def addition(self) -> str:
        return "à payer"


T = TypeVar("T")


class Box(Generic[T]):
    def __init__(self, item: T) -> None:
        self.item = item

    def get(self) -> T:
        return self.item


def test_class_proxy_is_a_subclass_and_intercepts_methods() -> None:
    log: list[str] = []
    generator = ProxyGenerator()

    proxy = generator.create_class_proxy(
        Counter, [RecordingInterceptor("a", log)], constructor_args=(5,)
    )

    assert isinstance(proxy, Counter)
    assert isinstance(proxy, ProxyTargetAccessor)
    assert proxy.value == 5
    assert proxy.increment(2) == 7
    assert proxy.doubled == 14
    assert log == [
        "a:before:increment",
        "a:after:increment",
        "a:before:doubled",
        "a:after:doubled",
    ]


def test_class_proxy_is_its_own_target_and_exposes_interceptors() -> None:
    interceptor = ProceedingInterceptor()
    proxy = ProxyGenerator().create_class_proxy(Counter, [interceptor])

    assert proxy.proxy_target() is proxy
    assert proxy.proxy_interceptors() == (interceptor,)


def test_constructor_keyword_arguments_reach_the_base_constructor() -> None:
    proxy = ProxyGenerator().create_class_proxy(Counter, [], constructor_kwargs={"start": 3})

    assert proxy.value == 3
    assert proxy.increment() == 4


def test_calls_made_by_the_base_constructor_are_intercepted() -> None:
    proxy = ProxyGenerator().create_class_proxy(Greeting, [ReturningInterceptor("intercepted")])

    assert proxy.greeting == "intercepted"


def test_custom_new_receives_constructor_arguments_only() -> None:
    proxy = ProxyGenerator().create_class_proxy(
        Token, [ProceedingInterceptor()], constructor_args=("abc",)
    )

    assert proxy.raw == "abc"
    assert proxy.render() == "ABC"


def test_final_and_static_members_are_inherited_unchanged() -> None:
    interceptor = ProceedingInterceptor()
    generator = ProxyGenerator()

    locked = generator.create_class_proxy(Locked, [interceptor])
    counter = generator.create_class_proxy(Counter, [interceptor])

    assert locked.sealed() == "sealed"
    assert locked.open() == "open"
    assert counter.zero() == 0
    assert interceptor.members == ["open"]
    plan = getattr(type(locked), PLAN_ATTRIBUTE)
    assert plan.member("sealed") is None
    assert plan.strategy_of("open") is BodyStrategy.INTERCEPTED


def test_abstract_member_without_implementation_raises_when_proceeding() -> None:
    proxy = ProxyGenerator().create_class_proxy(Shape, [ProceedingInterceptor()])

    with pytest.raises(MissingTargetError, match="Shape.area"):
        proxy.area()


def test_abstract_member_can_be_answered_by_an_interceptor() -> None:
    proxy = ProxyGenerator().create_class_proxy(Shape, [AreaInterceptor()])

    assert proxy.describe() == "area=4.0"


def test_abstract_member_rejected_by_the_hook_becomes_an_empty_stub() -> None:
    options = ProxyGenerationOptions(hook=PatternHook(default=False))
    interceptor = ProceedingInterceptor()

    proxy = ProxyGenerator().create_class_proxy(Shape, [interceptor], options=options)

    assert proxy.describe() == "area=None"
    assert interceptor.members == []
    plan = getattr(type(proxy), PLAN_ATTRIBUTE)
    assert plan.strategy_of("area") is BodyStrategy.EMPTY_STUB


def test_hook_decides_which_members_are_intercepted() -> None:
    hook = PatternHook(rules=(PolicyRule("*Counter", include=("increment",)),), default=False)
    interceptor = ProceedingInterceptor()

    proxy = ProxyGenerator().create_class_proxy(
        Counter, [interceptor], options=ProxyGenerationOptions(hook=hook)
    )
    proxy.increment()
    _ = proxy.doubled

    assert interceptor.members == ["increment"]


def test_by_reference_arguments_are_copied_back_to_the_caller() -> None:
    seen: list[tuple[object, ...]] = []

    class Peek:
        def intercept(self, invocation: Invocation) -> None:
            invocation.proceed()
            seen.append(invocation.arguments)

    proxy = ProxyGenerator().create_class_proxy(Splitter, [Peek()])
    head: Ref[str] = Ref()

    assert proxy.split("abc", head) == "bc"
    assert head.value == "a"
    assert seen == [("abc", "a")]


def test_additional_interface_without_implementation_fails_only_when_called() -> None:
    proxy = ProxyGenerator().create_class_proxy(
        Counter, [ProceedingInterceptor()], additional_interfaces=[ITwo]
    )

    assert isinstance(proxy, ITwo)
    assert proxy.increment() == 1
    with pytest.raises(MissingTargetError):
        proxy.two_method()


def test_additional_interface_implemented_by_the_class_forwards_to_it() -> None:
    proxy = ProxyGenerator().create_class_proxy(
        OneTwo, [ProceedingInterceptor()], additional_interfaces=[ITwo]
    )

    assert proxy.two_method() == 2
    assert proxy.one_method() == 1


def test_metadata_of_proxied_members_is_copied_unless_disabled() -> None:
    generator = ProxyGenerator()

    copied = type(generator.create_class_proxy(Counter, []))
    bare = type(
        generator.create_class_proxy(
            Counter, [], options=ProxyGenerationOptions(copy_member_metadata=False)
        )
    )

    assert copied.increment.__name__ == "increment"
    assert copied.increment.__doc__ == Counter.increment.__doc__
    assert copied.increment.__qualname__ == Counter.increment.__qualname__
    assert bare.increment.__name__ == "intercepted"
    assert copied is not bare


def test_plan_describes_the_generated_type() -> None:
    proxy_type = ProxyGenerator().builder.create_class_proxy_type(Counter, [IOne])
    plan = getattr(proxy_type, PLAN_ATTRIBUTE)

    assert plan.kind is ProxyKind.CLASS
    assert plan.bases[0] is Counter
    assert plan.interfaces == (IOne, ProxyTargetAccessor)
    assert plan.member("increment").contributor == "ClassProxyTargetContributor"
    assert plan.member("one_method").contributor == "InterfaceProxyWithoutTargetContributor"
    assert plan.member("proxy_target").contributor == "ProxyInstanceContributor"


def test_interface_target_is_rejected() -> None:
    with pytest.raises(InvalidProxyRequestError, match="is an interface"):
        ProxyGenerator().create_class_proxy(IOne, [])


def test_final_class_is_rejected() -> None:
    with pytest.raises(InvalidProxyRequestError, match="final"):
        ProxyGenerator().create_class_proxy(FinalClass, [])


def test_proxy_of_a_proxy_is_rejected() -> None:
    generator = ProxyGenerator()
    proxy = generator.create_class_proxy(Counter, [])

    with pytest.raises(ProxyOfProxyError, match="existing proxy"):
        generator.builder.create_class_proxy_type(type(proxy))


def test_duplicate_and_non_interface_requests_are_rejected_before_generation() -> None:
    generator = ProxyGenerator()

    with pytest.raises(DuplicateInterfaceError):
        generator.create_class_proxy(Counter, [], additional_interfaces=[IOne, IOne])
    with pytest.raises(InvalidProxyRequestError, match="not an interface"):
        generator.create_class_proxy(Counter, [], additional_interfaces=[OneTwo])
    with pytest.raises(GenericTypeDefinitionError):
        generator.create_class_proxy(list[int], [])

    assert len(generator.scope) == 0


def test_interceptors_must_implement_intercept() -> None:
    with pytest.raises(TypeError, match=r"interceptors\[0\]"):
        ProxyGenerator().create_class_proxy(Counter, [object()])  # type: ignore[list-item]


def test_class_with_non_ascii_names_is_proxied() -> None:
    log: list[str] = []

    proxy = ProxyGenerator().create_class_proxy(Café, [RecordingInterceptor("a", log)])

    assert type(proxy).__qualname__ == "CaféProxy"
    assert proxy.commander("thé") == 1
    assert proxy.addition() == "à payer"
    assert proxy.orders == ["thé"]
    assert log == [
        "a:before:commander",
        "a:after:commander",
        "a:before:addition",
        "a:after:addition",
    ]


def test_bare_generic_class_is_proxied_and_its_aliases_are_rejected() -> None:
    generator = ProxyGenerator()
    log: list[str] = []

    proxy = generator.create_class_proxy(
        Box, [RecordingInterceptor("a", log)], constructor_args=("parcel",)
    )

    assert isinstance(proxy, Box)
    assert proxy.get() == "parcel"
    assert log == ["a:before:get", "a:after:get"]
    with pytest.raises(GenericTypeDefinitionError, match="generic alias"):
        generator.create_class_proxy(Box[int], [], constructor_args=(1,))
    assert len(generator.scope) == 1
