"""Namespace assembly of proxy types and the member body dispatcher."""

from __future__ import annotations

from typing import Any

import pytest

from nexus_proxy import Out, ProxyGenerationOptions
from nexus_proxy.constants import OPTIONS_ATTRIBUTE, PLAN_ATTRIBUTE
from nexus_proxy.contributors.base import TargetBinding
from nexus_proxy.domain.errors import ProxyGenerationError
from nexus_proxy.domain.members import AccessorRole, MethodInfo, find_member
from nexus_proxy.domain.models import BodyStrategy, MethodToGenerate, ProxyKind
from nexus_proxy.domain.naming import NamingScope
from nexus_proxy.generators.emitter import ProxyTypeBuilder
from nexus_proxy.generators.methods import build_empty_stub, generate_member_body
from nexus_proxy.interception.invocation import ClassMethodInvocation

from . import Counter, IOne


def _forward(proxy: object, member: MethodInfo, args: Any, kwargs: Any) -> Any:
    return member.invoke_declared(proxy, args, kwargs)


_BINDING = TargetBinding(
    invocation_type=ClassMethodInvocation,
    resolve_target=lambda proxy: proxy,
    forward=_forward,
)


def _builder(*bases: type, scope: NamingScope | None = None) -> ProxyTypeBuilder:
    return ProxyTypeBuilder(
        type_name="tests.generated.SampleProxy",
        kind=ProxyKind.CLASS,
        bases=bases,
        interfaces=(),
        options=ProxyGenerationOptions(),
        naming_scope=scope if scope is not None else NamingScope(),
    )


def _increment(*, accepted: bool) -> MethodToGenerate:
    member = find_member(Counter, "increment")
    assert member is not None
    info = member.accessor(AccessorRole.CALL)
    assert info is not None
    return MethodToGenerate(info, True, object(), info, accepted)


def test_first_contributor_owns_a_name() -> None:
    builder = _builder(Counter)

    builder.add_method(_increment(accepted=True), _BINDING, contributor="First")
    builder.add_method(_increment(accepted=False), _BINDING, contributor="Second")
    proxy_type = builder.build()

    assert builder.owner_of("increment") == "First"
    plan = getattr(proxy_type, PLAN_ATTRIBUTE)
    assert plan.member("increment").contributor == "First"
    assert plan.strategy_of("increment") is BodyStrategy.INTERCEPTED


def test_claimed_names_stay_inherited() -> None:
    builder = _builder(Counter)

    builder.claim(["increment"], contributor="Inherited")
    builder.add_method(_increment(accepted=True), _BINDING, contributor="Other")
    proxy_type = builder.build()

    assert "increment" not in vars(proxy_type)
    assert proxy_type.increment is Counter.increment
    assert getattr(proxy_type, PLAN_ATTRIBUTE).member("increment") is None


def test_functions_can_override_an_owned_name() -> None:
    builder = _builder(Counter)

    def increment(self: object, step: int = 1) -> int:
        return -1

    builder.add_method(_increment(accepted=True), _BINDING, contributor="First")
    builder.add_function("increment", increment, contributor="Infra", override=True)
    builder.add_attribute("marker", 42)
    proxy_type = builder.build()

    assert builder.owner_of("increment") == "Infra"
    assert proxy_type.increment is increment
    assert proxy_type.marker == 42
    assert getattr(proxy_type, OPTIONS_ATTRIBUTE) == ProxyGenerationOptions()


def test_type_names_come_from_the_dotted_type_name() -> None:
    proxy_type = _builder(Counter).build()

    assert proxy_type.__module__ == "tests.generated"
    assert proxy_type.__qualname__ == "SampleProxy"
    assert proxy_type.__name__ == "SampleProxy"
    assert issubclass(proxy_type, Counter)


def test_tokens_are_unique_within_a_naming_scope() -> None:
    scope = NamingScope()
    first = _builder(Counter, scope=scope)
    second = _builder(Counter, scope=scope)

    first.add_method(_increment(accepted=True), _BINDING, contributor="A")
    second.add_method(_increment(accepted=True), _BINDING, contributor="A")

    tokens = {
        getattr(item.build(), PLAN_ATTRIBUTE).member("increment").token for item in (first, second)
    }
    assert tokens == {"token_increment", "token_increment_1"}


def test_build_runs_once() -> None:
    builder = _builder(Counter)
    builder.build()

    with pytest.raises(ProxyGenerationError, match="already built"):
        builder.build()


def test_abstract_members_left_without_a_body_are_a_generation_defect() -> None:
    with pytest.raises(ProxyGenerationError, match="one_method"):
        _builder(IOne).build()


def test_empty_stub_resets_out_arguments() -> None:
    stub = build_empty_stub()
    positional: Out[int] = Out(1)
    keyword: Out[str] = Out("x")

    assert stub(object(), positional, 2, result=keyword) is None
    assert positional.value is None
    assert keyword.value is None


def test_static_members_can_only_be_stubbed() -> None:
    def helper() -> int:
        return 1

    info = MethodInfo(
        name="helper",
        role=AccessorRole.CALL,
        declaring_type=Counter,
        function=helper,
        is_abstract=True,
        is_virtual=False,
        wrapper=staticmethod,
    )
    stubbed = MethodToGenerate(info, True, None, info, False)
    intercepted = MethodToGenerate(info, True, None, info, True)
    options = ProxyGenerationOptions()

    body = generate_member_body(stubbed, _BINDING, options, "token_helper")
    assert isinstance(body, staticmethod)
    assert body.__func__() is None
    with pytest.raises(ProxyGenerationError, match="can only be stubbed"):
        generate_member_body(intercepted, _BINDING, options, "token_helper")


def test_direct_forward_bodies_skip_interception() -> None:
    body = generate_member_body(
        _increment(accepted=False), _BINDING, ProxyGenerationOptions(), "token_increment"
    )
    counter = Counter(2)

    assert body(counter, 3) == 5
    assert body.__name__ == "increment"
