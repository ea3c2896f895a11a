"""
nexus-proxy — unit tests for interface precedence

File: tests/unit/generators/test_precedence.py
Last updated: 2026-10-19

Purpose
- Verify which contributor implements each interface of a proxy type.

What this test file should cover
- Mixins back interfaces nothing else implements.
- The target wins over a mixin for interfaces it implements.
- Collisions on the infrastructure interface are diagnosed per source.
"""

from __future__ import annotations

import pytest

from nexus_proxy import (
    InfrastructureCollisionError,
    InvalidProxyRequestError,
    ProxyGenerationOptions,
    ProxyGenerator,
    ProxyTargetAccessor,
)
from nexus_proxy.constants import MIXIN_FIELDS_ATTRIBUTE, PLAN_ATTRIBUTE

from . import (
    Audit,
    Counter,
    IAudit,
    IOne,
    One,
    OneAudit,
    ProceedingInterceptor,
    RecordingInterceptor,
)


class AuditedCounter(Counter, IAudit):
    def audit(self) -> str:
        return "own"


class AccessorMixin(ProxyTargetAccessor):
    def proxy_target(self) -> object:
        return self

    def proxy_interceptors(self) -> tuple[object, ...]:
        return ()


def _mixins(*instances: object) -> ProxyGenerationOptions:
    return ProxyGenerationOptions(mixins=list(instances))


def test_mixin_backs_an_interface_of_a_class_proxy() -> None:
    log: list[str] = []
    mixin = Audit()

    proxy = ProxyGenerator().create_class_proxy(
        Counter, [RecordingInterceptor("a", log)], options=_mixins(mixin)
    )

    assert isinstance(proxy, IAudit)
    assert proxy.audit() == "mixin"
    assert log == ["a:before:audit", "a:after:audit"]
    fields = getattr(type(proxy), MIXIN_FIELDS_ATTRIBUTE)
    assert list(fields.values()) == [IAudit]
    assert object.__getattribute__(proxy, next(iter(fields))) is mixin


def test_mixin_backs_an_interface_of_an_interface_proxy() -> None:
    proxy = ProxyGenerator().create_interface_proxy_with_target(
        IOne, One(), [ProceedingInterceptor()], options=_mixins(Audit())
    )

    assert proxy.one_method() == 3
    assert proxy.audit() == "mixin"
    plan = getattr(type(proxy), PLAN_ATTRIBUTE)
    assert plan.member("audit").contributor == "MixinContributor"


def test_class_target_wins_over_mixin_for_requested_interface() -> None:
    proxy = ProxyGenerator().create_class_proxy(
        AuditedCounter,
        [ProceedingInterceptor()],
        additional_interfaces=[IAudit],
        options=_mixins(Audit()),
    )

    assert proxy.audit() == "own"
    plan = getattr(type(proxy), PLAN_ATTRIBUTE)
    assert plan.member("audit").contributor == "ClassProxyTargetContributor"


def test_class_target_keeps_its_members_when_mixin_interface_is_not_requested() -> None:
    proxy = ProxyGenerator().create_class_proxy(
        AuditedCounter, [ProceedingInterceptor()], options=_mixins(Audit())
    )

    assert proxy.audit() == "own"


def test_interface_target_wins_over_mixin_for_requested_interface() -> None:
    proxy = ProxyGenerator().create_interface_proxy_with_target(
        IOne,
        OneAudit(),
        [ProceedingInterceptor()],
        additional_interfaces=[IAudit],
        options=_mixins(Audit()),
    )

    assert proxy.one_method() == 11
    assert proxy.audit() == "target"


def test_mixin_on_a_proxy_without_target_is_reached() -> None:
    proxy = ProxyGenerator().create_interface_proxy_without_target(
        IOne, [ProceedingInterceptor()], additional_interfaces=[IAudit], options=_mixins(Audit())
    )

    assert proxy.audit() == "mixin"


def test_mixins_implementing_the_same_interface_are_rejected() -> None:
    with pytest.raises(InvalidProxyRequestError, match="same interface"):
        _mixins(Audit(), Audit())


def test_mixin_implementing_the_infrastructure_interface_is_diagnosed() -> None:
    with pytest.raises(InfrastructureCollisionError, match="mixin type"):
        ProxyGenerator().create_class_proxy(Counter, [], options=_mixins(AccessorMixin()))


def test_infrastructure_interface_as_additional_interface_is_diagnosed() -> None:
    generator = ProxyGenerator()

    with pytest.raises(InfrastructureCollisionError, match="additional interface"):
        generator.create_class_proxy(Counter, [], additional_interfaces=[ProxyTargetAccessor])
    with pytest.raises(InfrastructureCollisionError, match="additional interface"):
        generator.create_interface_proxy_without_target(
            IOne, [], additional_interfaces=[ProxyTargetAccessor]
        )

    assert len(generator.scope) == 0


def test_interfaces_are_listed_in_precedence_order() -> None:
    proxy_type = ProxyGenerator().builder.create_interface_proxy_type_with_target(
        IOne, [IAudit], One, _mixins(Audit())
    )

    plan = getattr(proxy_type, PLAN_ATTRIBUTE)
    assert plan.interfaces == (IOne, IAudit, ProxyTargetAccessor)
