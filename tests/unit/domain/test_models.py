"""Unit tests for core domain models."""

from __future__ import annotations

import dataclasses

import pytest

from nexus_proxy.domain.members import AccessorRole, MemberKind, MethodInfo, find_member
from nexus_proxy.domain.models import (
    BodyStrategy,
    CacheKey,
    EventToGenerate,
    MethodToGenerate,
    PlannedMember,
    PropertyToGenerate,
    ProxyKind,
    ProxyTypePlan,
)


class Sample:
    def run(self) -> None:
        return None

    @property
    def size(self) -> int:
        return 1


def _info(name: str = "run", role: AccessorRole = AccessorRole.CALL) -> MethodInfo:
    return MethodInfo(name=name, role=role, declaring_type=Sample)


@pytest.mark.parametrize(
    ("accepted", "target", "expected"),
    [
        (True, object(), BodyStrategy.INTERCEPTED),
        (True, None, BodyStrategy.INTERCEPTED),
        (False, object(), BodyStrategy.DIRECT_FORWARD),
        (False, None, BodyStrategy.EMPTY_STUB),
    ],
)
def test_body_strategy_follows_acceptance_and_target(
    accepted: bool, target: object | None, expected: BodyStrategy
) -> None:
    info = _info()
    method = MethodToGenerate(info, True, target, info, accepted)

    assert method.strategy is expected
    assert method.proxyable is accepted
    assert method.name == "run"
    assert method.role is AccessorRole.CALL


def test_models_are_frozen() -> None:
    info = _info()
    method = MethodToGenerate(info, True, None, info, True)

    with pytest.raises(dataclasses.FrozenInstanceError):
        method.accepted = False  # type: ignore[misc]
    with pytest.raises(dataclasses.FrozenInstanceError):
        info.name = "other"  # type: ignore[misc]


def test_method_info_equality_ignores_the_function_object() -> None:
    assert MethodInfo("run", AccessorRole.CALL, Sample, function=Sample.run) == _info()
    assert _info() != _info(role=AccessorRole.GET)
    assert hash(_info()) == hash(MethodInfo("run", AccessorRole.CALL, Sample, function=print))


def test_property_and_event_groupings_expose_their_parts() -> None:
    member = find_member(Sample, "size")
    assert member is not None
    getter_info = member.accessor(AccessorRole.GET)
    assert getter_info is not None
    getter = MethodToGenerate(getter_info, False, None, getter_info, True)

    item = PropertyToGenerate(member, getter, None)
    grouped_event = EventToGenerate(member, None, None)

    assert item.name == "size"
    assert item.can_read
    assert not item.can_write
    assert grouped_event.name == "size"


def test_cache_keys_compare_by_value_and_keep_interface_order() -> None:
    first = CacheKey.build(Sample, [int, str], "options", kind=ProxyKind.CLASS)
    same = CacheKey.build(Sample, (int, str), "options", kind=ProxyKind.CLASS)
    reordered = CacheKey.build(Sample, [str, int], "options", kind=ProxyKind.CLASS)
    other_kind = CacheKey.build(
        Sample, [int, str], "options", kind=ProxyKind.INTERFACE_WITH_TARGET
    )
    with_target = CacheKey.build(
        Sample,
        [int, str],
        "options",
        kind=ProxyKind.INTERFACE_WITH_TARGET,
        proxy_target_type=bool,
    )

    assert first == same
    assert hash(first) == hash(same)
    assert first.interfaces == (int, str)
    assert len({first, same, reordered, other_kind, with_target}) == 4
    assert CacheKey.build(Sample, None, "options", kind=ProxyKind.CLASS).interfaces == ()


def test_plan_lookups() -> None:
    planned = PlannedMember(
        name="size",
        kind=MemberKind.PROPERTY,
        declaring_type=Sample,
        contributor="ClassProxyTargetContributor",
        strategies=(
            (AccessorRole.GET, BodyStrategy.INTERCEPTED),
            (AccessorRole.SET, BodyStrategy.EMPTY_STUB),
        ),
        token="token_size",
    )
    plan = ProxyTypePlan(
        type_name="tests.SampleProxy",
        kind=ProxyKind.CLASS,
        bases=(Sample,),
        interfaces=(),
        members=(planned,),
    )

    assert plan.member("size") is planned
    assert plan.member("run") is None
    assert plan.strategy_of("size", AccessorRole.GET) is BodyStrategy.INTERCEPTED
    assert plan.strategy_of("size", AccessorRole.SET) is BodyStrategy.EMPTY_STUB
    assert plan.strategy_of("size") is None
    assert plan.strategy_of("run") is None
