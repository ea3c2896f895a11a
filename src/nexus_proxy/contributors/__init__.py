"""Contributor pipeline: member collection and interface ownership for proxy types."""

from nexus_proxy.contributors.base import (
    CompositeTypeContributor,
    TargetBinding,
    TypeContributor,
)
from nexus_proxy.contributors.class_target import ClassProxyTargetContributor
from nexus_proxy.contributors.collectors import (
    ClassMembersCollector,
    InterfaceMembersCollector,
    InterfaceMembersOnTargetCollector,
    MembersCollector,
)
from nexus_proxy.contributors.instance import ProxyInstanceContributor
from nexus_proxy.contributors.interface_target import (
    InterfaceProxyTargetContributor,
    proxy_target,
    target_if_implements,
)
from nexus_proxy.contributors.mapping import TypeImplementerMapping
from nexus_proxy.contributors.mixins import MixinContributor
from nexus_proxy.contributors.without_target import InterfaceProxyWithoutTargetContributor

__all__ = [
    "ClassMembersCollector",
    "ClassProxyTargetContributor",
    "CompositeTypeContributor",
    "InterfaceMembersCollector",
    "InterfaceMembersOnTargetCollector",
    "InterfaceProxyTargetContributor",
    "InterfaceProxyWithoutTargetContributor",
    "MembersCollector",
    "MixinContributor",
    "ProxyInstanceContributor",
    "TargetBinding",
    "TypeContributor",
    "TypeImplementerMapping",
    "proxy_target",
    "target_if_implements",
]
