"""
nexus-proxy — module skeleton

File: src/nexus_proxy/domain/__init__.py
Last updated: 2026-10-19

Purpose
- Domain types shared by collectors, contributors and generators: member
  descriptions, generation decisions, cache keys, naming scopes, errors.

What should be included in this file
- Re-export of core domain entities for convenience.
- Keep domain layer free of IO side effects.

Non-functional requirements
- Domain layer should have minimal dependencies.
"""

from nexus_proxy.domain.descriptors import BoundEvent, Out, Ref, event
from nexus_proxy.domain.errors import (
    DuplicateInterfaceError,
    GenericTypeDefinitionError,
    InfrastructureCollisionError,
    InvalidProxyRequestError,
    InvocationStateError,
    MissingTargetError,
    ProxyError,
    ProxyGenerationError,
    ProxyOfProxyError,
)
from nexus_proxy.domain.infrastructure import ProxyTargetAccessor
from nexus_proxy.domain.members import (
    AccessorRole,
    DeclaredMember,
    MemberKind,
    MethodInfo,
    declared_members,
)
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
from nexus_proxy.domain.naming import NamingScope

__all__ = [
    "AccessorRole",
    "BodyStrategy",
    "BoundEvent",
    "CacheKey",
    "DeclaredMember",
    "DuplicateInterfaceError",
    "EventToGenerate",
    "GenericTypeDefinitionError",
    "InfrastructureCollisionError",
    "InvalidProxyRequestError",
    "InvocationStateError",
    "MemberKind",
    "MethodInfo",
    "MethodToGenerate",
    "MissingTargetError",
    "NamingScope",
    "Out",
    "PlannedMember",
    "PropertyToGenerate",
    "ProxyError",
    "ProxyGenerationError",
    "ProxyKind",
    "ProxyOfProxyError",
    "ProxyTargetAccessor",
    "ProxyTypePlan",
    "Ref",
    "declared_members",
    "event",
]
