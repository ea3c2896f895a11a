"""
nexus-proxy — runtime proxy generation with interceptor chains.

File: src/nexus_proxy/__init__.py
Last updated: 2026-10-19

Purpose
- Package root. Defines the public API: proxy generator, options, interception
  contracts, member descriptors and errors.

Functional requirements
- Must not have side effects at import time (no config loading, no logging init).
"""

from nexus_proxy.domain.descriptors import Out, Ref, event
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
from nexus_proxy.domain.models import BodyStrategy, ProxyKind, ProxyTypePlan
from nexus_proxy.domain.naming import NamingScope
from nexus_proxy.generators.builder import DefaultProxyBuilder
from nexus_proxy.generators.options import MixinData, ProxyGenerationOptions
from nexus_proxy.generators.scope import ProxyScope
from nexus_proxy.interception.hooks import AllMethodsHook, DefaultReturnPolicy, ProxyGenerationHook
from nexus_proxy.interception.interceptors import (
    Interceptor,
    InterceptorSelector,
    StandardInterceptor,
)
from nexus_proxy.interception.invocation import ChangeableTargetInvocation, Invocation
from nexus_proxy.interception.policy import PatternHook, load_policy_hook
from nexus_proxy.proxy_generator import ProxyGenerator

__version__ = "0.1.0"

__all__ = [
    "AllMethodsHook",
    "BodyStrategy",
    "ChangeableTargetInvocation",
    "DefaultProxyBuilder",
    "DefaultReturnPolicy",
    "DuplicateInterfaceError",
    "GenericTypeDefinitionError",
    "InfrastructureCollisionError",
    "Interceptor",
    "InterceptorSelector",
    "InvalidProxyRequestError",
    "Invocation",
    "InvocationStateError",
    "MissingTargetError",
    "MixinData",
    "NamingScope",
    "Out",
    "PatternHook",
    "ProxyError",
    "ProxyGenerationError",
    "ProxyGenerationHook",
    "ProxyGenerationOptions",
    "ProxyGenerator",
    "ProxyKind",
    "ProxyOfProxyError",
    "ProxyScope",
    "ProxyTargetAccessor",
    "ProxyTypePlan",
    "Ref",
    "StandardInterceptor",
    "__version__",
    "event",
    "load_policy_hook",
]
