"""Proxy type synthesis: options, scope, member bodies and the per-shape generators."""

from nexus_proxy.generators.base import BaseProxyGenerator
from nexus_proxy.generators.builder import DefaultProxyBuilder
from nexus_proxy.generators.class_proxy import ClassProxyGenerator
from nexus_proxy.generators.emitter import ProxyTypeBuilder
from nexus_proxy.generators.interface_proxy import (
    InterfaceProxyGenerator,
    InterfaceProxyWithoutTargetGenerator,
    InterfaceProxyWithTargetGenerator,
    InterfaceProxyWithTargetInterfaceGenerator,
)
from nexus_proxy.generators.methods import generate_member_body
from nexus_proxy.generators.options import MixinData, ProxyGenerationOptions
from nexus_proxy.generators.scope import ProxyScope

__all__ = [
    "BaseProxyGenerator",
    "ClassProxyGenerator",
    "DefaultProxyBuilder",
    "InterfaceProxyGenerator",
    "InterfaceProxyWithTargetGenerator",
    "InterfaceProxyWithTargetInterfaceGenerator",
    "InterfaceProxyWithoutTargetGenerator",
    "MixinData",
    "ProxyGenerationOptions",
    "ProxyScope",
    "ProxyTypeBuilder",
    "generate_member_body",
]
