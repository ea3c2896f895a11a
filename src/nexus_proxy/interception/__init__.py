"""Runtime interception model: invocations, interceptors, hooks and selectors."""

from nexus_proxy.interception.hooks import (
    AllMethodsHook,
    DefaultReturnPolicy,
    ProxyGenerationHook,
    has_value_equality,
)
from nexus_proxy.interception.interceptors import (
    Interceptor,
    InterceptorSelector,
    StandardInterceptor,
    validate_interceptors,
)
from nexus_proxy.interception.invocation import (
    ChangeableTargetInvocation,
    ClassMethodInvocation,
    InterfaceMethodInvocation,
    Invocation,
    InvocationState,
)
from nexus_proxy.interception.policy import (
    PatternHook,
    PolicyLoadError,
    PolicyRule,
    load_policy_hook,
    parse_policy_hook,
)

__all__ = [
    "AllMethodsHook",
    "ChangeableTargetInvocation",
    "ClassMethodInvocation",
    "DefaultReturnPolicy",
    "InterceptorSelector",
    "Interceptor",
    "InterfaceMethodInvocation",
    "Invocation",
    "InvocationState",
    "PatternHook",
    "PolicyLoadError",
    "PolicyRule",
    "ProxyGenerationHook",
    "StandardInterceptor",
    "has_value_equality",
    "load_policy_hook",
    "parse_policy_hook",
    "validate_interceptors",
]
