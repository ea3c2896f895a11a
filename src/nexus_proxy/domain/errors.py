"""Error taxonomy for proxy generation and proxied calls."""

from __future__ import annotations


class ProxyError(Exception):
    """Base error for every failure raised by nexus-proxy."""


class InvalidProxyRequestError(ProxyError, ValueError):
    """Raised before any synthesis work when a proxy request is malformed."""


class GenericTypeDefinitionError(InvalidProxyRequestError):
    """Raised when a subscripted generic alias is passed where a class is expected."""


class DuplicateInterfaceError(InvalidProxyRequestError):
    """Raised when one interface is requested or registered twice."""


class ProxyOfProxyError(InvalidProxyRequestError):
    """Raised when the proxied type already implements the infrastructure interface."""


class InfrastructureCollisionError(InvalidProxyRequestError):
    """Raised when user interfaces claim the infrastructure interface slot."""


class ProxyGenerationError(ProxyError, RuntimeError):
    """Raised when synthesis itself fails; always a programming defect."""


class MissingTargetError(ProxyError, NotImplementedError):
    """Raised at call time when the interceptor chain runs out without a target."""


class InvocationStateError(ProxyError, RuntimeError):
    """Raised when an invocation is driven outside its allowed lifecycle."""


__all__ = [
    "DuplicateInterfaceError",
    "GenericTypeDefinitionError",
    "InfrastructureCollisionError",
    "InvalidProxyRequestError",
    "InvocationStateError",
    "MissingTargetError",
    "ProxyError",
    "ProxyGenerationError",
    "ProxyOfProxyError",
]
