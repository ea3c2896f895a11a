"""Infrastructure interface implemented by every synthesized proxy."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ProxyTargetAccessor(ABC):
    """Marker interface giving access to a proxy's target and interceptors.

    Every proxy implements it. User types must never implement it themselves;
    doing so is how a proxy-of-a-proxy request is detected.
    """

    @abstractmethod
    def proxy_target(self) -> Any:
        """Return the object calls are forwarded to (the proxy itself for class proxies)."""

    @abstractmethod
    def proxy_interceptors(self) -> tuple[Any, ...]:
        """Return the default interceptors attached to this proxy instance."""


__all__ = ["ProxyTargetAccessor"]
