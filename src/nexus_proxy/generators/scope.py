"""Generation scope: the injectable proxy type cache and everything shared with it."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any

from nexus_proxy.constants import (
    DEFAULT_PROXY_MODULE,
    DEFAULT_PROXY_TYPE_SUFFIX,
    METRIC_CACHE_ENTRIES,
)
from nexus_proxy.domain.models import CacheKey
from nexus_proxy.domain.naming import NamingScope
from nexus_proxy.observability.metrics import MetricsRegistry
from nexus_proxy.utils.concurrency import UpgradeableReadWriteLock

logger = logging.getLogger(__name__)


class ProxyScope:
    """Holds synthesized proxy types for the lifetime of the scope.

    Callers create one scope and pass it to every generator; there is no global
    cache. Entries are never evicted. Reads and writes of the cache must happen
    under :attr:`lock`; :class:`~nexus_proxy.generators.base.BaseProxyGenerator`
    takes care of that.
    """

    def __init__(
        self,
        *,
        module_name: str = DEFAULT_PROXY_MODULE,
        type_suffix: str = DEFAULT_PROXY_TYPE_SUFFIX,
        naming_scope: NamingScope | None = None,
        metrics: MetricsRegistry | None = None,
        cache: MutableMapping[CacheKey, type] | None = None,
        warn_on_identity_equality: bool = True,
    ) -> None:
        self._module_name = module_name
        self._type_suffix = type_suffix
        self._naming_scope = naming_scope if naming_scope is not None else NamingScope()
        self._metrics = metrics if metrics is not None else MetricsRegistry()
        self._cache: MutableMapping[CacheKey, type] = cache if cache is not None else {}
        self._lock = UpgradeableReadWriteLock()
        self._warn_on_identity_equality = warn_on_identity_equality

    @classmethod
    def from_config(
        cls, config: Mapping[str, Any], *, metrics: MetricsRegistry | None = None
    ) -> ProxyScope:
        """Build a scope from a validated config (see :func:`nexus_proxy.config.load_config`)."""
        naming = config.get("naming", {})
        generation = config.get("generation", {})
        return cls(
            module_name=naming.get("module_name", DEFAULT_PROXY_MODULE),
            type_suffix=naming.get("type_suffix", DEFAULT_PROXY_TYPE_SUFFIX),
            metrics=metrics,
            warn_on_identity_equality=bool(generation.get("warn_on_identity_equality", True)),
        )

    @property
    def module_name(self) -> str:
        return self._module_name

    @property
    def type_suffix(self) -> str:
        return self._type_suffix

    @property
    def naming_scope(self) -> NamingScope:
        return self._naming_scope

    @property
    def metrics(self) -> MetricsRegistry:
        return self._metrics

    @property
    def lock(self) -> UpgradeableReadWriteLock:
        return self._lock

    @property
    def warn_on_identity_equality(self) -> bool:
        return self._warn_on_identity_equality

    def get_from_cache(self, key: CacheKey) -> type | None:
        return self._cache.get(key)

    def register_in_cache(self, key: CacheKey, proxy_type: type) -> None:
        self._cache[key] = proxy_type
        self._metrics.set_gauge(METRIC_CACHE_ENTRIES, float(len(self._cache)))
        logger.debug("cached proxy type %s (%d entries)", proxy_type.__qualname__, len(self._cache))

    def cached_types(self) -> tuple[type, ...]:
        with self._lock.for_reading():
            return tuple(self._cache.values())

    def __len__(self) -> int:
        with self._lock.for_reading():
            return len(self._cache)

    def __repr__(self) -> str:
        return f"ProxyScope(module_name={self._module_name!r}, entries={len(self._cache)})"


__all__ = ["ProxyScope"]
