"""Stable constants shared across the proxy generation layers."""

from __future__ import annotations

from typing import Final

# Schema versions for persisted contracts.
CONFIG_SCHEMA_VERSION: Final[int] = 1
POLICY_SCHEMA_VERSION: Final[int] = 1

# Naming of synthesized types.
DEFAULT_PROXY_MODULE: Final[str] = "nexus_proxy.proxies"
DEFAULT_CONFIG_FILENAME: Final[str] = "nexus_proxy.toml"
ENV_PREFIX: Final[str] = "NEXUS_PROXY_"
DEFAULT_PROXY_TYPE_SUFFIX: Final[str] = "Proxy"
SELECTOR_TOKEN_PREFIX: Final[str] = "token_"
MIXIN_FIELD_PREFIX: Final[str] = "__mixin_"

# Per-instance state stored on every proxy.
INTERCEPTORS_FIELD: Final[str] = "__interceptors__"
TARGET_FIELD: Final[str] = "__target__"
SELECTED_INTERCEPTORS_FIELD: Final[str] = "__selected_interceptors__"
SELECTOR_FIELD: Final[str] = "__selector__"

# Static state finalized on every proxy class.
OPTIONS_ATTRIBUTE: Final[str] = "__proxy_options__"
PLAN_ATTRIBUTE: Final[str] = "__proxy_plan__"
MIXIN_FIELDS_ATTRIBUTE: Final[str] = "__proxy_mixin_fields__"

# Metric names recorded by the proxy scope.
METRIC_CACHE_HITS: Final[str] = "proxy_cache_hits_total"
METRIC_CACHE_MISSES: Final[str] = "proxy_cache_misses_total"
METRIC_TYPES_GENERATED: Final[str] = "proxy_types_generated_total"
METRIC_GENERATION_SECONDS: Final[str] = "proxy_generation_seconds"
METRIC_CACHE_ENTRIES: Final[str] = "proxy_cache_entries"

__all__ = [
    "CONFIG_SCHEMA_VERSION",
    "DEFAULT_CONFIG_FILENAME",
    "DEFAULT_PROXY_MODULE",
    "DEFAULT_PROXY_TYPE_SUFFIX",
    "ENV_PREFIX",
    "INTERCEPTORS_FIELD",
    "METRIC_CACHE_ENTRIES",
    "METRIC_CACHE_HITS",
    "METRIC_CACHE_MISSES",
    "METRIC_GENERATION_SECONDS",
    "METRIC_TYPES_GENERATED",
    "MIXIN_FIELDS_ATTRIBUTE",
    "MIXIN_FIELD_PREFIX",
    "OPTIONS_ATTRIBUTE",
    "PLAN_ATTRIBUTE",
    "POLICY_SCHEMA_VERSION",
    "SELECTED_INTERCEPTORS_FIELD",
    "SELECTOR_FIELD",
    "SELECTOR_TOKEN_PREFIX",
    "TARGET_FIELD",
]
