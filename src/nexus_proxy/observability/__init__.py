"""Public observability primitives: structured logging and metrics."""

from nexus_proxy.observability.logging import (
    LoggingConfig,
    LoggingHandle,
    correlation_scope,
    flush_logging,
    get_active_logging_handle,
    get_correlation_context,
    setup_logging,
    setup_structured_logging,
    shutdown_logging,
)
from nexus_proxy.observability.metrics import MetricsRegistry

__all__ = [
    "LoggingConfig",
    "LoggingHandle",
    "MetricsRegistry",
    "correlation_scope",
    "flush_logging",
    "get_active_logging_handle",
    "get_correlation_context",
    "setup_logging",
    "setup_structured_logging",
    "shutdown_logging",
]
