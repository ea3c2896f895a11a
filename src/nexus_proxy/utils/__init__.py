"""Utility exports: concurrency helpers."""

from nexus_proxy.utils.concurrency import UpgradeableLockHandle, UpgradeableReadWriteLock

__all__ = ["UpgradeableLockHandle", "UpgradeableReadWriteLock"]
