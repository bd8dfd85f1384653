"""Directory adapters - Accounts, groups, account properties and user config."""

from .memory import (
    InMemoryAccount,
    InMemoryAccountBackend,
    InMemoryAccountPropertyStore,
    InMemoryGroupManager,
    InMemoryUserConfig,
)

__all__ = [
    "InMemoryAccount",
    "InMemoryAccountBackend",
    "InMemoryAccountPropertyStore",
    "InMemoryGroupManager",
    "InMemoryUserConfig",
]
