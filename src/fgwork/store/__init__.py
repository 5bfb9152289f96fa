"""Durable key-value stores for queue snapshots.

Public API:
- Store: Abstract async key -> string store
- FileStore: Single JSON file on disk
- MemoryStore: Dict-backed, process lifetime only
- NullStore: Bypass mode, drops writes and never finds a key
- create_store: Build the store named by configuration
"""

from fgwork.config.models import StoreConfig
from fgwork.store.base import Store, StoreError, StoreNotInitializedError
from fgwork.store.file import FileStore
from fgwork.store.memory import MemoryStore, NullStore


def create_store(config: StoreConfig) -> Store:
    """Create a store for the configured backend."""
    if config.backend == "file":
        return FileStore(config.path)
    if config.backend == "memory":
        return MemoryStore()
    return NullStore()


__all__ = [
    "FileStore",
    "MemoryStore",
    "NullStore",
    "Store",
    "StoreError",
    "StoreNotInitializedError",
    "create_store",
]
