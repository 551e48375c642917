"""
datastore - Write-back LRU cache over a durable key-value store
===============================================================

A bounded in-memory cache that evicts least recently used entries and writes
changed entries to durable storage before they leave memory.
"""

__version__ = "0.1.0"

from .exceptions import (
    DataStoreError,
    ConfigurationError,
    PersistenceError,
    StoreUnavailableError,
    LoadError,
    SaveError,
    ValidationError,
    CacheClosedError
)
from .cache import CacheStore, CacheStats, StoreFailure, RecencyList, DirtyTracker, Entry
from .persistence import (
    PersistentStore,
    InMemoryPersistentStore,
    SQLitePersistentStore,
    RedisPersistentStore
)
from .config import DataStoreConfig
from .factory import create_persistent_store, open_datastore

__all__ = [
    "CacheStore",
    "CacheStats",
    "StoreFailure",
    "RecencyList",
    "DirtyTracker",
    "Entry",
    "PersistentStore",
    "InMemoryPersistentStore",
    "SQLitePersistentStore",
    "RedisPersistentStore",
    "DataStoreConfig",
    "create_persistent_store",
    "open_datastore",
    # Exceptions
    "DataStoreError",
    "ConfigurationError",
    "PersistenceError",
    "StoreUnavailableError",
    "LoadError",
    "SaveError",
    "ValidationError",
    "CacheClosedError"
]
