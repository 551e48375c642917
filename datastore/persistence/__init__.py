"""
Persistent store implementations for datastore.

This subpackage contains the PersistentStore contract and its backends
(in-memory, SQLite, Redis).
"""

from .base import PersistentStore
from .memory import InMemoryPersistentStore
from .sqlite import SQLitePersistentStore
from .redis import RedisPersistentStore

__all__ = [
    "PersistentStore",
    "InMemoryPersistentStore",
    "SQLitePersistentStore",
    "RedisPersistentStore",
]
