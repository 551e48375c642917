"""
Cache package for datastore.

This package contains the recency ordering, dirty tracking and the
write-back CacheStore built on them.
"""

from .recency import Entry, RecencyList
from .dirty import DirtyTracker
from .store import CacheStore, CacheStats, StoreFailure

__all__ = [
    "Entry",
    "RecencyList",
    "DirtyTracker",
    "CacheStore",
    "CacheStats",
    "StoreFailure",
]
