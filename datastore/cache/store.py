"""
Write-back LRU cache in front of a persistent store.

CacheStore keeps at most ``capacity`` entries in memory. Writes land in memory
and are marked dirty; a dirty entry is written to the persistent store only
when it is evicted or when the cache is flushed or torn down. Entries loaded
from the store on a miss start out clean, so evicting them costs no write.
"""

import inspect
import weakref
from collections import deque
from dataclasses import dataclass, replace
from typing import Any, Callable, Deque, List, Optional

from datastore.cache.dirty import DirtyTracker
from datastore.cache.recency import Entry, RecencyList
from datastore.exceptions import (
    CacheClosedError,
    ConfigurationError,
    PersistenceError,
    SaveError,
    StoreUnavailableError,
    ValidationError,
)
from datastore.persistence.base import PersistentStore
from datastore.utils.logging import MetricsLogger, get_logger, get_metrics_logger

# Configure logging
logger = get_logger(__name__)

@dataclass(frozen=True)
class StoreFailure:
    """
    A persistent store failure the cache absorbed.

    Attributes:
        operation: 'load', 'save' (eviction write-back) or 'flush'
        key: The key involved, or None for a batched flush
        error: The underlying error
    """
    operation: str
    key: Optional[str]
    error: Exception

@dataclass
class CacheStats:
    """
    Counters for cache activity.

    Attributes:
        hits: Lookups served from memory
        misses: Lookups that went to the persistent store
        loads: Misses that found the key in the persistent store
        evictions: Entries removed to stay within capacity
        write_backs: Dirty entries written on eviction
        flushed_entries: Dirty entries written by flush or teardown
        failed_saves: Write-backs or flushes that failed
        failed_loads: Loads that failed for a reason other than absence
        current_size: Resident entries when the snapshot was taken
        capacity: Maximum resident entries
    """
    hits: int = 0
    misses: int = 0
    loads: int = 0
    evictions: int = 0
    write_backs: int = 0
    flushed_entries: int = 0
    failed_saves: int = 0
    failed_loads: int = 0
    current_size: int = 0
    capacity: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0

    def to_dict(self) -> dict:
        """Convert stats to a dictionary for easy serialization."""
        return {
            'hits': self.hits,
            'misses': self.misses,
            'loads': self.loads,
            'evictions': self.evictions,
            'write_backs': self.write_backs,
            'flushed_entries': self.flushed_entries,
            'failed_saves': self.failed_saves,
            'failed_loads': self.failed_loads,
            'current_size': self.current_size,
            'capacity': self.capacity,
            'hit_rate': self.hit_rate,
        }

class _FailureRecorder:
    """
    Records, counts and logs store failures, then notifies the callback.

    The recorder is handed to the cache's finalizer, so it must not keep the
    cache alive. A bound-method callback is held through a WeakMethod: its
    owner usually holds the cache.
    """

    def __init__(
        self,
        max_recorded: int,
        stats: CacheStats,
        on_failure: Optional[Callable[[StoreFailure], Any]] = None,
    ):
        self.records: Deque[StoreFailure] = deque(maxlen=max_recorded)
        self.stats = stats
        if inspect.ismethod(on_failure):
            self._callback = weakref.WeakMethod(on_failure)
        else:
            self._callback = lambda: on_failure

    @property
    def on_failure(self) -> Optional[Callable[[StoreFailure], Any]]:
        """The callback, or None if none was given or its owner is gone."""
        return self._callback()

    def __call__(self, operation: str, key: Optional[str], error: Exception) -> None:
        failure = StoreFailure(operation, key, error)
        self.records.append(failure)
        if operation == "load":
            self.stats.failed_loads += 1
        else:
            self.stats.failed_saves += 1
        logger.error(f"Persistent store {operation} failed: {error}", extra={
            "operation": operation,
            "cache_key": key,
            "error_type": type(error).__name__,
        })
        callback = self.on_failure
        if callback is not None:
            callback(failure)

def _flush_dirty(
    entries: RecencyList,
    dirty: DirtyTracker,
    backing: PersistentStore,
    report: _FailureRecorder,
    metrics: MetricsLogger,
) -> bool:
    """Write every dirty resident entry in one batch; mark them clean on success."""
    pending: List[Entry] = [entry for entry in entries if dirty.is_dirty(entry.key)]
    if not pending:
        return True

    try:
        committed = backing.flush_batch(pending)
    except PersistenceError as e:
        report("flush", None, e)
        metrics.log_flush(len(pending), success=False)
        return False
    if not committed:
        report("flush", None, SaveError(f"Persistent store did not commit {len(pending)} flushed entries"))
        metrics.log_flush(len(pending), success=False)
        return False

    for entry in pending:
        dirty.mark_clean(entry.key)
    report.stats.flushed_entries += len(pending)
    metrics.log_flush(len(pending), success=True)
    return True

def _teardown(
    entries: RecencyList,
    dirty: DirtyTracker,
    backing: PersistentStore,
    report: _FailureRecorder,
    metrics: MetricsLogger,
) -> bool:
    """Flush dirty entries, then release memory and close the backing store."""
    try:
        return _flush_dirty(entries, dirty, backing, report, metrics)
    finally:
        entries.clear()
        dirty.reset()
        backing.close()

def _validate_key(key: Any) -> None:
    if not isinstance(key, str):
        raise ValidationError(f"Key must be a string, got {type(key).__name__}")

def _validate_value(value: Any) -> None:
    if not isinstance(value, str):
        raise ValidationError(f"Value must be a string, got {type(value).__name__}")

class CacheStore:
    """
    Bounded LRU cache with write-back persistence.

    The cache owns ``backing_store``: closing the cache flushes dirty entries
    and then closes the store. An unclosed cache is torn down the same way
    when it is garbage collected. Not thread-safe; callers sharing an
    instance across threads must serialize access themselves.

    Args:
        capacity: Maximum number of resident entries (0 keeps nothing resident)
        backing_store: Durable store used for misses and write-backs
        max_recorded_failures: How many store failures :attr:`failures` keeps
        on_failure: Optional callback invoked with each StoreFailure. A bound
            method is held weakly; other callables are held strongly and must
            not reference the cache.

    Raises:
        ConfigurationError: If capacity is not a non-negative integer.
        StoreUnavailableError: If no backing store is given.
    """

    def __init__(
        self,
        capacity: int,
        backing_store: PersistentStore,
        max_recorded_failures: int = 100,
        on_failure: Optional[Callable[[StoreFailure], Any]] = None,
    ):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 0:
            raise ConfigurationError(f"Capacity must be a non-negative integer, got {capacity!r}")
        if max_recorded_failures < 1:
            raise ConfigurationError("max_recorded_failures must be at least 1")
        if backing_store is None:
            raise StoreUnavailableError("No persistent store provided")

        self._capacity = capacity
        self._backing = backing_store
        self._entries = RecencyList()
        self._dirty = DirtyTracker()
        self._stats = CacheStats(capacity=capacity)
        self._metrics = get_metrics_logger()
        self._report = _FailureRecorder(max_recorded_failures, self._stats, on_failure)
        self._close_result = True

        # Runs once, on close() or when the cache is garbage collected
        self._finalizer = weakref.finalize(
            self,
            _teardown,
            self._entries,
            self._dirty,
            self._backing,
            self._report,
            self._metrics,
        )

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def backing_store(self) -> PersistentStore:
        return self._backing

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    @property
    def failures(self) -> List[StoreFailure]:
        """Most recent store failures, oldest first."""
        return list(self._report.records)

    @property
    def stats(self) -> CacheStats:
        """A snapshot of the cache counters."""
        return replace(self._stats, current_size=len(self._entries))

    def _check_open(self) -> None:
        if self.closed:
            raise CacheClosedError("Cache store is closed")

    def put(self, key: str, value: str) -> None:
        """
        Store a value, replacing any resident value for the key.

        The entry becomes the most recently used one and is marked dirty. If
        the cache is then over capacity, the least recently used entry is
        evicted, with a write-back if it is dirty.

        Args:
            key: Key to reference the value by
            value: Value to store (the empty string is a valid value)
        """
        self._check_open()
        _validate_key(key)
        _validate_value(value)
        self._insert(key, value, dirty=True)

    def get(self, key: str) -> Optional[str]:
        """
        Get a value, loading it from the persistent store on a miss.

        A hit makes the entry the most recently used one. A value found in the
        persistent store is cached as a clean entry, which may evict another.

        Args:
            key: The key to retrieve

        Returns:
            The value, or None if neither the cache nor the store has it (or
            the store failed to load it; see :attr:`failures`).
        """
        self._check_open()
        _validate_key(key)

        if key in self._entries:
            self._entries.move_to_front(key)
            self._stats.hits += 1
            self._metrics.log_cache_hit(key)
            return self._entries.peek(key)

        self._stats.misses += 1
        self._metrics.log_cache_miss(key)
        try:
            value = self._backing.load(key)
        except PersistenceError as e:
            self._report("load", key, e)
            return None
        if value is None:
            return None

        self._stats.loads += 1
        self._insert(key, value, dirty=False)
        return value

    def contains(self, key: str) -> bool:
        """
        Check whether a key is resident in memory.

        Does not consult the persistent store and does not count as a use.
        """
        self._check_open()
        _validate_key(key)
        return key in self._entries

    def size(self) -> int:
        """Number of resident entries."""
        return len(self._entries)

    def is_dirty(self, key: str) -> bool:
        """Whether a resident key holds a value not yet written to the store."""
        return self._dirty.is_dirty(key)

    def keys(self) -> List[str]:
        """Resident keys from most to least recently used."""
        return self._entries.keys()

    def flush(self) -> bool:
        """
        Write all dirty entries to the persistent store without evicting them.

        Returns:
            bool: True if nothing needed writing or the batch was committed.
                On failure the entries stay dirty and the failure is recorded.
        """
        self._check_open()
        return _flush_dirty(self._entries, self._dirty, self._backing, self._report, self._metrics)

    def close(self) -> bool:
        """
        Flush dirty entries, drop the in-memory state and close the store.

        A failed flush is recorded in :attr:`failures` but does not stop the
        teardown. Calling close() again is a no-op that returns the first
        result.

        Returns:
            bool: True if the final flush succeeded (or was not needed).
        """
        if self.closed:
            return self._close_result
        self._close_result = self._finalizer()
        return self._close_result

    def _insert(self, key: str, value: str, dirty: bool) -> None:
        if key in self._entries:
            self._entries.remove(key)
        self._entries.insert_front(key, value)
        if dirty:
            self._dirty.mark_dirty(key)
        else:
            self._dirty.mark_clean(key)

        while len(self._entries) > self._capacity:
            self._evict(self._entries.remove_least_recent())

    def _evict(self, entry: Entry) -> None:
        was_dirty = self._dirty.is_dirty(entry.key)
        self._dirty.clear(entry.key)
        self._stats.evictions += 1
        self._metrics.log_eviction(entry.key, dirty=was_dirty)
        if was_dirty:
            self._write_back(entry)

    def _write_back(self, entry: Entry) -> None:
        try:
            committed = self._backing.save(entry.key, entry.value)
        except PersistenceError as e:
            self._report("save", entry.key, e)
            self._metrics.log_write_back(entry.key, success=False)
            return
        if not committed:
            self._report("save", entry.key, SaveError(f"Persistent store did not commit key '{entry.key}'"))
            self._metrics.log_write_back(entry.key, success=False)
            return
        self._stats.write_backs += 1
        self._metrics.log_write_back(entry.key, success=True)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"CacheStore(capacity={self._capacity}, size={len(self._entries)}, closed={self.closed})"
