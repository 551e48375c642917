from typing import Any, Callable, Optional

from datastore.cache.store import CacheStore, StoreFailure
from datastore.config import DataStoreConfig
from datastore.persistence.base import PersistentStore
from datastore.persistence.memory import InMemoryPersistentStore
from datastore.persistence.redis import RedisPersistentStore
from datastore.persistence.sqlite import SQLitePersistentStore

def create_persistent_store(config: DataStoreConfig) -> PersistentStore:
    """
    Build the persistent store named by ``config.backend``.

    Raises:
        StoreUnavailableError: If the backend cannot be opened or reached.
    """
    if config.backend == "sqlite":
        return SQLitePersistentStore(db_path=config.db_path, table_name=config.table_name)
    if config.backend == "redis":
        return RedisPersistentStore.from_url(config.redis_url, key_prefix=config.key_prefix)
    return InMemoryPersistentStore()

def open_datastore(
    config: Optional[DataStoreConfig] = None,
    on_failure: Optional[Callable[[StoreFailure], Any]] = None,
) -> CacheStore:
    """
    Open a CacheStore backed by the configured persistent store.

    Args:
        config: Settings to use; read from the environment when omitted.
        on_failure: Optional callback for persistent store failures.
    Returns:
        A CacheStore that owns its persistent store.
    """
    config = config or DataStoreConfig.from_env()
    return CacheStore(
        capacity=config.capacity,
        backing_store=create_persistent_store(config),
        max_recorded_failures=config.max_recorded_failures,
        on_failure=on_failure,
    )
