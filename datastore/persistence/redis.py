"""
Redis persistent store implementation for datastore.

Provides durable storage in a Redis server (with persistence enabled on the
server side) for evicted and flushed cache entries.
"""

from typing import Any, Iterable, Optional, Tuple

import redis
from redis.exceptions import RedisError

from datastore.exceptions import LoadError, SaveError, StoreUnavailableError
from datastore.persistence.base import PersistentStore
from datastore.utils.logging import get_logger

# Configure logging
logger = get_logger(__name__)

class RedisPersistentStore(PersistentStore):
    """
    Redis-based persistent store.

    Args:
        redis_client: An instance of redis.Redis or any compatible synchronous client.
        key_prefix: Prefix for stored keys (default: 'datastore:')

    Raises:
        StoreUnavailableError: If the server does not answer a PING.
    """
    def __init__(self, redis_client: Any, key_prefix: str = "datastore:"):
        self.redis = redis_client
        self.key_prefix = key_prefix
        self._owns_client = False
        try:
            self.redis.ping()
        except RedisError as e:
            logger.error("Redis server unreachable", extra={
                "cache_type": "redis",
                "error_type": type(e).__name__,
                "error_message": str(e)
            })
            raise StoreUnavailableError("Failed to reach Redis server", original_exception=e) from e

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "datastore:") -> "RedisPersistentStore":
        """Create a store with its own client, closed along with the store."""
        try:
            client = redis.Redis.from_url(url, decode_responses=True)
        except (RedisError, ValueError) as e:
            raise StoreUnavailableError(f"Invalid Redis URL: {url}", original_exception=e) from e
        try:
            store = cls(client, key_prefix=key_prefix)
        except StoreUnavailableError:
            client.close()
            raise
        store._owns_client = True
        return store

    def _get_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def load(self, key: str) -> Optional[str]:
        """Read the value stored for ``key``, or None if there is none."""
        redis_key = self._get_key(key)
        try:
            value = self.redis.get(redis_key)
        except RedisError as e:
            logger.error("Redis error loading value", extra={
                "cache_key": redis_key,
                "cache_type": "redis",
                "error_type": type(e).__name__,
                "error_message": str(e)
            })
            raise LoadError(f"Failed to load value from Redis for key {key}", original_exception=e) from e

        if value is None:
            return None
        if hasattr(value, 'decode'):
            value = value.decode('utf-8')
        return value

    def save(self, key: str, value: str) -> bool:
        """Insert or replace the value stored for ``key``."""
        redis_key = self._get_key(key)
        try:
            result = self.redis.set(redis_key, value)
        except RedisError as e:
            logger.error(f"Redis error saving value for key {redis_key}: {e}")
            raise SaveError(f"Failed to save value to Redis for key {key}", original_exception=e) from e
        return bool(result)

    def flush_batch(self, entries: Iterable[Tuple[str, str]]) -> bool:
        """
        Write all entries through one MULTI/EXEC pipeline.

        The server applies the whole batch or, if the transaction fails,
        none of it.
        """
        rows = list(entries)
        if not rows:
            return True
        try:
            pipe = self.redis.pipeline(transaction=True)
            for key, value in rows:
                pipe.set(self._get_key(key), value)
            results = pipe.execute()
        except RedisError as e:
            logger.error(f"Redis error flushing {len(rows)} entries: {e}")
            raise SaveError(f"Failed to flush {len(rows)} entries to Redis", original_exception=e) from e
        return all(bool(result) for result in results)

    def close(self) -> None:
        """Close the client if this store created it."""
        if not self._owns_client:
            return
        try:
            self.redis.close()
        except RedisError as e:
            logger.error(f"Error closing Redis connection: {e}")
