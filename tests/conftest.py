import pytest

from datastore.cache.store import CacheStore
from tests.mocks.mock_stores import RecordingStore


@pytest.fixture
def store():
    """A recording in-memory persistent store."""
    return RecordingStore()


@pytest.fixture
def make_cache(store):
    """Factory for caches over the shared recording store; closes them afterwards."""
    caches = []

    def _make(capacity, backing_store=None, **kwargs):
        cache = CacheStore(capacity, backing_store if backing_store is not None else store, **kwargs)
        caches.append(cache)
        return cache

    yield _make

    for cache in caches:
        cache.close()
