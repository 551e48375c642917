"""Tests for DataStoreConfig and the factory helpers."""

from unittest.mock import MagicMock, patch

import pytest

from datastore.cache.store import CacheStore
from datastore.config import DataStoreConfig
from datastore.exceptions import ConfigurationError
from datastore.factory import create_persistent_store, open_datastore
from datastore.persistence.memory import InMemoryPersistentStore
from datastore.persistence.redis import RedisPersistentStore
from datastore.persistence.sqlite import SQLitePersistentStore


def test_defaults():
    config = DataStoreConfig()
    assert config.capacity == 1000
    assert config.backend == "sqlite"
    assert config.db_path == "DataStore.db"
    assert config.table_name == "data"
    assert config.key_prefix == "datastore:"
    assert config.max_recorded_failures == 100


def test_zero_capacity_is_valid():
    assert DataStoreConfig.create(capacity=0).capacity == 0


@pytest.mark.parametrize("values", [
    {"capacity": -1},
    {"backend": "postgres"},
    {"table_name": "bad name"},
    {"max_recorded_failures": 0},
    {"unknown": 1},
])
def test_invalid_values(values):
    with pytest.raises(ConfigurationError) as excinfo:
        DataStoreConfig.create(**values)
    assert excinfo.value.original_exception is not None


def test_from_env():
    config = DataStoreConfig.from_env({
        "DATASTORE_CAPACITY": "5",
        "DATASTORE_BACKEND": "memory",
        "DATASTORE_TABLE_NAME": "records",
        "UNRELATED": "x",
    })
    assert config.capacity == 5
    assert config.backend == "memory"
    assert config.table_name == "records"
    assert config.db_path == "DataStore.db"


def test_from_env_invalid():
    with pytest.raises(ConfigurationError):
        DataStoreConfig.from_env({"DATASTORE_CAPACITY": "lots"})


def test_from_process_environment(monkeypatch):
    monkeypatch.setenv("DATASTORE_CAPACITY", "7")
    monkeypatch.setenv("DATASTORE_BACKEND", "memory")
    assert DataStoreConfig.from_env().capacity == 7


def test_create_memory_store():
    store = create_persistent_store(DataStoreConfig(backend="memory"))
    assert isinstance(store, InMemoryPersistentStore)


def test_create_sqlite_store(tmp_path):
    db_path = str(tmp_path / "cache.db")
    store = create_persistent_store(DataStoreConfig(db_path=db_path, table_name="kv"))
    try:
        assert isinstance(store, SQLitePersistentStore)
        assert store.db_path == db_path
        assert store.table_name == "kv"
    finally:
        store.close()


def test_create_redis_store():
    client = MagicMock()
    with patch("redis.Redis.from_url", return_value=client):
        store = create_persistent_store(DataStoreConfig(backend="redis", key_prefix="app:"))
    assert isinstance(store, RedisPersistentStore)
    assert store.key_prefix == "app:"


def test_open_datastore(tmp_path):
    config = DataStoreConfig(capacity=2, db_path=str(tmp_path / "cache.db"), max_recorded_failures=3)
    with open_datastore(config) as cache:
        assert isinstance(cache, CacheStore)
        assert cache.capacity == 2
        cache.put("a", "1")

    with open_datastore(config) as cache:
        assert cache.get("a") == "1"


def test_open_datastore_from_env(monkeypatch):
    monkeypatch.setenv("DATASTORE_BACKEND", "memory")
    monkeypatch.setenv("DATASTORE_CAPACITY", "4")
    cache = open_datastore()
    try:
        assert cache.capacity == 4
        assert isinstance(cache.backing_store, InMemoryPersistentStore)
    finally:
        cache.close()
