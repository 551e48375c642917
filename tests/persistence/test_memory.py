"""Tests for the in-memory persistent store and the default batch flush."""

import pytest

from datastore.exceptions import SaveError
from datastore.persistence.memory import InMemoryPersistentStore
from tests.mocks.mock_stores import SaveOnlyStore


def test_load_and_save():
    store = InMemoryPersistentStore({"a": "1"})
    assert store.load("a") == "1"
    assert store.load("b") is None
    assert store.save("b", "2") is True
    assert store.data == {"a": "1", "b": "2"}
    assert len(store) == 2


def test_data_is_a_copy():
    store = InMemoryPersistentStore()
    snapshot = store.data
    snapshot["x"] = "y"
    assert store.load("x") is None


def test_default_flush_batch_saves_each_entry():
    store = InMemoryPersistentStore()
    assert store.flush_batch([("a", "1"), ("b", "2")]) is True
    assert store.data == {"a": "1", "b": "2"}


def test_default_flush_batch_continues_after_failure():
    store = SaveOnlyStore(failing_keys={"a"})
    with pytest.raises(SaveError) as excinfo:
        store.flush_batch([("a", "1"), ("b", "2")])
    assert store.attempts == ["a", "b"]
    assert store.data == {"b": "2"}
    assert isinstance(excinfo.value.original_exception, SaveError)


def test_context_manager_closes():
    with InMemoryPersistentStore() as store:
        store.save("a", "1")
    assert store.load("a") == "1"
