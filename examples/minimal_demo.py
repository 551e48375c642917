#!/usr/bin/env python3
"""
Minimal datastore Demo
======================

Shows put/get, LRU eviction with write-back, and the final flush on close,
using a throwaway SQLite database.
"""

import tempfile
from pathlib import Path

from datastore import CacheStore, SQLitePersistentStore


def minimal_demo(db_path: Path):
    """Minimal demo showing basic operations."""
    print("🚀 Minimal datastore Demo")
    print("=" * 40)

    with CacheStore(capacity=2, backing_store=SQLitePersistentStore(db_path)) as cache:
        print("\n📝 Putting three items into a cache that holds two...")
        cache.put("1", "one")
        cache.put("2", "two")
        cache.put("3", "three")
        print(f"Resident keys (most recent first): {cache.keys()}")

        print("\n🔍 Getting the evicted key reloads it from SQLite...")
        print(f"get('1') -> {cache.get('1')!r}")
        print(f"Resident keys now: {cache.keys()}")

        print("\n🔍 Getting a key nobody stored...")
        print(f"get('404') -> {cache.get('404')!r}")

        print(f"\n📊 Stats: {cache.stats.to_dict()}")

    print("\n💾 Cache closed; dirty entries were flushed.")
    with SQLitePersistentStore(db_path) as store:
        for key in ("1", "2", "3"):
            print(f"stored {key!r} -> {store.load(key)!r}")


def main():
    """Run the minimal demo."""
    with tempfile.TemporaryDirectory() as tmp:
        minimal_demo(Path(tmp) / "DataStore.db")
    print("\n🎉 Demo completed successfully!")


if __name__ == "__main__":
    main()
