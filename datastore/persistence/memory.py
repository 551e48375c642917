"""
Dict-backed persistent store, for tests and ephemeral caches.
"""

from typing import Dict, Optional

from datastore.persistence.base import PersistentStore

class InMemoryPersistentStore(PersistentStore):
    """
    Persistent store that keeps everything in a plain dict.

    Nothing survives the process; useful as a stand-in for a real backend.

    Args:
        initial: Optional mapping to seed the store with.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def save(self, key: str, value: str) -> bool:
        self._data[key] = value
        return True

    @property
    def data(self) -> Dict[str, str]:
        """A copy of the stored key/value pairs."""
        return dict(self._data)

    def __len__(self) -> int:
        return len(self._data)
