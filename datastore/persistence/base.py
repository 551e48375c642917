"""
Base class for the durable stores that back a cache.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional, Tuple

from datastore.exceptions import SaveError

class PersistentStore(ABC):
    """Abstract base class for durable key-value storage behind a CacheStore."""

    @abstractmethod
    def load(self, key: str) -> Optional[str]:
        """
        Read the stored value for a key.

        Args:
            key: The key to look up.

        Returns:
            The stored value, or None if the key does not exist.

        Raises:
            LoadError: If the read failed for a reason other than absence.
        """
        pass

    @abstractmethod
    def save(self, key: str, value: str) -> bool:
        """
        Insert or replace the value for a key.

        Args:
            key: The key to write.
            value: The value to store.

        Returns:
            bool: True if the write was durably committed, False otherwise.

        Raises:
            SaveError: If the write failed at the storage level.
        """
        pass

    def flush_batch(self, entries: Iterable[Tuple[str, str]]) -> bool:
        """
        Write several entries in one pass.

        The default implementation calls :meth:`save` for every entry and keeps
        going after a failure, so one bad write does not stop the rest.
        Backends with transactions override this with an all-or-nothing write.

        Args:
            entries: (key, value) pairs to persist.

        Returns:
            bool: True if every entry was committed.

        Raises:
            SaveError: If any entry failed; raised after all entries were tried.
        """
        failed = []
        last_error: Optional[Exception] = None
        for key, value in entries:
            try:
                if not self.save(key, value):
                    failed.append(key)
            except SaveError as e:
                failed.append(key)
                last_error = e
        if last_error is not None:
            raise SaveError(f"Failed to save {len(failed)} entries: {failed}", original_exception=last_error)
        return not failed

    def close(self) -> None:
        """Release any resources held by the store."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
