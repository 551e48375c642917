"""
Dirty-bit bookkeeping for write-back caching.
"""

from typing import Dict, List


class DirtyTracker:
    """
    Tracks which resident keys have changed since they were last persisted.

    A key with no bookkeeping is treated as clean.
    """

    def __init__(self):
        self._flags: Dict[str, bool] = {}

    def mark_dirty(self, key: str) -> None:
        self._flags[key] = True

    def mark_clean(self, key: str) -> None:
        self._flags[key] = False

    def is_dirty(self, key: str) -> bool:
        return self._flags.get(key, False)

    def clear(self, key: str) -> None:
        """Drop all bookkeeping for ``key``."""
        self._flags.pop(key, None)

    def dirty_keys(self) -> List[str]:
        return [key for key, dirty in self._flags.items() if dirty]

    def reset(self) -> None:
        self._flags.clear()

    def __len__(self) -> int:
        """Number of dirty keys."""
        return sum(1 for dirty in self._flags.values() if dirty)
