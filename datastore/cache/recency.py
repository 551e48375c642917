"""
Recency ordering for the LRU cache.

Entries live in an OrderedDict kept in recency order: the first item is the
most recently used entry, the last item the least recently used one. The dict
is both the ordering and the key index, so the two cannot disagree.
"""

from collections import OrderedDict
from typing import Iterator, NamedTuple, Optional


class Entry(NamedTuple):
    """A resident key/value pair."""
    key: str
    value: str


class RecencyList:
    """
    Ordered entries from most to least recently used.

    All operations are O(1): OrderedDict relinks its internal list in place
    on move_to_end and popitem.
    """

    def __init__(self):
        self._entries: "OrderedDict[str, str]" = OrderedDict()

    def insert_front(self, key: str, value: str) -> None:
        """
        Insert a new entry as the most recently used one.

        Raises:
            KeyError: If the key is already present. Callers must remove or
                relocate the existing entry first.
        """
        if key in self._entries:
            raise KeyError(f"Key already present in recency list: {key!r}")
        self._entries[key] = value
        self._entries.move_to_end(key, last=False)

    def move_to_front(self, key: str) -> None:
        """Mark an existing entry as the most recently used one."""
        if key in self._entries:
            self._entries.move_to_end(key, last=False)

    def remove(self, key: str) -> Entry:
        """
        Remove the entry for ``key`` wherever it sits in the list.

        Raises:
            KeyError: If the key is not present.
        """
        return Entry(key, self._entries.pop(key))

    def remove_least_recent(self) -> Entry:
        """
        Remove and return the least recently used entry.

        Raises:
            IndexError: If the list is empty.
        """
        if not self._entries:
            raise IndexError("remove_least_recent from an empty recency list")
        return Entry(*self._entries.popitem(last=True))

    def peek(self, key: str) -> Optional[str]:
        """Return the value for ``key`` without touching the ordering."""
        return self._entries.get(key)

    def most_recent(self) -> Optional[Entry]:
        for item in self._entries.items():
            return Entry(*item)
        return None

    def least_recent(self) -> Optional[Entry]:
        for item in reversed(self._entries.items()):
            return Entry(*item)
        return None

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> list:
        """Keys from most to least recently used."""
        return list(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        for key, value in self._entries.items():
            yield Entry(key, value)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"RecencyList({self.keys()!r})"
