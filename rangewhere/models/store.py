"""
MemoryStore - In-memory ordered store backed by a sorted container.
"""

from collections.abc import AsyncIterator, Iterator
from typing import Any

from rangewhere.interfaces.range_iterable import RangeIterable
from rangewhere.interfaces.sorted_container import SortedContainer
from rangewhere.models.entry import Entry
from rangewhere.models.keys import KeyTuple
from rangewhere.models.sortedcontainers import RedBlackTree


class MemoryStore(RangeIterable):
    """
    In-memory ordered key-value store.

    Supports:
    - O(log N) put, get, delete operations
    - Scalar and tuple keys ordered by the key-part total order
    - Optional per-entry version numbers
    - Range scans via iterator / async_iterator, start inclusive, end exclusive
    """

    def __init__(self, sorted_container: SortedContainer | None = None) -> None:
        """
        Initialize MemoryStore.

        Args:
            sorted_container: The backing sorted data structure.
                Defaults to a new RedBlackTree.
        """
        self._container = sorted_container if sorted_container is not None else RedBlackTree()

    def has(self, key: Any) -> bool:
        return self._container.has(key)

    def put(self, key: Any, value: Any, version: int | None = None) -> None:
        """
        Insert or update a key-value pair.

        Args:
            key: A key-part or a tuple/list of key-parts.
            value: The value to store.
            version: Optional version number returned by versioned scans.

        Raises:
            KeyPartTypeError: If the key holds a value outside the key-part domain.
        """
        self._container.put(key, value, version)

    def get(self, key: Any) -> Any | None:
        return self._container.get(key)

    def get_entry(self, key: Any) -> Entry | None:
        return self._container.get_entry(key)

    def delete(self, key: Any) -> bool:
        return self._container.delete(key)

    def clear(self) -> None:
        """Remove every entry."""
        for entry in list(self._container):
            self._container.delete(entry.key)

    def size(self) -> int:
        return self._container.size()

    def __len__(self) -> int:
        return self._container.size()

    def iterator(
        self,
        start: KeyTuple | None = None,
        end: KeyTuple | None = None,
        versions: bool = False,
    ) -> Iterator[Entry]:
        return self._container.iterator(start, end, versions)

    def async_iterator(
        self,
        start: KeyTuple | None = None,
        end: KeyTuple | None = None,
        versions: bool = False,
    ) -> AsyncIterator[Entry]:
        return self._container.async_iterator(start, end, versions)
