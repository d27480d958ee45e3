"""
SortedContainer - ordered key-part storage behind a MemoryStore.
"""

from abc import abstractmethod
from typing import Any

from rangewhere.interfaces.range_iterable import RangeIterable
from rangewhere.models.entry import Entry


class SortedContainer(RangeIterable):
    """
    Ordered container of (key, value, version) records.

    Keys may be scalars or tuples of key-parts; a scalar and the one-element
    tuple holding it address the same slot. Lookups are O(log N).

    Implementations:
    - RedBlackTree
    """

    @abstractmethod
    def put(self, key: Any, value: Any, version: int | None = None) -> None:
        """
        Store value under key, replacing any record at the same slot.

        Raises:
            KeyPartTypeError: If key holds a value outside the key-part domain.
        """

    @abstractmethod
    def get(self, key: Any) -> Any | None:
        """Value stored under key, or None."""

    @abstractmethod
    def get_entry(self, key: Any) -> Entry | None:
        """Whole record (key as stored, value, version) under key, or None."""

    @abstractmethod
    def delete(self, key: Any) -> bool:
        """Drop the record under key; False if there was none."""

    @abstractmethod
    def has(self, key: Any) -> bool:
        pass

    @abstractmethod
    def size(self) -> int:
        """Number of records. O(1)"""
