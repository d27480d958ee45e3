"""
RangeIterable protocol for stores that support ordered range scans.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Iterator

from rangewhere.models.entry import Entry
from rangewhere.models.keys import KeyTuple


class RangeIterable(ABC):
    """
    Protocol for ordered key-value stores that can be queried with query_where.

    Implementations must support:
    - Range-bounded iteration via iterator(start, end, versions)
    - Async range-bounded iteration via async_iterator(start, end, versions)

    Full iteration (__iter__ / __aiter__) is derived from those two.

    Keys are ordered by the key-part total order (see rangewhere.models.keys).
    Abandoning an iterator before it is exhausted must not leak resources.
    """

    def __iter__(self) -> Iterator[Entry]:
        """Return an iterator over all entries in ascending key order."""
        return self.iterator()

    @abstractmethod
    def iterator(
        self,
        start: KeyTuple | None = None,
        end: KeyTuple | None = None,
        versions: bool = False,
    ) -> Iterator[Entry]:
        """
        Return an iterator over entries in the specified range.

        Args:
            start: Start key (inclusive). If None, starts from the beginning.
            end: End key (exclusive). If None, iterates to the end.
            versions: If True, populate Entry.version.

        Returns:
            Iterator yielding Entry objects in ascending key order.
        """
        pass

    def __aiter__(self) -> AsyncIterator[Entry]:
        """Return an async iterator over all entries in ascending key order."""
        return self.async_iterator()

    @abstractmethod
    def async_iterator(
        self,
        start: KeyTuple | None = None,
        end: KeyTuple | None = None,
        versions: bool = False,
    ) -> AsyncIterator[Entry]:
        """
        Return an async iterator over entries in the specified range.

        Args:
            start: Start key (inclusive). If None, starts from the beginning.
            end: End key (exclusive). If None, iterates to the end.
            versions: If True, populate Entry.version.

        Returns:
            AsyncIterator yielding Entry objects in ascending key order.
        """
        pass
