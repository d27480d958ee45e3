"""
Shared pytest fixtures for range query tests.
"""

import pytest

from rangewhere.models.store import MemoryStore


class SpySource(MemoryStore):
    """MemoryStore that records scan requests and counts scanned entries."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple] = []
        self.scanned = 0

    def iterator(self, start=None, end=None, versions=False):
        self.calls.append((start, end, versions))
        return self._iterate(super().iterator(start, end, versions))

    def _iterate(self, entries):
        for entry in entries:
            self.scanned += 1
            yield entry

    async def _aiterate(self, start, end, versions):
        async for entry in super().async_iterator(start, end, versions):
            self.scanned += 1
            yield entry

    def async_iterator(self, start=None, end=None, versions=False):
        self.calls.append((start, end, versions))
        return self._aiterate(start, end, versions)


def _load_hello(store: MemoryStore) -> MemoryStore:
    store.put("hello", "world", 1)
    store.put(["hello", False], {"message": "my world"}, 1)
    store.put(["hello", True], {"message": "your world"}, 1)
    store.put(["hello", 1], {"message": "other world"}, 1)
    return store


@pytest.fixture
def store():
    """Provide the four-entry "hello" store."""
    return _load_hello(MemoryStore())


@pytest.fixture
def spy_store():
    """Provide the "hello" store wrapped so scans can be inspected."""
    return _load_hello(SpySource())


@pytest.fixture
def people_store():
    """Provide a store of nested person/address records."""
    people = MemoryStore()
    people.put(
        "person1",
        {
            "name": "John",
            "age": 30,
            "address": {"city": "Seattle", "stateOrProvince": "WA", "country": "US"},
        },
    )
    people.put(
        "person2",
        {"age": 30, "address": {"city": "Seattle", "stateOrProvince": "WA", "country": "US"}},
    )
    people.put(
        "nested",
        {"address": {"city": "New York", "zip": {"code": "10001", "plus4": "1234"}}},
    )
    return people


@pytest.fixture
def counter_store():
    """Provide a store with keys ("k", 0) .. ("k", 9)."""
    counters = MemoryStore()
    for i in range(10):
        counters.put(("k", i), {"n": i})
    return counters
