"""
Data models: keys and their ordering, entries, options, the in-memory store.
"""

from rangewhere.models.entry import Entry
from rangewhere.models.options import QueryOptions
from rangewhere.models.store import MemoryStore

__all__ = [
    "Entry",
    "QueryOptions",
    "MemoryStore",
]
