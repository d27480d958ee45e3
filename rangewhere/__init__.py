"""
Declarative range queries over ordered key-value stores.

This package provides:
- query_where(store, key_pattern, value_pattern, selection, options) - lazy filtered scans
- async_query_where(...) - the same over async range scans
- DONE - sentinel a predicate returns to end the scan early
- ANY / NOTNULL / limit - predicate helpers
- successor(value) - the next key-part in the store's total order
- MemoryStore - in-memory ordered store implementing the scan contract
"""

from rangewhere.models.entry import Entry
from rangewhere.models.exceptions import (
    BumpIndexRangeError,
    BumpIndexTypeError,
    KeyPartTypeError,
    OptionRangeError,
    OptionTypeError,
    PatternTypeError,
    QueryError,
    SuccessorTypeError,
)
from rangewhere.models.keys import MAX_STRING, successor
from rangewhere.models.options import QueryOptions
from rangewhere.models.store import MemoryStore
from rangewhere.query import (
    ANY,
    DONE,
    NOTNULL,
    RangeQuery,
    SelectionContext,
    async_query_where,
    build_bounds,
    limit,
    query_where,
)

__all__ = [
    "ANY",
    "DONE",
    "MAX_STRING",
    "NOTNULL",
    "BumpIndexRangeError",
    "BumpIndexTypeError",
    "Entry",
    "KeyPartTypeError",
    "MemoryStore",
    "OptionRangeError",
    "OptionTypeError",
    "PatternTypeError",
    "QueryError",
    "QueryOptions",
    "RangeQuery",
    "SelectionContext",
    "SuccessorTypeError",
    "async_query_where",
    "build_bounds",
    "limit",
    "query_where",
    "successor",
]
