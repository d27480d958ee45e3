"""
Entry: a key/value record as produced by a range scan.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class Entry:
    """
    A record returned by a range scan or by a query.

    Attributes:
        key: The record key, in the form it was stored (scalar or tuple).
        value: The stored value, or its projection for query results.
        version: Version number, present only when versions were requested.
    """

    key: Any
    value: Any
    version: int | None = None

    def __iter__(self):
        """Allow ``key, value = entry`` unpacking like the scan tuples."""
        yield self.key
        yield self.value
