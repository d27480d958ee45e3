"""
Custom exceptions for the query overlay.

Every error also derives from the matching builtin (TypeError / ValueError)
so callers may catch either form.
"""

from typing import Any


class QueryError(Exception):
    """Base exception for all range query errors."""

    pass


class PatternTypeError(QueryError, TypeError):
    """Raised when a key pattern is not a sequence, a start/end mapping, or a callable."""

    def __init__(self, pattern: Any, reason: str | None = None):
        self.pattern = pattern
        super().__init__(
            reason
            or "key pattern must be a sequence, a mapping with 'start'/'end', "
            f"or a callable, not {type(pattern).__name__}"
        )


class KeyPartTypeError(QueryError, TypeError):
    """Raised when a value outside the key-part domain is used as a key-part."""

    def __init__(self, part: Any):
        self.part = part
        super().__init__(
            "key parts must be None, bool, int, float or str, "
            f"not {type(part).__name__}"
        )


class SuccessorTypeError(QueryError, TypeError):
    """
    Raised when a successor is requested for a matcher with no defined successor.

    Callables and regular expressions match many values, so there is no
    single key-part that comes after them.
    """

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"no successor is defined for {type(value).__name__} {value!r}")


class BumpIndexTypeError(QueryError, TypeError):
    """Raised when bump_index is not an int or points at a callable/regex position."""

    pass


class BumpIndexRangeError(QueryError, ValueError):
    """Raised when bump_index lies outside the pattern."""

    def __init__(self, index: int, length: int):
        """
        Initialize range error.

        Args:
            index: The bump index that was requested.
            length: Number of positions in the pattern.
        """
        self.index = index
        self.length = length
        super().__init__(
            f"bump_index {index} is out of range for a pattern of length {length}"
        )


class OptionTypeError(QueryError, TypeError):
    """Raised when a numeric query option is not an int."""

    pass


class OptionRangeError(QueryError, ValueError):
    """Raised when a numeric query option is negative."""

    pass
