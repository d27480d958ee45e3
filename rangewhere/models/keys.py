"""
Key-part ordering and successor ("bump") computation.

The store orders key-parts across types as:

    None < False < True < numbers (numeric order) < strings (code point order)

Keys are tuples of key-parts compared element by element, with a shorter
key sorting before any longer key it prefixes. A bare scalar key orders
exactly like the one-element tuple holding it.
"""

import math
import re
from typing import Any, Union

from rangewhere.models.exceptions import KeyPartTypeError, SuccessorTypeError

KeyPart = Union[None, bool, int, float, str]
KeyTuple = tuple[KeyPart, ...]

# Largest code point; a string made of it sorts after every realistic key string.
MAX_CODE_POINT = 0x10FFFF
MAX_STRING = chr(MAX_CODE_POINT)

# Appended in wide mode; the smallest string greater than s is s + "\x00".
WIDE_SEPARATOR = "\x00"

_RANK_NONE = 0
_RANK_FALSE = 1
_RANK_TRUE = 2
_RANK_NUMBER = 3
_RANK_STRING = 4


def is_key_part(value: Any) -> bool:
    """Return True if value belongs to the key-part domain."""
    return value is None or isinstance(value, (bool, int, float, str))


def part_order(part: KeyPart) -> tuple[int, Any]:
    """
    Return a sort key for a single key-part.

    Ranks are compared first, so values of different types are never
    compared with each other.

    Raises:
        KeyPartTypeError: If part is not a key-part.
    """
    if part is None:
        return (_RANK_NONE, 0)
    if part is False:
        return (_RANK_FALSE, 0)
    if part is True:
        return (_RANK_TRUE, 0)
    if isinstance(part, (int, float)) and not isinstance(part, bool):
        return (_RANK_NUMBER, part)
    if isinstance(part, str):
        return (_RANK_STRING, part)
    raise KeyPartTypeError(part)


def key_order(key: Any) -> tuple[tuple[int, Any], ...]:
    """Return a sort key for a whole key (scalar or sequence)."""
    parts, _ = to_key_tuple(key)
    return tuple(part_order(part) for part in parts)


def to_key_tuple(key: Any) -> tuple[KeyTuple, bool]:
    """
    Normalize a key to tuple form.

    Returns:
        (parts, was_scalar) where was_scalar records whether the key has to be
        collapsed back to a scalar on output.
    """
    if isinstance(key, (tuple, list)):
        return tuple(key), False
    return (key,), True


def from_key_tuple(parts: KeyTuple, was_scalar: bool) -> Any:
    """Inverse of to_key_tuple."""
    if was_scalar and len(parts) == 1:
        return parts[0]
    return parts


def same_part(a: Any, b: Any) -> bool:
    """
    Type-aware equality.

    Python treats True == 1 and False == 0; the store does not, so booleans
    and None only ever equal themselves.
    """
    if a is None or b is None or isinstance(a, bool) or isinstance(b, bool):
        return a is b
    return a == b


def successor(value: Any, wide: bool = False) -> KeyPart:
    """
    Return the smallest key-part that sorts after value.

    Args:
        value: The key-part to bump.
        wide: String strategy. False (narrow) bumps the last non-maximal
            character and truncates, giving a bound past every string that
            starts with value. True appends WIDE_SEPARATOR, giving the
            immediate successor of exactly that string.

    Returns:
        The successor, or None when a narrow string has no successor
        (empty string, or every character already maximal).

    Raises:
        SuccessorTypeError: If value is a callable or a regular expression.
        KeyPartTypeError: If value is any other non key-part.
    """
    if callable(value) or isinstance(value, re.Pattern):
        raise SuccessorTypeError(value)
    if value is None:
        return False
    if value is False:
        return True
    if value is True:
        # Any number sorts after True; the boundary matters, not the magnitude.
        return -math.inf
    if isinstance(value, int):
        return _int_successor(value)
    if isinstance(value, float):
        if value == math.inf:
            # Nothing numeric is larger, so the first string comes next.
            return ""
        return math.nextafter(value, math.inf)
    if isinstance(value, str):
        if wide:
            return value + WIDE_SEPARATOR
        return _narrow_string_successor(value)
    raise KeyPartTypeError(value)


def _int_successor(value: int) -> KeyPart:
    try:
        bumped = math.nextafter(float(value), math.inf)
    except OverflowError:
        return value + 1
    # float(value) rounds for very large ints; fall back to exact arithmetic.
    return bumped if bumped > value else value + 1


def _narrow_string_successor(value: str) -> str | None:
    for i in range(len(value), 0, -1):
        code = ord(value[i - 1])
        if code < MAX_CODE_POINT:
            return value[: i - 1] + chr(code + 1)
    return None
