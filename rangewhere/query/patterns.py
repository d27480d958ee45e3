"""
Pattern vocabulary shared by the query components.

Matchers are classified once, when a pattern is compiled, into a closed set
of kinds (literal, predicate, regex, nested mapping) so per-record evaluation
never has to inspect raw pattern values again.

Predicate results follow one convention:

- DONE            stop the scan, discard the current candidate
- falsy           no match
- anything else   match

Value pattern fields are the exception: only None or False fails a field
(see rangewhere.query.value_pattern).
"""

import re
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from enum import IntEnum
from types import CodeType
from typing import Any

from rangewhere.models.exceptions import KeyPartTypeError
from rangewhere.models.keys import is_key_part


class _Done:
    """Type of the DONE sentinel. There is exactly one instance."""

    _instance: "_Done | None" = None

    def __new__(cls) -> "_Done":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DONE"

    def __reduce__(self) -> str:
        return "DONE"


DONE = _Done()


class _Undefined:
    """Type of UNDEFINED: a missing field or a dropped projection, distinct from None."""

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


def is_object_like(value: Any) -> bool:
    """Mappings and lists/tuples have addressable fields; scalars do not."""
    return isinstance(value, (Mapping, list, tuple))


def fields_of(value: Any) -> Iterator[tuple[Any, Any]]:
    """Yield (field name, field value) pairs of an object-like value."""
    if isinstance(value, Mapping):
        yield from value.items()
    elif isinstance(value, (list, tuple)):
        yield from enumerate(value)


def field_of(value: Any, name: Any) -> Any:
    """Return value[name], or UNDEFINED when the field does not exist."""
    if isinstance(value, Mapping):
        return value[name] if name in value else UNDEFINED
    if isinstance(value, (list, tuple)) and isinstance(name, int) and -len(value) <= name < len(value):
        return value[name]
    return UNDEFINED


class Verdict(IntEnum):
    """Outcome of testing one scanned record."""

    REJECT = 0
    ACCEPT = 1
    STOP = 2


def verdict_of(result: Any) -> Verdict:
    """Map a predicate's return value to a Verdict."""
    if result is DONE:
        return Verdict.STOP
    if not result:
        return Verdict.REJECT
    return Verdict.ACCEPT


def ANY(*args: Any) -> bool:
    """Predicate that matches every value."""
    return True


def NOTNULL(value: Any, *args: Any) -> bool | None:
    """Predicate that matches every value except None."""
    return True if value is not None else None


def limit(predicate: Callable[..., Any], count: int) -> Callable[..., Any]:
    """
    Wrap a predicate so that it returns DONE once it has matched count times.

    The wrapper keeps its own counter, so create a fresh one per query.
    """
    matched = 0

    def limited(*args: Any) -> Any:
        nonlocal matched
        if matched >= count:
            return DONE
        result = predicate(*args)
        if verdict_of(result) is Verdict.ACCEPT:
            matched += 1
        return result

    return limited


class MatcherKind(IntEnum):
    """Kinds of pattern positions."""

    LITERAL = 0
    PREDICATE = 1
    REGEX = 2
    NESTED = 3


@dataclass(frozen=True)
class Matcher:
    """A classified pattern position."""

    kind: MatcherKind
    value: Any

    @property
    def is_literal(self) -> bool:
        return self.kind is MatcherKind.LITERAL


def classify(value: Any) -> Matcher:
    """
    Classify a raw pattern value.

    Mappings are reported as NESTED with the raw mapping as value; callers
    that accept nesting compile it further.
    """
    if isinstance(value, re.Pattern):
        return Matcher(MatcherKind.REGEX, value)
    if callable(value):
        return Matcher(MatcherKind.PREDICATE, value)
    if isinstance(value, Mapping):
        return Matcher(MatcherKind.NESTED, value)
    return Matcher(MatcherKind.LITERAL, value)


def compile_key_sequence(sequence: Sequence[Any]) -> tuple[Matcher, ...]:
    """
    Classify every position of a key pattern sequence.

    Raises:
        KeyPartTypeError: If a literal position is not a key-part.
    """
    matchers = []
    for item in sequence:
        matcher = classify(item)
        if matcher.kind is MatcherKind.NESTED or (
            matcher.is_literal and not is_key_part(item)
        ):
            raise KeyPartTypeError(item)
        matchers.append(matcher)
    return tuple(matchers)


def regex_matches(pattern: re.Pattern, value: Any) -> bool:
    """Unanchored regex test; only strings can match."""
    return isinstance(value, str) and pattern.search(value) is not None


def references_done(fn: Callable[..., Any]) -> bool:
    """
    Heuristically decide whether a callable can return DONE.

    Looks for the name DONE among the globals and closure variables used by
    the callable's code, including nested functions and comprehensions.
    """
    code = getattr(fn, "__code__", None)
    if code is None:
        wrapped = getattr(fn, "__wrapped__", None) or getattr(fn, "func", None)
        if wrapped is not None and wrapped is not fn:
            return references_done(wrapped)
        code = getattr(getattr(type(fn), "__call__", None), "__code__", None)
    if code is None:
        return False
    return _code_mentions(code, "DONE")


def _code_mentions(code: CodeType, name: str) -> bool:
    if name in code.co_names or name in code.co_freevars:
        return True
    return any(
        isinstance(const, CodeType) and _code_mentions(const, name)
        for const in code.co_consts
    )
