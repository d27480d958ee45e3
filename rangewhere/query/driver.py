"""
Iteration Driver - query_where and its async twin.

A query is validated and compiled eagerly, so malformed patterns and options
raise before any scan is opened. Results are produced lazily: the scan
advances only when the consumer asks for the next entry.
"""

import dataclasses
import logging
import re
from collections.abc import AsyncIterator, Callable, Iterator, Mapping
from typing import Any

from rangewhere.interfaces.range_iterable import RangeIterable
from rangewhere.models.entry import Entry
from rangewhere.models.exceptions import PatternTypeError
from rangewhere.models.keys import from_key_tuple, to_key_tuple
from rangewhere.models.options import QueryOptions
from rangewhere.query.bounds import (
    Bounds,
    compile_range_pattern,
    range_bounds,
    sequence_bounds,
)
from rangewhere.query.key_predicate import KeyConditions, warn_if_unbounded
from rangewhere.query.patterns import UNDEFINED, Verdict, compile_key_sequence, verdict_of
from rangewhere.query.selector import select
from rangewhere.query.value_pattern import compile_value_pattern

logger = logging.getLogger(__name__)


class RangeQuery:
    """
    A compiled range query.

    Holds everything derived from the patterns: scan bounds, key conditions,
    the value test and the selection spec. Nothing here is mutated while a
    scan runs, so one RangeQuery may be iterated any number of times.
    """

    def __init__(
        self,
        key_pattern: Any,
        value_pattern: Any = None,
        selection: Any = None,
        options: QueryOptions | None = None,
    ) -> None:
        """
        Validate and compile a query.

        Args:
            key_pattern: Sequence of matchers, {"start": ..., "end": ...}
                mapping, or a callable applied to the whole key.
            value_pattern: Nested mapping or callable tested against values.
            selection: Spec used to reshape accepted values.
            options: Query options; defaults to QueryOptions().

        Raises:
            PatternTypeError: If key_pattern has an unsupported shape.
            BumpIndexTypeError / BumpIndexRangeError: If bump_index is unusable.
            KeyPartTypeError: If a literal position is not a key-part.
        """
        self.options = options if options is not None else QueryOptions()
        self._key_match: Callable[[Any], Any] | None = None

        if isinstance(key_pattern, Mapping):
            start, end = compile_range_pattern(key_pattern)
            if start is None and end is None and not self.options.silent:
                logger.warning(
                    "Key pattern has neither 'start' nor 'end', scanning all values"
                )
            self.bounds = range_bounds(
                start,
                end,
                wide=self.options.wide_range_key_strings,
                bump_index=self.options.bump_index,
            )
            self._conditions = KeyConditions.for_range(start, end)
        elif isinstance(key_pattern, (list, tuple)):
            matchers = compile_key_sequence(key_pattern)
            self.bounds = sequence_bounds(
                matchers,
                wide=self.options.wide_range_key_strings,
                bump_index=self.options.bump_index,
            )
            self._conditions = KeyConditions.for_sequence(matchers)
        elif callable(key_pattern) and not isinstance(key_pattern, re.Pattern):
            self._key_match = key_pattern
            self.bounds = Bounds()
            self._conditions = KeyConditions()
        else:
            raise PatternTypeError(key_pattern)

        self._value_test = compile_value_pattern(value_pattern)
        self._selection = selection

        predicates = self._conditions.predicates
        if self._key_match is not None:
            predicates.append(self._key_match)
        warn_if_unbounded(predicates, silent=self.options.silent)

        logger.debug(f"Query bounds: start={self.bounds.start!r} end={self.bounds.end!r}")

    def iterate(self, source: RangeIterable) -> Iterator[Entry]:
        """Run the query against source, yielding result entries lazily."""
        if self.options.limit == 0:
            return iter(())
        return self._scan(source)

    def aiterate(self, source: RangeIterable) -> AsyncIterator[Entry]:
        """Async variant of iterate, driven by source.async_iterator."""
        return self._ascan(source)

    def _scan(self, source: RangeIterable) -> Iterator[Entry]:
        budget = _Budget(self.options.offset, self.options.limit)
        for entry in source.iterator(
            self.bounds.start, self.bounds.end, versions=self.options.versions
        ):
            verdict, result = self._process(entry)
            if verdict is Verdict.STOP:
                logger.debug(f"Scan stopped by DONE at key {entry.key!r}")
                return
            if result is None or not budget.admit():
                continue
            yield result
            if budget.spent():
                logger.debug("Scan stopped at limit")
                return

    async def _ascan(self, source: RangeIterable) -> AsyncIterator[Entry]:
        if self.options.limit == 0:
            return
        budget = _Budget(self.options.offset, self.options.limit)
        async for entry in source.async_iterator(
            self.bounds.start, self.bounds.end, versions=self.options.versions
        ):
            verdict, result = self._process(entry)
            if verdict is Verdict.STOP:
                logger.debug(f"Scan stopped by DONE at key {entry.key!r}")
                return
            if result is None or not budget.admit():
                continue
            yield result
            if budget.spent():
                logger.debug("Scan stopped at limit")
                return

    def _process(self, entry: Entry) -> tuple[Verdict, Entry | None]:
        """
        Test and project one scanned entry.

        Order: whole-key callable, value test, key conditions. Each step runs
        only if the previous one accepted, so a value predicate's DONE ends
        the scan even on a record the key conditions would reject.
        """
        parts, was_scalar = to_key_tuple(entry.key)
        key = from_key_tuple(parts, was_scalar)

        verdict = Verdict.ACCEPT
        if self._key_match is not None:
            verdict = verdict_of(self._key_match(key))
        if verdict is Verdict.ACCEPT:
            verdict = self._value_test(entry.value)
        if verdict is Verdict.ACCEPT:
            verdict = self._conditions.evaluate(parts)
        if verdict is not Verdict.ACCEPT:
            return verdict, None

        projected = select(self._selection, entry.value, key)
        if projected is UNDEFINED:
            return Verdict.REJECT, None

        return Verdict.ACCEPT, Entry(
            key=key,
            value=projected,
            version=entry.version if self.options.versions else None,
        )


class _Budget:
    """Per-scan offset and limit counters."""

    def __init__(self, offset: int, limit: int | None) -> None:
        self._offset = offset
        self._remaining = limit

    def admit(self) -> bool:
        """Consume one unit of offset if any is left; True means emit."""
        if self._offset > 0:
            self._offset -= 1
            return False
        return True

    def spent(self) -> bool:
        """Count one emitted result; True once the limit is reached."""
        if self._remaining is None:
            return False
        self._remaining -= 1
        return self._remaining <= 0


def _resolve_options(options: QueryOptions | None, overrides: dict[str, Any]) -> QueryOptions:
    options = options if options is not None else QueryOptions()
    if overrides:
        options = dataclasses.replace(options, **overrides)
    return options


def query_where(
    source: RangeIterable,
    key_pattern: Any,
    value_pattern: Any = None,
    selection: Any = None,
    options: QueryOptions | None = None,
    **overrides: Any,
) -> Iterator[Entry]:
    """
    Lazily yield entries of source whose key and value match the patterns.

    Args:
        source: Store providing the ordered range scan.
        key_pattern: Sequence of matchers (literal key-parts, re.Pattern,
            callables), a {"start": [...], "end": [...]} mapping, or a
            callable applied to the whole key.
        value_pattern: Nested mapping or callable tested against values.
        selection: Spec used to reshape accepted values.
        options: Query options.
        **overrides: QueryOptions fields given as keywords, e.g. limit=2.

    Returns:
        Iterator of Entry objects in ascending key order.

    Raises:
        TypeError / ValueError subclasses of QueryError, before any scan
        starts, for malformed patterns or options.
    """
    query = RangeQuery(key_pattern, value_pattern, selection, _resolve_options(options, overrides))
    return query.iterate(source)


def async_query_where(
    source: RangeIterable,
    key_pattern: Any,
    value_pattern: Any = None,
    selection: Any = None,
    options: QueryOptions | None = None,
    **overrides: Any,
) -> AsyncIterator[Entry]:
    """
    Async variant of query_where, scanning through source.async_iterator.

    Validation still happens synchronously, when this function is called.
    """
    query = RangeQuery(key_pattern, value_pattern, selection, _resolve_options(options, overrides))
    return query.aiterate(source)
