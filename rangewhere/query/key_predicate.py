"""
Key Predicate Evaluator - re-tests scanned keys against the key pattern.

The scan bound only narrows where to look. Predicate and regex positions
(and, for sequence patterns, literal positions) are checked here for every
scanned key.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from rangewhere.models.keys import KeyTuple, same_part
from rangewhere.query.patterns import (
    Matcher,
    MatcherKind,
    Verdict,
    references_done,
    regex_matches,
    verdict_of,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConditionSequence:
    """
    One condition sequence: the start or end side of a key pattern.

    Attributes:
        matchers: Positions to test, in key order.
        check_literals: Whether literal positions must equal the key-part.
            True for sequence patterns, where a literal is an exact match;
            False for start/end patterns, where a literal is a range endpoint.
    """

    matchers: tuple[Matcher, ...]
    check_literals: bool

    @classmethod
    def create(cls, matchers: tuple[Matcher, ...], check_literals: bool) -> "ConditionSequence":
        if not check_literals:
            # Trailing endpoints impose nothing, and must not force a minimum key length.
            end = len(matchers)
            while end and matchers[end - 1].is_literal:
                end -= 1
            matchers = matchers[:end]
        return cls(matchers=matchers, check_literals=check_literals)

    def evaluate(self, parts: KeyTuple) -> Verdict:
        """Test every position in order, stopping at the first failure or DONE."""
        if len(parts) < len(self.matchers):
            return Verdict.REJECT

        for matcher, part in zip(self.matchers, parts):
            if matcher.kind is MatcherKind.PREDICATE:
                verdict = verdict_of(matcher.value(part))
                if verdict is not Verdict.ACCEPT:
                    return verdict
            elif matcher.kind is MatcherKind.REGEX:
                if not regex_matches(matcher.value, part):
                    return Verdict.REJECT
            elif self.check_literals and not same_part(part, matcher.value):
                return Verdict.REJECT
        return Verdict.ACCEPT


class KeyConditions:
    """
    All condition sequences of one key pattern, OR-ed in order.

    The first sequence that accepts wins; DONE from any evaluated position
    stops the scan.
    """

    def __init__(self, sequences: tuple[ConditionSequence, ...] = ()) -> None:
        self._sequences = sequences

    @classmethod
    def for_sequence(cls, matchers: tuple[Matcher, ...]) -> "KeyConditions":
        return cls((ConditionSequence.create(matchers, check_literals=True),))

    @classmethod
    def for_range(
        cls,
        start: tuple[Matcher, ...] | None,
        end: tuple[Matcher, ...] | None,
    ) -> "KeyConditions":
        sides = [side for side in (start, end) if side is not None]
        return cls(tuple(ConditionSequence.create(side, check_literals=False) for side in sides))

    @property
    def predicates(self) -> list[Callable[..., Any]]:
        return [
            m.value
            for sequence in self._sequences
            for m in sequence.matchers
            if m.kind is MatcherKind.PREDICATE
        ]

    def evaluate(self, parts: KeyTuple) -> Verdict:
        if not self._sequences:
            return Verdict.ACCEPT

        for sequence in self._sequences:
            verdict = sequence.evaluate(parts)
            if verdict is not Verdict.REJECT:
                return verdict
        return Verdict.REJECT


def warn_if_unbounded(predicates: list[Callable[..., Any]], silent: bool = False) -> bool:
    """
    Warn when key predicates exist but none of them can return DONE.

    Such a scan only ends at the bound (or the end of the store), which may
    be far more records than the caller expects.

    Returns:
        True if the warning was emitted.
    """
    if silent or not predicates:
        return False
    if any(references_done(fn) for fn in predicates):
        return False
    logger.warning(
        f"Key pattern has {len(predicates)} predicate(s) and none references DONE; "
        "the scan may not terminate early"
    )
    return True
