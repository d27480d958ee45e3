"""
Tests for per-record key condition evaluation.
"""

import logging
import re

from rangewhere.query.key_predicate import KeyConditions, warn_if_unbounded
from rangewhere.query.patterns import DONE, Verdict, compile_key_sequence


def _sequence(*pattern):
    return KeyConditions.for_sequence(compile_key_sequence(pattern))


def _range(start=None, end=None):
    return KeyConditions.for_range(
        compile_key_sequence(start) if start is not None else None,
        compile_key_sequence(end) if end is not None else None,
    )


class TestSequenceConditions:
    """Tests for conditions built from a sequence pattern."""

    def test_literals_are_checked(self):
        """Test that literal positions must match exactly."""
        conditions = _sequence("hello", 1)
        assert conditions.evaluate(("hello", 1)) is Verdict.ACCEPT
        assert conditions.evaluate(("hello", 1, "extra")) is Verdict.ACCEPT
        assert conditions.evaluate(("hello", 2)) is Verdict.REJECT
        assert conditions.evaluate(("hello", True)) is Verdict.REJECT

    def test_short_keys_rejected(self):
        """Test that keys shorter than the pattern never reach predicates."""
        calls = []
        conditions = _sequence("hello", lambda v: calls.append(v) or True)
        assert conditions.evaluate(("hello",)) is Verdict.REJECT
        assert calls == []

    def test_predicate_results(self):
        """Test predicate accept, reject and DONE."""
        conditions = _sequence("hello", lambda v: DONE if v is True else v is False)
        assert conditions.evaluate(("hello", False)) is Verdict.ACCEPT
        assert conditions.evaluate(("hello", 1)) is Verdict.REJECT
        assert conditions.evaluate(("hello", True)) is Verdict.STOP

    def test_falsy_predicate_results_reject(self):
        """Test that 0, "" and other falsy results reject the key."""
        odd = _sequence("k", lambda n: n % 2)
        assert odd.evaluate(("k", 3)) is Verdict.ACCEPT
        assert odd.evaluate(("k", 4)) is Verdict.REJECT
        assert _sequence(lambda s: s.strip()).evaluate(("  ",)) is Verdict.REJECT

    def test_regex_position(self):
        """Test regex positions match strings only."""
        conditions = _sequence(re.compile("^us-"), "x")
        assert conditions.evaluate(("us-east", "x")) is Verdict.ACCEPT
        assert conditions.evaluate(("eu-west", "x")) is Verdict.REJECT
        assert conditions.evaluate((1, "x")) is Verdict.REJECT

    def test_first_failure_stops_evaluation(self):
        """Test that later positions are not evaluated after a failure."""
        calls = []
        conditions = _sequence(lambda v: False, lambda v: calls.append(v) or DONE)
        assert conditions.evaluate(("a", "b")) is Verdict.REJECT
        assert calls == []

    def test_empty_pattern(self):
        """Test that an empty sequence pattern accepts every key."""
        assert _sequence().evaluate(("anything",)) is Verdict.ACCEPT


class TestRangeConditions:
    """Tests for conditions built from a {start, end} pattern."""

    def test_literals_are_not_checked(self):
        """Test that literal endpoints impose nothing per record."""
        conditions = _range(["hello", False], ["hello", 1])
        assert conditions.evaluate(("hello", True)) is Verdict.ACCEPT
        assert conditions.evaluate(("hello",)) is Verdict.ACCEPT

    def test_start_then_end(self):
        """Test that the end sequence is tried when the start rejects."""
        conditions = _range(
            ["hello", lambda v: v is False],
            ["hello", lambda v: v is True],
        )
        assert conditions.evaluate(("hello", False)) is Verdict.ACCEPT
        assert conditions.evaluate(("hello", True)) is Verdict.ACCEPT
        assert conditions.evaluate(("hello", 1)) is Verdict.REJECT

    def test_start_accepts_without_end(self):
        """Test that an accepting start short-circuits the end."""
        calls = []
        conditions = _range([lambda v: True], [lambda v: calls.append(v) or DONE])
        assert conditions.evaluate(("a",)) is Verdict.ACCEPT
        assert calls == []

    def test_done_from_end(self):
        """Test that DONE from the end sequence stops the scan."""
        conditions = _range([lambda v: False], [lambda v: DONE])
        assert conditions.evaluate(("a",)) is Verdict.STOP

    def test_none_position_is_wildcard(self):
        """Test that a None endpoint does not constrain the key-part."""
        conditions = _range(["a", None, lambda v: v == 1])
        assert conditions.evaluate(("a", "anything", 1)) is Verdict.ACCEPT
        assert conditions.evaluate(("a", "anything", 2)) is Verdict.REJECT

    def test_predicates(self):
        """Test that predicates from both sides are collected."""
        first, second = (lambda v: True), (lambda v: True)
        assert _range([first], ["x", second]).predicates == [first, second]


class TestUnboundedWarning:
    """Tests for the early-termination warning."""

    def test_warns_without_done(self, caplog):
        """Test warning when no predicate can return DONE."""
        with caplog.at_level(logging.WARNING, logger="rangewhere.query.key_predicate"):
            assert warn_if_unbounded([lambda v: v > 1])
        assert "none references DONE" in caplog.text

    def test_quiet_with_done(self, caplog):
        """Test no warning when a predicate references DONE."""
        with caplog.at_level(logging.WARNING):
            assert not warn_if_unbounded([lambda v: v > 1, lambda v: DONE])
        assert caplog.records == []

    def test_quiet_without_predicates(self):
        """Test no warning for literal-only patterns."""
        assert not warn_if_unbounded([])

    def test_silent(self, caplog):
        """Test that silent suppresses the warning."""
        with caplog.at_level(logging.WARNING):
            assert not warn_if_unbounded([lambda v: v > 1], silent=True)
        assert caplog.records == []
