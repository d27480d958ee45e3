"""
Tests for value pattern compilation and the predicate helpers.
"""

import re

import pytest

from rangewhere.models.exceptions import PatternTypeError
from rangewhere.query.patterns import (
    ANY,
    DONE,
    NOTNULL,
    Verdict,
    limit,
    references_done,
    verdict_of,
)
from rangewhere.query.value_pattern import compile_value_pattern

PERSON = {
    "name": "John",
    "age": 30,
    "address": {"city": "Seattle", "stateOrProvince": "WA", "country": "US"},
}


class TestVerdicts:
    """Tests for the predicate result convention."""

    def test_verdict_of(self):
        """Test that DONE stops, falsy results reject and truthy ones accept."""
        assert verdict_of(DONE) is Verdict.STOP
        assert verdict_of(None) is Verdict.REJECT
        assert verdict_of(False) is Verdict.REJECT
        assert verdict_of(0) is Verdict.REJECT
        assert verdict_of("") is Verdict.REJECT
        assert verdict_of([]) is Verdict.REJECT
        assert verdict_of(True) is Verdict.ACCEPT
        assert verdict_of(1) is Verdict.ACCEPT
        assert verdict_of("x") is Verdict.ACCEPT

    def test_any_and_notnull(self):
        """Test the ready-made predicates."""
        assert ANY(None) is True
        assert ANY(1, "k", {}) is True
        assert NOTNULL(0) is True
        assert NOTNULL(None) is None

    def test_limit(self):
        """Test that limit returns DONE after count matches."""
        evens = limit(lambda v: v % 2 == 0, 2)
        results = [evens(v) for v in range(6)]
        assert results == [True, False, True, DONE, DONE, DONE]

    def test_limit_counts_truthy_matches(self):
        """Test that limit counts only truthy results as matches."""
        odd = limit(lambda v: v % 2, 2)
        assert [odd(v) for v in range(5)] == [0, 1, 0, 1, DONE]

    def test_references_done(self):
        """Test detection of predicates that can stop a scan."""
        assert references_done(lambda v: DONE if v > 3 else True)
        assert references_done(limit(ANY, 1))
        assert not references_done(lambda v: v > 3)
        assert not references_done(len)


class TestCompileValuePattern:
    """Tests for compile_value_pattern."""

    def test_none_accepts_everything(self):
        """Test that no pattern accepts every value."""
        test = compile_value_pattern(None)
        assert test("world") is Verdict.ACCEPT
        assert test(None) is Verdict.ACCEPT

    def test_callable(self):
        """Test a whole-value callable."""
        test = compile_value_pattern(lambda v: isinstance(v, str) or DONE)
        assert test("world") is Verdict.ACCEPT
        assert test({"a": 1}) is Verdict.STOP

    def test_literal_field(self):
        """Test literal field equality."""
        test = compile_value_pattern({"message": "my world"})
        assert test({"message": "my world"}) is Verdict.ACCEPT
        assert test({"message": "your world"}) is Verdict.REJECT
        assert test({"other": "my world"}) is Verdict.REJECT

    def test_literal_bool_is_not_number(self):
        """Test that True does not match 1."""
        test = compile_value_pattern({"flag": True})
        assert test({"flag": True}) is Verdict.ACCEPT
        assert test({"flag": 1}) is Verdict.REJECT

    def test_scalar_values_rejected(self):
        """Test that a mapping pattern rejects scalar values."""
        test = compile_value_pattern({"message": "my world"})
        assert test("world") is Verdict.REJECT
        assert test(None) is Verdict.REJECT

    def test_equal_value_short_circuits(self):
        """Test that a value equal to the pattern is accepted outright."""
        pattern = {"message": "my world", "count": 2}
        test = compile_value_pattern(pattern)
        assert test(dict(pattern)) is Verdict.ACCEPT

    def test_predicate_field(self):
        """Test predicate fields receive value, name and parent."""
        seen = []

        def adult(value, name, parent):
            seen.append((value, name, parent is PERSON))
            return value >= 21

        test = compile_value_pattern({"age": adult})
        assert test(PERSON) is Verdict.ACCEPT
        assert seen == [(30, "age", True)]

    def test_predicate_falsy_result(self):
        """Test that a field predicate fails only on None or False."""
        test = compile_value_pattern({"count": lambda v, *_: v})
        assert test({"count": 0}) is Verdict.ACCEPT
        assert test({"count": ""}) is Verdict.ACCEPT
        assert test({"count": False}) is Verdict.REJECT
        assert test({"count": None}) is Verdict.REJECT

    def test_predicate_missing_field(self):
        """Test that a predicate sees None for a missing field."""
        test = compile_value_pattern({"name": NOTNULL})
        assert test(PERSON) is Verdict.ACCEPT
        assert test({"age": 30}) is Verdict.REJECT

    def test_nested(self):
        """Test nested mapping patterns."""
        test = compile_value_pattern({"address": {"city": "Seattle", "country": ANY}})
        assert test(PERSON) is Verdict.ACCEPT
        assert test({"address": {"city": "Boston", "country": "US"}}) is Verdict.REJECT
        assert test({"address": "Seattle"}) is Verdict.REJECT
        assert test({"name": "x"}) is Verdict.REJECT

    def test_regex_value(self):
        """Test regex sub-patterns match string fields."""
        test = compile_value_pattern({"name": re.compile("^Jo")})
        assert test(PERSON) is Verdict.ACCEPT
        assert test({"name": "Ann"}) is Verdict.REJECT
        assert test({"name": 7}) is Verdict.REJECT

    def test_regex_field_selector(self):
        """Test that a regex key applies to every matching field."""
        test = compile_value_pattern(
            {"address": {re.compile("^(city|country)$"): lambda v, *_: v[0].isupper()}}
        )
        assert test(PERSON) is Verdict.ACCEPT
        assert test({"address": {"city": "Seattle", "country": "us"}}) is Verdict.REJECT

    def test_regex_selector_without_matches(self):
        """Test that a regex key matching no fields imposes nothing."""
        test = compile_value_pattern({re.compile("^zzz"): lambda *_: False})
        assert test(PERSON) is Verdict.ACCEPT

    def test_done_in_field(self):
        """Test that DONE from a nested predicate stops at once."""
        calls = []

        def stop(*args):
            calls.append(args)
            return DONE

        test = compile_value_pattern({"age": stop, "name": lambda *a: calls.append(a) or True})
        assert test(PERSON) is Verdict.STOP
        assert len(calls) == 1

    def test_list_values(self):
        """Test that list values are addressed by index."""
        test = compile_value_pattern({0: "a", 2: ANY})
        assert test(["a", "b", "c"]) is Verdict.ACCEPT
        assert test(["a", "b"]) is Verdict.ACCEPT
        assert test(["b"]) is Verdict.REJECT

    def test_invalid_pattern(self):
        """Test that unsupported pattern types are rejected."""
        with pytest.raises(PatternTypeError):
            compile_value_pattern("my world")
        with pytest.raises(TypeError):
            compile_value_pattern(["my world"])
