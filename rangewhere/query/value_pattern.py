"""
Value Pattern Compiler - compiles a nested mapping into one value test.

    {"message": "my world"}                         literal field
    {"age": lambda v, key, parent: v >= 21}         predicate field
    {"address": {"zip": {"code": "10001"}}}         nested mapping
    {re.compile("mess.*"): lambda v, *_: ...}       every matching field

A compiled test returns a Verdict; DONE from any predicate becomes STOP and
ends evaluation at once.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from rangewhere.models.exceptions import PatternTypeError
from rangewhere.models.keys import same_part
from rangewhere.query.patterns import (
    DONE,
    UNDEFINED,
    Matcher,
    MatcherKind,
    Verdict,
    classify,
    field_of,
    fields_of,
    is_object_like,
    regex_matches,
    verdict_of,
)

ValueTest = Callable[[Any], Verdict]


def compile_value_pattern(pattern: Mapping[Any, Any] | Callable[[Any], Any] | None) -> ValueTest:
    """
    Compile a value pattern.

    Args:
        pattern: None (match everything), a callable applied to the whole
            value, or a nested mapping.

    Returns:
        A function mapping a stored value to a Verdict.

    Raises:
        PatternTypeError: For any other pattern type.
    """
    if pattern is None:
        return _accept
    if isinstance(pattern, Mapping):
        return _MappingTest.compile(pattern).test
    if callable(pattern):
        return lambda value: verdict_of(pattern(value))
    raise PatternTypeError(
        pattern, f"value pattern must be a mapping or a callable, not {type(pattern).__name__}"
    )


def _accept(value: Any) -> Verdict:
    return Verdict.ACCEPT


def _field_verdict(result: Any) -> Verdict:
    # A field predicate fails only on None or False; 0 and "" are real values.
    if result is DONE:
        return Verdict.STOP
    if result is None or result is False:
        return Verdict.REJECT
    return Verdict.ACCEPT


@dataclass(frozen=True)
class _FieldRule:
    """One `selector: sub-pattern` entry of a mapping pattern."""

    selector: Matcher
    sub: Matcher

    def evaluate(self, candidate: Any) -> Verdict:
        if self.selector.kind is MatcherKind.REGEX:
            for name, field in fields_of(candidate):
                if regex_matches(self.selector.value, str(name)):
                    verdict = self._test(field, name, candidate)
                    if verdict is not Verdict.ACCEPT:
                        return verdict
            return Verdict.ACCEPT

        name = self.selector.value
        return self._test(field_of(candidate, name), name, candidate)

    def _test(self, field: Any, name: Any, parent: Any) -> Verdict:
        kind = self.sub.kind
        if kind is MatcherKind.PREDICATE:
            return _field_verdict(self.sub.value(None if field is UNDEFINED else field, name, parent))
        if field is UNDEFINED:
            return Verdict.REJECT
        if kind is MatcherKind.NESTED:
            return self.sub.value.test(field)
        if kind is MatcherKind.REGEX:
            return Verdict.ACCEPT if regex_matches(self.sub.value, field) else Verdict.REJECT
        return Verdict.ACCEPT if same_part(field, self.sub.value) else Verdict.REJECT


@dataclass(frozen=True)
class _MappingTest:
    """Compiled form of one mapping level."""

    pattern: Mapping[Any, Any]
    rules: tuple[_FieldRule, ...]

    @classmethod
    def compile(cls, pattern: Mapping[Any, Any]) -> "_MappingTest":
        rules = []
        for key, sub in pattern.items():
            selector = classify(key)
            if selector.kind is not MatcherKind.REGEX:
                selector = Matcher(MatcherKind.LITERAL, key)
            sub_matcher = classify(sub)
            if sub_matcher.kind is MatcherKind.NESTED:
                sub_matcher = Matcher(MatcherKind.NESTED, cls.compile(sub))
            rules.append(_FieldRule(selector, sub_matcher))
        return cls(pattern=pattern, rules=tuple(rules))

    def test(self, candidate: Any) -> Verdict:
        if candidate is self.pattern or (
            isinstance(candidate, Mapping) and candidate == self.pattern
        ):
            return Verdict.ACCEPT
        if not is_object_like(candidate):
            return Verdict.REJECT

        for rule in self.rules:
            verdict = rule.evaluate(candidate)
            if verdict is not Verdict.ACCEPT:
                return verdict
        return Verdict.ACCEPT
