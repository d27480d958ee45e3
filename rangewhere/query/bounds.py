"""
Bound Builder - turns a key pattern into a [start, end) range for the scan.

Bounds are conservative: every key the pattern can match lies inside them,
but keys inside them may still be rejected by per-record evaluation.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from rangewhere.models.exceptions import (
    BumpIndexRangeError,
    BumpIndexTypeError,
    PatternTypeError,
)
from rangewhere.models.keys import MAX_STRING, KeyTuple, successor
from rangewhere.query.patterns import Matcher, compile_key_sequence


@dataclass(frozen=True)
class Bounds:
    """Scan range; None on either side means unbounded."""

    start: KeyTuple | None = None
    end: KeyTuple | None = None


def build_bounds(
    pattern: Sequence[Any] | Mapping[str, Any],
    *,
    wide: bool = False,
    bump_index: int | None = None,
) -> Bounds:
    """
    Compute scan bounds for a raw key pattern.

    Args:
        pattern: A sequence of matchers or a {"start": ..., "end": ...} mapping.
        wide: Use the wide string successor.
        bump_index: Position whose successor forms the end bound.

    Returns:
        The Bounds to pass to the range scan.
    """
    if isinstance(pattern, Mapping):
        start, end = compile_range_pattern(pattern)
        return range_bounds(start, end, wide=wide, bump_index=bump_index)
    if isinstance(pattern, (list, tuple)):
        return sequence_bounds(compile_key_sequence(pattern), wide=wide, bump_index=bump_index)
    raise PatternTypeError(pattern)


def compile_range_pattern(
    pattern: Mapping[str, Any],
) -> tuple[tuple[Matcher, ...] | None, tuple[Matcher, ...] | None]:
    """
    Split a {"start": ..., "end": ...} pattern into compiled sides.

    A side may be omitted (or None). A scalar side is treated as a
    one-element sequence.

    Raises:
        PatternTypeError: If the mapping holds keys other than start/end.
    """
    unknown = set(pattern) - {"start", "end"}
    if unknown:
        raise PatternTypeError(
            pattern, f"range pattern accepts only 'start' and 'end', got {sorted(map(str, unknown))}"
        )
    sides = []
    for name in ("start", "end"):
        side = pattern.get(name)
        if side is None:
            sides.append(None)
        elif isinstance(side, (list, tuple)):
            sides.append(compile_key_sequence(side))
        else:
            sides.append(compile_key_sequence((side,)))
    return sides[0], sides[1]


def sequence_bounds(
    matchers: tuple[Matcher, ...], *, wide: bool = False, bump_index: int | None = None
) -> Bounds:
    """
    Bounds for a sequence pattern.

    The start is the literal prefix. The end repeats positions up to the bump
    index, with wildcard positions widened to MAX_STRING and the bump position
    replaced by its successor. None is an ordinary literal here.
    """
    start = _literal_prefix(matchers, none_is_wildcard=False)
    index = _resolve_bump_index(matchers, bump_index, none_is_wildcard=False)
    end = _bumped(matchers, index, wide, False) if index is not None else None
    return Bounds(start=start or None, end=end or None)


def range_bounds(
    start_matchers: tuple[Matcher, ...] | None,
    end_matchers: tuple[Matcher, ...] | None,
    *,
    wide: bool = False,
    bump_index: int | None = None,
) -> Bounds:
    """
    Bounds for a {start, end} pattern.

    None marks an unbounded position on either side. An all-literal end is
    taken verbatim as the exclusive end unless bump_index asks for a
    successor.
    """
    start = None
    if start_matchers is not None:
        start = _literal_prefix(start_matchers, none_is_wildcard=True)

    end = None
    if end_matchers is not None:
        if bump_index is None and not any(_is_wildcard(m, True) for m in end_matchers):
            end = tuple(m.value for m in end_matchers)
        else:
            index = _resolve_bump_index(end_matchers, bump_index, none_is_wildcard=True)
            if index is not None:
                end = _bumped(end_matchers, index, wide, True)
    return Bounds(start=start or None, end=end or None)


def _is_wildcard(matcher: Matcher, none_is_wildcard: bool) -> bool:
    if not matcher.is_literal:
        return True
    return none_is_wildcard and matcher.value is None


def _literal_prefix(matchers: tuple[Matcher, ...], none_is_wildcard: bool) -> KeyTuple:
    prefix = []
    for matcher in matchers:
        if _is_wildcard(matcher, none_is_wildcard):
            break
        prefix.append(matcher.value)
    return tuple(prefix)


def _resolve_bump_index(
    matchers: tuple[Matcher, ...], bump_index: int | None, none_is_wildcard: bool
) -> int | None:
    if bump_index is None:
        literal_positions = [
            i for i, m in enumerate(matchers) if not _is_wildcard(m, none_is_wildcard)
        ]
        return literal_positions[-1] if literal_positions else None

    if not isinstance(bump_index, int) or isinstance(bump_index, bool):
        raise BumpIndexTypeError(
            f"bump_index must be an int, got {type(bump_index).__name__}"
        )
    if not 0 <= bump_index < len(matchers):
        raise BumpIndexRangeError(bump_index, len(matchers))
    if _is_wildcard(matchers[bump_index], none_is_wildcard):
        raise BumpIndexTypeError(
            f"bump_index {bump_index} points at a wildcard position "
            f"({matchers[bump_index].kind.name.lower()}), which has no successor"
        )
    return bump_index


def _bumped(
    matchers: tuple[Matcher, ...], index: int, wide: bool, none_is_wildcard: bool
) -> KeyTuple | None:
    bumped = successor(matchers[index].value, wide=wide)
    if bumped is None:
        # Narrow string with no successor: leave the end open.
        return None
    parts = [
        MAX_STRING if _is_wildcard(m, none_is_wildcard) else m.value
        for m in matchers[:index]
    ]
    return tuple(parts) + (bumped,)
