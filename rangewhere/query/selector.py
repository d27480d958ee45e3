"""
Selector / Projector - reshapes a matched value into the requested output.

A selection spec mirrors the shape of the value:

    {
        "age": 30,                                   keep age only if it equals 30
        "address": {
            "city": lambda v, ctx: ctx.root.set("city", v.upper()),
            re.compile(".*(state).*"): lambda v, ctx: v,   stateOrProvince -> state
            "country": ANY,
        },
    }

Callable leaves receive (value, SelectionContext) and may write sibling
fields onto the record's root accumulator through ``context.root``.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from rangewhere.models.keys import same_part
from rangewhere.query.patterns import UNDEFINED, field_of, fields_of, is_object_like


class ProjectionBuilder:
    """
    Root accumulator for one record's projection.

    Created once per record and shared by reference with every nested call,
    so a leaf can populate fields anywhere on the top-level output.
    """

    def __init__(self, spec: Any) -> None:
        self.result: dict[Any, Any] | list[Any] = [] if isinstance(spec, (list, tuple)) else {}

    def set(self, name: Any, value: Any) -> None:
        """Write a field on the root output. Returns None, so a leaf can end with it."""
        _assign(self.result, name, value)

    def __setitem__(self, name: Any, value: Any) -> None:
        _assign(self.result, name, value)

    def __getitem__(self, name: Any) -> Any:
        return self.result[name]

    def __contains__(self, name: Any) -> bool:
        if isinstance(self.result, list):
            return isinstance(name, int) and 0 <= name < len(self.result)
        return name in self.result


@dataclass(frozen=True)
class SelectionContext:
    """
    What a callable leaf knows about its position.

    Attributes:
        key: Field name in the parent value (the record key at top level).
        source: The parent value the field was read from (None at top level).
        root: The record's ProjectionBuilder.
        output_name: Name the result will be stored under.
    """

    key: Any
    source: Any
    root: ProjectionBuilder
    output_name: Any = None


def select(spec: Any, value: Any, key: Any = None) -> Any:
    """
    Project one record's value.

    Args:
        spec: Selection spec; None returns the value unchanged.
        value: The stored value.
        key: The record key, exposed to top-level callables as context.key.

    Returns:
        The projection, or UNDEFINED if the record should be skipped.

    A top-level callable's root writes are merged under its result when it
    returns a mapping (returned fields win). They are discarded when it
    returns anything else.
    """
    if spec is None:
        return value
    builder = ProjectionBuilder(spec)
    context = SelectionContext(key=key, source=None, root=builder)
    projected = project(spec, value, context, into=builder.result)
    if (
        isinstance(projected, Mapping)
        and projected is not builder.result
        and builder.result
    ):
        projected = {**builder.result, **projected}
    return projected


def project(spec: Any, value: Any, context: SelectionContext, into: Any = None) -> Any:
    """
    Recursively project value through spec.

    Args:
        spec: Callable, mapping, sequence, or scalar literal.
        value: The value at this position; UNDEFINED when the field is missing.
        context: Position information, shared root included.
        into: Container to fill instead of a fresh one (the root at top level).

    Returns:
        The projected value, or UNDEFINED to drop it.
    """
    if callable(spec) and not isinstance(spec, re.Pattern):
        result = spec(None if value is UNDEFINED else value, context)
        return UNDEFINED if result is None else result

    if isinstance(spec, Mapping):
        if not is_object_like(value):
            return UNDEFINED
        out = into if into is not None else {}
        for key, sub in spec.items():
            if isinstance(key, re.Pattern):
                _project_matching(key, sub, value, context, out)
            else:
                child = project(
                    sub,
                    field_of(value, key),
                    SelectionContext(key=key, source=value, root=context.root, output_name=key),
                )
                if child is not UNDEFINED:
                    _assign(out, key, child)
        return out

    if isinstance(spec, (list, tuple)):
        if not is_object_like(value):
            return UNDEFINED
        out = into if into is not None else []
        for index, sub in enumerate(spec):
            child = project(
                sub,
                field_of(value, index),
                SelectionContext(key=index, source=value, root=context.root, output_name=index),
            )
            if child is not UNDEFINED:
                _assign(out, index, child)
        return out

    if value is not UNDEFINED and same_part(value, spec):
        return value
    return UNDEFINED


def _project_matching(
    regex: re.Pattern, sub: Any, value: Any, context: SelectionContext, out: Any
) -> None:
    for name, field in list(fields_of(value)):
        match = regex.search(str(name))
        if match is None:
            continue
        output_name = match.group(1) if regex.groups else match.group(0)
        child = project(
            sub,
            field,
            SelectionContext(key=name, source=value, root=context.root, output_name=output_name),
        )
        if child is not UNDEFINED:
            _assign(out, output_name, child)


def _assign(container: Any, name: Any, value: Any) -> None:
    if isinstance(container, list):
        # Positions skipped by a dropped projection are padded with None.
        while len(container) <= name:
            container.append(None)
    container[name] = value
