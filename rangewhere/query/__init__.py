"""
Query pipeline: bounds, key and value predicates, projection, iteration.
"""

from rangewhere.query.bounds import Bounds, build_bounds
from rangewhere.query.driver import RangeQuery, async_query_where, query_where
from rangewhere.query.patterns import ANY, DONE, NOTNULL, UNDEFINED, Verdict, limit
from rangewhere.query.selector import ProjectionBuilder, SelectionContext, select
from rangewhere.query.value_pattern import compile_value_pattern

__all__ = [
    "ANY",
    "DONE",
    "NOTNULL",
    "UNDEFINED",
    "Bounds",
    "ProjectionBuilder",
    "RangeQuery",
    "SelectionContext",
    "Verdict",
    "async_query_where",
    "build_bounds",
    "compile_value_pattern",
    "limit",
    "query_where",
    "select",
]
