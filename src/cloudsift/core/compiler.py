"""Boolean query compiler — renders a FilterExpr as the service's boolean query text.

Example::

    >>> compile_filter({"and": {"type": "donuts", "price": 3}})
    "(and type:'donuts' price:3)"
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from cloudsift.models.filter import (
    Clause,
    FilterExpr,
    FilterValue,
    Leaf,
    LeafList,
    Logical,
    StringValue,
)


def compile_filter(expr: FilterExpr | Mapping[str, Any]) -> str:
    """Compile a filter expression (or a raw filter mapping) to boolean query text.

    Empty groups and empty string leaves are dropped; an empty expression
    compiles to ``""``. The only whitespace cleanup is turning ``" )"`` into
    ``")"``.
    """
    if not isinstance(expr, FilterExpr):
        expr = FilterExpr.from_mapping(expr)
    return _compile_clauses(expr.clauses).replace(" )", ")")


def _compile_clauses(clauses: Sequence[Clause]) -> str:
    return "".join(_compile_clause(clause) for clause in clauses)


def _compile_clause(clause: Clause) -> str:
    if isinstance(clause, Logical):
        sub_query = _compile_clauses(clause.children)
        return f"({clause.op.value} {sub_query})" if sub_query else ""
    if isinstance(clause, LeafList):
        return "".join(_compile_leaf(clause.field, value) for value in clause.values)
    if isinstance(clause, Leaf):
        return _compile_leaf(clause.field, clause.value)
    raise TypeError(f"Unknown filter clause: {clause!r}")


def _compile_leaf(field: str, value: FilterValue) -> str:
    if isinstance(value, StringValue) and not value.value:
        return ""
    return f"{field}:{value.render()} "
