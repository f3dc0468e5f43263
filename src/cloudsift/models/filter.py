"""Filter expression model — the structured input of the boolean query compiler.

A filter is written by callers as a nested mapping::

    {"and": {"type": "donuts", "price": range(1, 6), "or": {"tag": ["glazed", "jelly"]}}}

``FilterExpr.from_mapping`` is the single place where Python values are
inspected. It turns the mapping into an ordered list of tagged clauses:

  - ``Logical`` — ``and`` / ``or`` / ``not`` over child clauses
  - ``Leaf`` — one field with one value
  - ``LeafList`` — one field with several values

Leaf values carry an explicit kind (``IntValue``, ``RangeValue``,
``StringValue``), so the compiler never needs to look at raw Python types.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from cloudsift.exceptions import FilterError


class LogicalOp(str, Enum):
    """Boolean operators understood by the search service."""

    AND = "and"
    OR = "or"
    NOT = "not"


_LOGICAL_OPS = frozenset(op.value for op in LogicalOp)


class IntValue(BaseModel):
    """An integer leaf value, rendered unquoted."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["int"] = "int"
    value: int

    def render(self) -> str:
        return str(self.value)


class RangeValue(BaseModel):
    """An inclusive integer range, rendered as ``start..end``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["range"] = "range"
    start: int
    end: int

    @classmethod
    def from_range(cls, value: range) -> RangeValue:
        """Convert a half-open Python ``range`` to its inclusive form."""
        if value.step != 1 or len(value) == 0:
            raise FilterError(f"Only non-empty ranges with step 1 can be used in a filter, got {value!r}")
        return cls(start=value.start, end=value.stop - 1)

    def render(self) -> str:
        return f"{self.start}..{self.end}"


class StringValue(BaseModel):
    """A text leaf value, rendered single-quoted. Empty strings are dropped."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["string"] = "string"
    value: str = ""

    def render(self) -> str:
        return f"'{self.value}'"


FilterValue = Annotated[Union[IntValue, RangeValue, StringValue], Field(discriminator="kind")]


class Leaf(BaseModel):
    """``field:value``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["leaf"] = "leaf"
    field: str
    value: FilterValue


class LeafList(BaseModel):
    """The same field matched against every value in turn."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["leaf_list"] = "leaf_list"
    field: str
    values: list[FilterValue] = Field(default_factory=list)


class Logical(BaseModel):
    """A boolean group, e.g. ``(and ...)``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["logical"] = "logical"
    op: LogicalOp
    children: list[Clause] = Field(default_factory=list)


Clause = Annotated[Union[Logical, Leaf, LeafList], Field(discriminator="kind")]
Logical.model_rebuild()


class FilterExpr(BaseModel):
    """An ordered sequence of filter clauses.

    Clause order is preserved and decides the order of the compiled query
    text, so mappings passed to ``from_mapping`` keep their insertion order.
    """

    model_config = ConfigDict(frozen=True)

    clauses: list[Clause] = Field(default_factory=list)

    @classmethod
    def from_mapping(cls, terms: Mapping[str, Any]) -> FilterExpr:
        """Build a filter expression from a nested mapping.

        A list value adds one clause per element, as if each element were
        written under the same key. Lists of groups (``{"and": [{...}, {...}]}``)
        produce one group per element, and nested lists flatten.

        Raises:
            FilterError: If a field (non-logical) key holds a mapping.
        """
        return cls(clauses=_clauses_from_mapping(terms))

    def is_empty(self) -> bool:
        return not self.clauses


def to_filter_value(value: Any) -> FilterValue:
    """Give a scalar Python value its explicit filter kind."""
    if isinstance(value, (IntValue, RangeValue, StringValue)):
        return value
    if value is None:
        return StringValue()
    if isinstance(value, bool):
        return StringValue(value=str(value).lower())
    if isinstance(value, int):
        return IntValue(value=value)
    if isinstance(value, range):
        return RangeValue.from_range(value)
    return StringValue(value=str(value))


def _clauses_from_mapping(terms: Mapping[str, Any]) -> list[Clause]:
    clauses: list[Clause] = []
    for key, value in terms.items():
        name = key.value if isinstance(key, LogicalOp) else str(key)
        if name in _LOGICAL_OPS and isinstance(value, Mapping):
            clauses.append(Logical(op=LogicalOp(name), children=_clauses_from_mapping(value)))
        elif isinstance(value, Mapping):
            raise FilterError(f"Field '{name}' cannot hold a nested mapping; only and/or/not may nest")
        elif isinstance(value, (list, tuple)):
            if any(isinstance(v, (Mapping, list, tuple)) for v in value):
                # Each element compiles as {name: element}; nested groups and lists splice in place.
                for element in value:
                    clauses.extend(_clauses_from_mapping({name: element}))
            else:
                clauses.append(LeafList(field=name, values=[to_filter_value(v) for v in value]))
        else:
            clauses.append(Leaf(field=name, value=to_filter_value(value)))
    return clauses
