"""Tests for the boolean query compiler."""

from __future__ import annotations

import pytest

from cloudsift.core.compiler import compile_filter
from cloudsift.exceptions import FilterError
from cloudsift.models.filter import FilterExpr, IntValue, Leaf, LeafList, Logical, LogicalOp, RangeValue, StringValue


class TestLeaves:
    def test_string_leaf_is_quoted(self) -> None:
        assert compile_filter({"type": "donuts"}) == "type:'donuts' "

    def test_integer_leaf_is_unquoted(self) -> None:
        assert compile_filter({"price": 3}) == "price:3 "

    def test_range_leaf(self) -> None:
        assert compile_filter({"price": range(1, 6)}) == "price:1..5 "

    def test_explicit_range_value(self) -> None:
        assert compile_filter({"lat": RangeValue(start=10, end=20)}) == "lat:10..20 "

    def test_empty_string_leaf_is_dropped(self) -> None:
        assert compile_filter({"type": ""}) == ""

    def test_none_leaf_is_dropped(self) -> None:
        assert compile_filter({"type": None}) == ""

    def test_list_expands_to_one_leaf_per_value(self) -> None:
        assert compile_filter({"tag": ["glazed", "jelly"]}) == "tag:'glazed' tag:'jelly' "

    def test_nested_lists_flatten(self) -> None:
        assert compile_filter({"a": [[1, 2], 3]}) == "a:1 a:2 a:3 "


class TestLogicalGroups:
    def test_and_group(self) -> None:
        assert compile_filter({"and": {"type": "donuts"}}) == "(and type:'donuts')"

    def test_or_with_integer_list(self) -> None:
        assert compile_filter({"or": {"a": [1, 2]}}) == "(or a:1 a:2)"

    def test_not_group(self) -> None:
        assert compile_filter({"not": {"type": "bagels"}}) == "(not type:'bagels')"

    def test_nested_groups(self) -> None:
        query = compile_filter({"and": {"type": "donuts", "or": {"frosting": "chocolate", "price": 2}}})
        assert query == "(and type:'donuts' (or frosting:'chocolate' price:2))"

    def test_group_with_only_empty_leaves_is_elided(self) -> None:
        assert compile_filter({"and": {"type": ""}}) == ""

    def test_empty_nested_group_leaves_siblings(self) -> None:
        assert compile_filter({"and": {"or": {"type": ""}, "price": 1}}) == "(and price:1)"

    def test_order_follows_insertion_order(self) -> None:
        assert compile_filter({"and": {"b": 1, "a": 2}}) == "(and b:1 a:2)"
        assert compile_filter({"and": {"a": 2, "b": 1}}) == "(and a:2 b:1)"

    def test_logical_key_with_scalar_is_a_leaf(self) -> None:
        assert compile_filter({"and": "x"}) == "and:'x' "

    def test_list_of_groups_under_logical_key(self) -> None:
        assert compile_filter({"or": {"and": [{"a": 1}, {"b": 2}]}}) == "(or (and a:1)(and b:2))"

    def test_list_holding_mapping_under_field_key_is_rejected(self) -> None:
        with pytest.raises(FilterError):
            compile_filter({"type": [{"a": 1}]})


class TestWhitespaceCleanup:
    def test_only_space_before_close_paren_is_removed(self) -> None:
        query = compile_filter({"and": {"a": 1}, "b": 2})
        assert query == "(and a:1)b:2 "

    def test_cleanup_also_applies_inside_string_values(self) -> None:
        assert compile_filter({"name": "x )"}) == "name:'x)' "


class TestEdgeCases:
    def test_empty_mapping(self) -> None:
        assert compile_filter({}) == ""

    def test_empty_expression(self) -> None:
        assert compile_filter(FilterExpr()) == ""

    def test_compiles_prebuilt_expression(self) -> None:
        expr = FilterExpr(
            clauses=[
                Logical(
                    op=LogicalOp.OR,
                    children=[
                        Leaf(field="type", value=StringValue(value="donuts")),
                        LeafList(field="id", values=[IntValue(value=1), IntValue(value=2)]),
                    ],
                )
            ]
        )
        assert compile_filter(expr) == "(or type:'donuts' id:1 id:2)"
