"""Tests for the portable filter expression nodes."""

from __future__ import annotations

import dataclasses
import functools
import operator

import pytest

from vectorq_filters import (
    Comparison,
    FilterOperator,
    Logical,
    ValidationError,
    eq,
    gte,
    iter_comparisons,
)

# -- Comparison --------------------------------------------------------------


def test_comparison_accepts_string_operator():
    node = Comparison("country", "eq", "UK")
    assert node.operator is FilterOperator.EQ


def test_comparison_accepts_operator_alias():
    node = Comparison("year", ">=", 2020)
    assert node.operator is FilterOperator.GTE


def test_membership_value_is_stored_as_tuple():
    node = Comparison("country", FilterOperator.IN, ["UK", "NL"])
    assert node.value == ("UK", "NL")
    assert node.values == ("UK", "NL")


def test_scalar_values_property_wraps_value():
    assert eq("country", "UK").values == ("UK",)


def test_membership_allows_empty_list():
    node = Comparison("country", FilterOperator.NIN, [])
    assert node.value == ()


@pytest.mark.parametrize("field", ["", None, 42])
def test_comparison_rejects_invalid_field(field):
    with pytest.raises(ValidationError):
        Comparison(field, FilterOperator.EQ, "x")


def test_comparison_rejects_logical_operator():
    with pytest.raises(ValidationError, match="not a comparison operator"):
        Comparison("country", FilterOperator.AND, "UK")


def test_comparison_rejects_unknown_operator():
    with pytest.raises(ValidationError, match="Unknown operator"):
        Comparison("country", "like", "UK")


@pytest.mark.parametrize("op", [None, 1, ["eq"]])
def test_comparison_rejects_non_string_operator(op):
    with pytest.raises(ValidationError, match="Unknown operator"):
        Comparison("country", op, "UK")


def test_scalar_operator_rejects_list_value():
    with pytest.raises(ValidationError) as exc_info:
        Comparison("country", FilterOperator.EQ, ["UK"])
    assert exc_info.value.path == "country"


def test_scalar_operator_rejects_none():
    with pytest.raises(ValidationError):
        Comparison("country", FilterOperator.EQ, None)


def test_membership_rejects_plain_string():
    with pytest.raises(ValidationError, match="requires a list"):
        Comparison("country", FilterOperator.IN, "UK")


def test_membership_rejects_nested_values():
    with pytest.raises(ValidationError) as exc_info:
        Comparison("country", FilterOperator.IN, ["UK", ["NL"]])
    assert exc_info.value.path == "country[1]"


def test_nodes_are_immutable():
    node = eq("country", "UK")
    with pytest.raises(dataclasses.FrozenInstanceError):
        node.field = "city"  # type: ignore[misc]


# -- Logical -----------------------------------------------------------------


def test_and_requires_two_operands():
    with pytest.raises(ValidationError, match="at least two operands"):
        Logical(FilterOperator.AND, (eq("a", 1),))


def test_or_rejects_empty_operands():
    with pytest.raises(ValidationError):
        Logical(FilterOperator.OR, ())


def test_not_requires_exactly_one_operand():
    with pytest.raises(ValidationError, match="exactly one operand"):
        Logical(FilterOperator.NOT, (eq("a", 1), eq("b", 2)))


def test_logical_rejects_comparison_operator():
    with pytest.raises(ValidationError, match="not a logical operator"):
        Logical(FilterOperator.EQ, (eq("a", 1), eq("b", 2)))


def test_logical_rejects_non_node_operand():
    with pytest.raises(ValidationError) as exc_info:
        Logical(FilterOperator.AND, (eq("a", 1), {"op": "eq"}))  # type: ignore[arg-type]
    assert exc_info.value.path == "and.operands[1]"


def test_logical_operands_stored_as_tuple():
    node = Logical(FilterOperator.OR, [eq("a", 1), eq("b", 2)])  # type: ignore[arg-type]
    assert isinstance(node.operands, tuple)


# -- Composition operators ---------------------------------------------------


def test_and_operator():
    expr = eq("country", "UK") & gte("year", 2020)
    assert expr == Logical(
        FilterOperator.AND, (eq("country", "UK"), gte("year", 2020))
    )


def test_or_operator():
    expr = eq("country", "UK") | eq("country", "NL")
    assert expr.operator is FilterOperator.OR
    assert len(expr.operands) == 2


def test_invert_operator():
    expr = ~eq("draft", True)
    assert expr.operator is FilterOperator.NOT
    assert expr.operands == (eq("draft", True),)


def test_structural_equality_and_hash():
    a = eq("country", "UK") & gte("year", 2020)
    b = eq("country", "UK") & gte("year", 2020)
    assert a == b
    assert hash(a) == hash(b)


def test_chained_and_extends_one_node():
    a, b, c = eq("a", 1), eq("b", 2), eq("c", 3)
    assert a & b & c == Logical(FilterOperator.AND, (a, b, c))


def test_chained_or_does_not_absorb_other_connective():
    a, b, c = eq("a", 1), eq("b", 2), eq("c", 3)
    expr = (a & b) | c
    assert expr == Logical(
        FilterOperator.OR, (Logical(FilterOperator.AND, (a, b)), c)
    )


def test_long_chain_stays_flat():
    expr = functools.reduce(operator.or_, [eq("year", i) for i in range(500)])
    assert expr.operator is FilterOperator.OR
    assert len(expr.operands) == 500
    assert all(isinstance(child, Comparison) for child in expr.operands)


# -- Serialisation -----------------------------------------------------------


def test_to_dict_nested():
    expr = Logical(
        FilterOperator.AND,
        (
            Comparison("country", FilterOperator.IN, ["UK", "NL"]),
            gte("year", 2020),
        ),
    )
    assert expr.to_dict() == {
        "op": "and",
        "conditions": [
            {"op": "in", "attr": "country", "val": ["UK", "NL"]},
            {"op": "gte", "attr": "year", "val": 2020},
        ],
    }


def test_iter_comparisons_depth_first():
    a, b, c = eq("a", 1), eq("b", 2), eq("c", 3)
    expr = (a | b) & ~c
    assert iter_comparisons(expr) == [a, b, c]
