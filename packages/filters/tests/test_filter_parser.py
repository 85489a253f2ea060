"""Tests for the filter text expression parser."""

from __future__ import annotations

import pytest

from vectorq_filters import (
    FilterOperator,
    FilterParseError,
    ValidationError,
    and_,
    eq,
    gt,
    gte,
    in_,
    lt,
    lte,
    neq,
    nin,
    not_,
    or_,
    parse_expression,
)
from vectorq_filters.parser import MAX_NESTING_DEPTH, tokenize


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("country == 'UK'", eq("country", "UK")),
        ('country != "UK"', neq("country", "UK")),
        ("year > 2020", gt("year", 2020)),
        ("year >= 2020", gte("year", 2020)),
        ("rating < 3.5", lt("rating", 3.5)),
        ("rating <= -1", lte("rating", -1)),
        ("isOpen == true", eq("isOpen", True)),
        ("isOpen == FALSE", eq("isOpen", False)),
    ],
)
def test_comparisons(text, expected):
    assert parse_expression(text) == expected


def test_and_chain_is_one_node():
    expr = parse_expression("country == 'UK' && year >= 2020 && isOpen == true")
    assert expr == and_(eq("country", "UK"), gte("year", 2020), eq("isOpen", True))


def test_keyword_connectives_case_insensitive():
    expr = parse_expression("country == 'UK' and year >= 2020 Or genre == 'drama'")
    assert expr == or_(
        and_(eq("country", "UK"), gte("year", 2020)),
        eq("genre", "drama"),
    )


def test_and_binds_tighter_than_or():
    expr = parse_expression("a == 1 || b == 2 && c == 3")
    assert expr == or_(eq("a", 1), and_(eq("b", 2), eq("c", 3)))


def test_parentheses_override_precedence():
    expr = parse_expression("(a == 1 || b == 2) && c == 3")
    assert expr == and_(or_(eq("a", 1), eq("b", 2)), eq("c", 3))


def test_in_list():
    expr = parse_expression("country IN ['UK', 'NL']")
    assert expr == in_("country", ["UK", "NL"])


def test_nin_and_not_in():
    assert parse_expression("year NIN [2019, 2020]") == nin("year", [2019, 2020])
    assert parse_expression("year not in [2019]") == nin("year", [2019])


def test_empty_in_list():
    assert parse_expression("country in []") == in_("country", [])


def test_not_prefix():
    assert parse_expression("NOT (year < 2020)") == not_(lt("year", 2020))
    assert parse_expression("!isOpen == true") == not_(eq("isOpen", True))


def test_quoted_identifier_and_escapes():
    expr = parse_expression(r"`in` == 'it\'s'")
    assert expr == eq("in", "it's")


def test_dotted_identifier():
    assert parse_expression("author.name == 'x'") == eq("author.name", "x")


def test_float_exponent():
    assert parse_expression("score > 1e3") == gt("score", 1000.0)


def test_tokenize_positions():
    tokens = tokenize("a == 1")
    assert [(t.kind, t.position) for t in tokens] == [
        ("ident", 0),
        ("==", 2),
        ("literal", 5),
        ("eof", 6),
    ]


# -- Errors ------------------------------------------------------------------


@pytest.mark.parametrize(
    ("text", "position"),
    [
        ("", 0),
        ("country", 7),
        ("country == ", 11),
        ("country == 'UK' &&", 18),
        ("(a == 1", 7),
        ("a == 1 b == 2", 7),
        ("a IN ['x',", 10),
        ("a == 1 # comment", 7),
    ],
)
def test_syntax_errors_report_position(text, position):
    with pytest.raises(FilterParseError) as exc_info:
        parse_expression(text)
    assert exc_info.value.position == position


def test_parse_error_is_validation_error():
    with pytest.raises(ValidationError):
        parse_expression("a = 1")


def test_parse_error_to_dict():
    with pytest.raises(FilterParseError) as exc_info:
        parse_expression("a ==")
    data = exc_info.value.to_dict()
    assert data["error"] == "FILTER_PARSE_ERROR"
    assert data["position"] == 4


def test_non_string_input():
    with pytest.raises(FilterParseError):
        parse_expression(None)  # type: ignore[arg-type]


# -- Nesting depth -----------------------------------------------------------


def test_nesting_at_limit_parses():
    depth = MAX_NESTING_DEPTH
    assert parse_expression("(" * depth + "a == 1" + ")" * depth) == eq("a", 1)
    expr = parse_expression("NOT " * depth + "a == 1")
    for _ in range(depth):
        assert expr.operator is FilterOperator.NOT
        expr = expr.operands[0]
    assert expr == eq("a", 1)


@pytest.mark.parametrize(
    ("text", "position"),
    [
        ("(" * 600 + "a == 1" + ")" * 600, MAX_NESTING_DEPTH),
        ("NOT " * 1500 + "a == 1", 4 * MAX_NESTING_DEPTH),
        ("!" * 1500 + "a == 1", MAX_NESTING_DEPTH),
    ],
)
def test_excessive_nesting_is_a_parse_error(text, position):
    with pytest.raises(FilterParseError, match="nests deeper") as exc_info:
        parse_expression(text)
    assert exc_info.value.position == position
