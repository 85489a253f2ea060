"""Tests for exceptions module."""

from __future__ import annotations

from vectorq_filters.exceptions import (
    FilterError,
    FilterParseError,
    OperatorNotFoundError,
    ValidationError,
)

# -- OperatorNotFoundError ---------------------------------------------------


def test_operator_not_found_fuzzy_suggestion():
    err = OperatorNotFoundError("nine", ["in", "nin", "neq"])
    assert "nine" in str(err)
    assert "nin" in err.suggestions


def test_operator_not_found_no_matches():
    err = OperatorNotFoundError("zzzzz", ["eq", "gt", "lt"])
    d = err.to_dict()
    assert d["error"] == "OPERATOR_NOT_FOUND"
    assert d["suggestions"] == []
    assert d["valid_operators"] == ["eq", "gt", "lt"]


# -- ValidationError ---------------------------------------------------------


def test_validation_error_with_path():
    err = ValidationError("Missing 'attr'", path="<root>.conditions[0]")
    assert err.path == "<root>.conditions[0]"
    d = err.to_dict()
    assert d["path"] == "<root>.conditions[0]"


def test_validation_error_no_path():
    err = ValidationError("Something broke")
    d = err.to_dict()
    assert d["path"] is None


# -- FilterParseError --------------------------------------------------------


def test_parse_error_carries_position():
    err = FilterParseError("Unexpected character '#'", "a # b", 2)
    assert err.position == 2
    assert err.text == "a # b"
    assert "position 2" in str(err)


# -- Hierarchy ---------------------------------------------------------------


def test_all_inherit_from_filter_error():
    assert issubclass(ValidationError, FilterError)
    assert issubclass(FilterParseError, ValidationError)
    assert issubclass(OperatorNotFoundError, FilterError)


def test_base_to_dict():
    d = FilterError("boom").to_dict()
    assert d == {"error": "FilterError", "message": "boom"}
