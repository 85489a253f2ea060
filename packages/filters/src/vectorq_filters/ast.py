"""
Portable filter expression tree.

A filter expression is a closed tagged variant of two node kinds:

- :class:`Comparison`: ``field <operator> value`` leaf
- :class:`Logical`: ``AND`` / ``OR`` / ``NOT`` over nested expressions

Nodes are frozen dataclasses.  Children must exist before their parent is
built, so every tree is finite and acyclic by construction.  All structural
invariants are checked in ``__post_init__`` and reported as
:class:`~vectorq_filters.exceptions.ValidationError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from .exceptions import ValidationError
from .operators import (
    COMPARISON_OPERATORS,
    LOGICAL_OPERATORS,
    MEMBERSHIP_OPERATORS,
    FilterOperator,
    normalize_operator,
)

Scalar = Union[str, int, float, bool]

_SCALAR_TYPES = (str, int, float, bool)


def is_scalar(value: Any) -> bool:
    """True for the literal types a comparison may carry."""
    return isinstance(value, _SCALAR_TYPES)


def _coerce_operator(op: FilterOperator | str) -> FilterOperator:
    try:
        return normalize_operator(op)
    except ValueError as exc:
        raise ValidationError(f"Unknown operator: {op!r}") from exc


class _Composable:
    """Logical composition via ``&``, ``|`` and ``~``.

    Chaining the same connective extends one n-ary node, so
    ``a & b & c`` is a single AND with three operands rather than a
    left-nested tree.
    """

    def __and__(self, other: FilterExpression) -> Logical:
        return _join(FilterOperator.AND, self, other)

    def __or__(self, other: FilterExpression) -> Logical:
        return _join(FilterOperator.OR, self, other)

    def __invert__(self) -> Logical:
        return Logical(FilterOperator.NOT, (self,))  # type: ignore[arg-type]


def _join(op: FilterOperator, left: Any, right: Any) -> Logical:
    if isinstance(left, Logical) and left.operator == op:
        return Logical(op, (*left.operands, right))
    return Logical(op, (left, right))


@dataclass(frozen=True)
class Comparison(_Composable):
    """Compare a single metadata field against a literal or list of literals."""

    field: str
    operator: FilterOperator
    value: Scalar | tuple[Scalar, ...]

    def __post_init__(self) -> None:
        op = _coerce_operator(self.operator)
        if op not in COMPARISON_OPERATORS:
            raise ValidationError(
                f"Operator '{op.value}' is not a comparison operator",
                path=self.field if isinstance(self.field, str) else None,
            )
        object.__setattr__(self, "operator", op)

        if not isinstance(self.field, str) or not self.field:
            raise ValidationError(
                f"Comparison field must be a non-empty string, got {self.field!r}"
            )

        if op in MEMBERSHIP_OPERATORS:
            object.__setattr__(self, "value", self._membership_values(op))
        elif not is_scalar(self.value):
            raise ValidationError(
                f"Operator '{op.value}' requires a string, number or boolean "
                f"value, got {type(self.value).__name__}",
                path=self.field,
            )

    def _membership_values(self, op: FilterOperator) -> tuple[Scalar, ...]:
        if isinstance(self.value, str) or not isinstance(self.value, list | tuple):
            raise ValidationError(
                f"Operator '{op.value}' requires a list of values, "
                f"got {type(self.value).__name__}",
                path=self.field,
            )
        for idx, item in enumerate(self.value):
            if not is_scalar(item):
                raise ValidationError(
                    f"Operator '{op.value}' values must be strings, numbers or "
                    f"booleans, got {type(item).__name__}",
                    path=f"{self.field}[{idx}]",
                )
        return tuple(self.value)

    @property
    def values(self) -> tuple[Scalar, ...]:
        """The comparison value(s) as a tuple, for scalar and list operators."""
        if isinstance(self.value, tuple):
            return self.value
        return (self.value,)

    def to_dict(self) -> dict[str, Any]:
        val = list(self.value) if isinstance(self.value, tuple) else self.value
        return {
            "op": self.operator.value,
            "attr": self.field,
            "val": val,
        }


@dataclass(frozen=True)
class Logical(_Composable):
    """Combine nested expressions with AND, OR or NOT."""

    operator: FilterOperator
    operands: tuple[FilterExpression, ...]

    def __post_init__(self) -> None:
        op = _coerce_operator(self.operator)
        if op not in LOGICAL_OPERATORS:
            raise ValidationError(f"Operator '{op.value}' is not a logical operator")
        object.__setattr__(self, "operator", op)

        operands = tuple(self.operands)
        for idx, child in enumerate(operands):
            if not isinstance(child, Comparison | Logical):
                raise ValidationError(
                    f"Operand must be a filter expression, got {type(child).__name__}",
                    path=f"{op.value}.operands[{idx}]",
                )

        if op == FilterOperator.NOT and len(operands) != 1:
            raise ValidationError(
                f"NOT takes exactly one operand, got {len(operands)}",
                path=op.value,
            )
        if op != FilterOperator.NOT and len(operands) < 2:
            raise ValidationError(
                f"{op.value.upper()} requires at least two operands, "
                f"got {len(operands)}",
                path=op.value,
            )
        object.__setattr__(self, "operands", operands)

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": self.operator.value,
            "conditions": [child.to_dict() for child in self.operands],
        }


FilterExpression = Union[Comparison, Logical]


def iter_comparisons(expression: FilterExpression) -> list[Comparison]:
    """Return every :class:`Comparison` leaf of *expression*, depth-first."""
    if isinstance(expression, Comparison):
        return [expression]
    leaves: list[Comparison] = []
    for child in expression.operands:
        leaves.extend(iter_comparisons(child))
    return leaves
