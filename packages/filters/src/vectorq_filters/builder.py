"""
Expression builders for portable filter trees.

Free functions build one node each::

    expr = and_(eq("country", "UK"), gte("year", 2020))
    # → AND(country == "UK", year >= 2020)

    expr = in_("country", ["UK", "NL"]) & ~eq("draft", True)

The fluent :class:`FilterBuilder` composes the same trees incrementally::

    expr = (
        FilterBuilder()
        .or_group()
            .where("genre", "eq", "drama")
            .where("genre", "eq", "comedy")
        .end_group()
        .where("year", "gte", 2020)
        .build()
    )
    # → AND(OR(genre == "drama", genre == "comedy"), year >= 2020)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .ast import Comparison, FilterExpression, Logical
from .operators import FilterOperator

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .ast import Scalar


# -- comparison nodes --------------------------------------------------------


def eq(field: str, value: Scalar) -> Comparison:
    return Comparison(field, FilterOperator.EQ, value)


def neq(field: str, value: Scalar) -> Comparison:
    return Comparison(field, FilterOperator.NEQ, value)


def gt(field: str, value: Scalar) -> Comparison:
    return Comparison(field, FilterOperator.GT, value)


def gte(field: str, value: Scalar) -> Comparison:
    return Comparison(field, FilterOperator.GTE, value)


def lt(field: str, value: Scalar) -> Comparison:
    return Comparison(field, FilterOperator.LT, value)


def lte(field: str, value: Scalar) -> Comparison:
    return Comparison(field, FilterOperator.LTE, value)


def in_(field: str, values: Iterable[Scalar]) -> Comparison:
    """Field equals any of *values*."""
    return Comparison(field, FilterOperator.IN, _as_tuple(values))


def nin(field: str, values: Iterable[Scalar]) -> Comparison:
    """Field equals none of *values*."""
    return Comparison(field, FilterOperator.NIN, _as_tuple(values))


def _as_tuple(values: Any) -> Any:
    # Strings stay as-is so the node rejects them instead of splitting characters
    if isinstance(values, str | list | tuple):
        return values
    try:
        return tuple(values)
    except TypeError:
        return values


# -- logical nodes -----------------------------------------------------------


def and_(*operands: FilterExpression) -> Logical:
    return Logical(FilterOperator.AND, operands)


def or_(*operands: FilterExpression) -> Logical:
    return Logical(FilterOperator.OR, operands)


def not_(operand: FilterExpression) -> Logical:
    return Logical(FilterOperator.NOT, (operand,))


# -- fluent builder ----------------------------------------------------------


class FilterBuilder:
    """
    Fluent builder for composing filter trees.

    Conditions added at the same level are combined with AND by default.
    Use ``or_group()`` / ``and_group()`` / ``not_group()`` for explicit
    grouping, and ``end_group()`` to close the current group.
    """

    def __init__(self) -> None:
        self._nodes: list[FilterExpression] = []
        # stack items: (group_operator, nodes_list)
        self._stack: list[tuple[FilterOperator, list[FilterExpression]]] = []

    # -- leaf conditions -----------------------------------------------------

    def where(
        self,
        field: str,
        op: FilterOperator | str,
        value: Any,
    ) -> FilterBuilder:
        """Add a single field condition to the current group."""
        if isinstance(value, list):
            value = tuple(value)
        self._current_list().append(Comparison(field, op, value))  # type: ignore[arg-type]
        return self

    def add(self, expression: FilterExpression) -> FilterBuilder:
        """Add an already-constructed expression to the current group."""
        self._current_list().append(expression)
        return self

    # -- grouping ------------------------------------------------------------

    def and_group(self) -> FilterBuilder:
        """Open a new AND group.  Close with ``end_group()``."""
        self._stack.append((FilterOperator.AND, []))
        return self

    def or_group(self) -> FilterBuilder:
        """Open a new OR group.  Close with ``end_group()``."""
        self._stack.append((FilterOperator.OR, []))
        return self

    def not_group(self) -> FilterBuilder:
        """Open a new NOT group (single child).  Close with ``end_group()``."""
        self._stack.append((FilterOperator.NOT, []))
        return self

    def end_group(self) -> FilterBuilder:
        """Close the current group and add it to the parent."""
        if not self._stack:
            raise ValueError("No open group to close")
        group_op, nodes = self._stack.pop()
        self._current_list().append(_combine(group_op, nodes))
        return self

    # -- build ---------------------------------------------------------------

    def build(self) -> FilterExpression:
        """
        Finalise and return the composed expression.

        If there is a single condition, returns it directly.
        Multiple conditions at the top level are combined with AND.

        Raises:
            ValueError: If groups are still open or no conditions were added.
        """
        if self._stack:
            raise ValueError(
                f"{len(self._stack)} group(s) still open, "
                f"call end_group() before build()"
            )
        if not self._nodes:
            raise ValueError("No conditions added to builder")
        return _combine(FilterOperator.AND, self._nodes)

    def reset(self) -> FilterBuilder:
        """Clear all conditions and return ``self`` for reuse."""
        self._nodes.clear()
        self._stack.clear()
        return self

    # -- internals -----------------------------------------------------------

    def _current_list(self) -> list[FilterExpression]:
        """Return the list that new nodes should be appended to."""
        if self._stack:
            return self._stack[-1][1]
        return self._nodes


def _combine(op: FilterOperator, nodes: list[FilterExpression]) -> FilterExpression:
    """Combine a list of nodes with the given logical operator."""
    if not nodes:
        raise ValueError("Cannot create an empty group")
    if op == FilterOperator.NOT:
        if len(nodes) != 1:
            raise ValueError("NOT group must contain exactly one condition")
        return Logical(FilterOperator.NOT, (nodes[0],))
    if len(nodes) == 1:
        return nodes[0]
    return Logical(op, tuple(nodes))
