"""Comparison operators compiled to Weaviate ``where`` leaves."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from vectorq_filters.operators import FilterOperator

from ..exceptions import TypeMismatchError, UnsupportedOperatorError

if TYPE_CHECKING:
    from vectorq_filters.ast import Comparison

    from ..registry import FieldRegistry

_WEAVIATE_OP_MAP: dict[FilterOperator, str] = {
    FilterOperator.EQ: "Equal",
    FilterOperator.NEQ: "NotEqual",
    FilterOperator.GT: "GreaterThan",
    FilterOperator.GTE: "GreaterThanEqual",
    FilterOperator.LT: "LessThan",
    FilterOperator.LTE: "LessThanEqual",
}


def compile_standard(
    node: Comparison,
    registry: FieldRegistry,
) -> dict[str, Any] | None:
    """Compile a scalar comparison. Returns None if not a scalar op."""
    weaviate_op = _WEAVIATE_OP_MAP.get(node.operator)
    if weaviate_op is None:
        return None
    return compile_leaf(node.field, node.operator, node.value, registry)


def compile_leaf(
    field: str,
    op: FilterOperator,
    value: Any,
    registry: FieldRegistry,
) -> dict[str, Any]:
    """Build ``{path, operator, value<Type>}`` for one field/value pair."""
    weaviate_op = _WEAVIATE_OP_MAP.get(op)
    if weaviate_op is None:
        raise UnsupportedOperatorError(op.value, "not a scalar comparison")
    field_type = registry.resolve(field)
    if not field_type.accepts(value):
        raise TypeMismatchError(field, field_type, value)
    return {
        "path": [registry.prefixed_name(field)],
        "operator": weaviate_op,
        field_type.value_slot: value,
    }
