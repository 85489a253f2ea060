"""
Membership operators -> expanded Weaviate disjunctions / conjunctions.

Weaviate ``where`` filters have no list membership operator, so

- ``field IN [a, b]``  becomes ``Or(field == a, field == b)``
- ``field NIN [a, b]`` becomes ``And(field != a, field != b)``

An empty IN is the empty disjunction (matches nothing) and an empty NIN is
the empty conjunction (matches everything).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from vectorq_filters.operators import FilterOperator

from .standard import compile_leaf

if TYPE_CHECKING:
    from vectorq_filters.ast import Comparison

    from ..registry import FieldRegistry

_EXPANSIONS: dict[FilterOperator, tuple[str, FilterOperator]] = {
    FilterOperator.IN: ("Or", FilterOperator.EQ),
    FilterOperator.NIN: ("And", FilterOperator.NEQ),
}


def match_nothing() -> dict[str, Any]:
    """Always-false filter: an ``Or`` without operands."""
    return {"operator": "Or", "operands": []}


def match_everything() -> dict[str, Any]:
    """Always-true filter: an ``And`` without operands."""
    return {"operator": "And", "operands": []}


def is_match_nothing(target: dict[str, Any] | None) -> bool:
    return target == match_nothing()


def is_match_everything(target: dict[str, Any] | None) -> bool:
    return target == match_everything()


def compile_set(
    node: Comparison,
    registry: FieldRegistry,
) -> dict[str, Any] | None:
    """Compile IN / NIN. Returns None if not a membership op."""
    expansion = _EXPANSIONS.get(node.operator)
    if expansion is None:
        return None
    connective, element_op = expansion
    operands = [
        compile_leaf(node.field, element_op, value, registry) for value in node.values
    ]
    if not operands:
        # Still reject unknown fields for empty lists
        registry.resolve(node.field)
    return {"operator": connective, "operands": operands}
