"""Weaviate ``where`` filter translator for portable filter expressions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from vectorq_filters.ast import Comparison, Logical
from vectorq_filters.exceptions import ValidationError
from vectorq_filters.factory import FilterFactory
from vectorq_filters.operators import FilterOperator
from vectorq_filters.parser import parse_expression

from .exceptions import UnsupportedOperatorError
from .operators import (
    compile_set,
    compile_standard,
    is_match_everything,
    is_match_nothing,
    match_everything,
    match_nothing,
)

if TYPE_CHECKING:
    from vectorq_filters.ast import FilterExpression

    from .registry import FieldRegistry

logger = logging.getLogger("vectorq.weaviate.translator")

_COMPILERS = [
    compile_standard,
    compile_set,
]


class WeaviateFilterTranslator:
    """
    Translate portable filter trees into Weaviate ``where`` filter documents.

    The translator is stateless between calls: it only reads the
    :class:`FieldRegistry` and never mutates the input tree, so one instance
    can be shared by any number of concurrent callers.

    Example::

        registry = FieldRegistry(fields={"country": "text", "year": "number"})
        translator = WeaviateFilterTranslator(registry)
        translator.translate(and_(eq("country", "UK"), gte("year", 2020)))
        # {"operator": "And", "operands": [
        #     {"path": ["meta_country"], "operator": "Equal", "valueText": "UK"},
        #     {"path": ["meta_year"], "operator": "GreaterThanEqual",
        #      "valueNumber": 2020},
        # ]}
    """

    def __init__(self, registry: FieldRegistry, *, supports_not: bool = False) -> None:
        self._registry = registry
        self._supports_not = supports_not

    @property
    def registry(self) -> FieldRegistry:
        return self._registry

    @property
    def supports_not(self) -> bool:
        """Whether the target accepts a ``Not`` operator node."""
        return self._supports_not

    def translate(
        self,
        expression: FilterExpression | dict[str, Any] | str,
    ) -> dict[str, Any]:
        """
        Translate *expression* into a Weaviate ``where`` filter.

        Accepts a filter tree, its ``to_dict()`` form, or a text expression.
        The result may be one of the constant filters from
        :func:`match_nothing` / :func:`match_everything` when an empty
        IN / NIN decides the outcome of the whole tree.

        Raises:
            UnknownFieldError: A field is not registered.
            TypeMismatchError: A literal does not match its field's type.
            UnsupportedOperatorError: NOT used while ``supports_not`` is off.
            ValidationError: The input is not a valid filter expression.
        """
        node = self._coerce(expression)
        target = self._translate_node(node)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Translated filter %s -> %s", node.to_dict(), target)
        return target

    # -- internals -----------------------------------------------------------

    @staticmethod
    def _coerce(expression: Any) -> FilterExpression:
        if isinstance(expression, Comparison | Logical):
            return expression
        if isinstance(expression, dict):
            return FilterFactory.from_dict(expression)
        if isinstance(expression, str):
            return parse_expression(expression)
        raise ValidationError(
            f"Cannot translate {type(expression).__name__}; expected a filter "
            f"expression, dict or string",
            path="<root>",
        )

    def _translate_node(self, node: FilterExpression) -> dict[str, Any]:
        if isinstance(node, Logical):
            return self._translate_logical(node)
        return self._translate_comparison(node)

    def _translate_comparison(self, node: Comparison) -> dict[str, Any]:
        for compiler in _COMPILERS:
            result = compiler(node, self._registry)
            if result is not None:
                return result
        raise UnsupportedOperatorError(node.operator.value)

    def _translate_logical(self, node: Logical) -> dict[str, Any]:
        if node.operator == FilterOperator.NOT:
            return self._translate_not(node)

        # Every operand is translated first so every field is validated
        operands = [self._translate_node(child) for child in node.operands]
        if node.operator == FilterOperator.AND:
            return _fold_and(operands)
        return _fold_or(operands)

    def _translate_not(self, node: Logical) -> dict[str, Any]:
        if not self._supports_not:
            raise UnsupportedOperatorError(
                node.operator.value,
                "the target was configured without NOT support",
            )
        child = self._translate_node(node.operands[0])
        if is_match_everything(child):
            return match_nothing()
        if is_match_nothing(child):
            return match_everything()
        return {"operator": "Not", "operands": [child]}


def _fold_and(operands: list[dict[str, Any]]) -> dict[str, Any]:
    if any(is_match_nothing(op) for op in operands):
        return match_nothing()
    kept = [op for op in operands if not is_match_everything(op)]
    if not kept:
        return match_everything()
    return {"operator": "And", "operands": kept}


def _fold_or(operands: list[dict[str, Any]]) -> dict[str, Any]:
    if any(is_match_everything(op) for op in operands):
        return match_everything()
    kept = [op for op in operands if not is_match_nothing(op)]
    if not kept:
        return match_nothing()
    return {"operator": "Or", "operands": kept}
