from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from .ast import Comparison, FilterExpression, Logical
from .exceptions import OperatorNotFoundError, ValidationError
from .operators import (
    LOGICAL_OPERATORS,
    MEMBERSHIP_OPERATORS,
    OPERATOR_ALIASES,
    FilterOperator,
    normalize_operator,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

_VALID_OPERATORS: list[str] = [m.value for m in FilterOperator] + list(
    OPERATOR_ALIASES
)


class FilterFactory:
    """
    Factory for creating filter expressions from dictionary / JSON representations.

    The dictionary shape is the one produced by ``to_dict()`` on every node::

        {"op": "and", "conditions": [
            {"op": "eq", "attr": "country", "val": "UK"},
            {"op": "gte", "attr": "year", "val": 2020},
        ]}

    ``NOT`` also accepts a single ``condition`` key instead of a one-item
    ``conditions`` list.
    """

    # ------------------------------------------------------------------ #
    # Public API                                                          #
    # ------------------------------------------------------------------ #

    @staticmethod
    def from_dict(
        data: dict[str, Any],
        *,
        allowed_fields: Sequence[str] | None = None,
    ) -> FilterExpression:
        """
        Create a filter expression tree from a dictionary.

        Parameters
        ----------
        data:
            The filter dictionary (potentially nested).
        allowed_fields:
            Optional whitelist of valid field names.  If provided, any
            ``attr`` not in this list raises :class:`ValidationError`.
        """
        return FilterFactory._build(data, path="<root>", allowed_fields=allowed_fields)

    @staticmethod
    def from_json(
        text: str,
        *,
        allowed_fields: Sequence[str] | None = None,
    ) -> FilterExpression:
        """Parse a JSON string and build a filter expression tree."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValidationError(
                f"Invalid JSON: {exc}",
                path="<root>",
            ) from exc

        if not isinstance(data, dict):
            raise ValidationError(
                "Top-level JSON value must be an object",
                path="<root>",
            )

        return FilterFactory.from_dict(data, allowed_fields=allowed_fields)

    @staticmethod
    def validate(
        data: dict[str, Any],
        *,
        allowed_fields: Sequence[str] | None = None,
    ) -> list[str]:
        """
        Validate a filter dict and return a list of error messages.

        Returns an empty list when the structure is valid.
        """
        errors: list[str] = []
        FilterFactory._collect_errors(
            data, errors, path="<root>", allowed_fields=allowed_fields
        )
        return errors

    # ------------------------------------------------------------------ #
    # Internal: recursive build (fail-fast)                               #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build(
        data: Any,
        *,
        path: str,
        allowed_fields: Sequence[str] | None,
    ) -> FilterExpression:
        if not isinstance(data, dict):
            raise ValidationError(
                f"Expected a dict, got {type(data).__name__}",
                path=path,
            )
        op = FilterFactory._operator(data, path)

        if op in LOGICAL_OPERATORS:
            children = [
                FilterFactory._build(
                    child, path=child_path, allowed_fields=allowed_fields
                )
                for child_path, child in FilterFactory._children(data, op, path)
            ]
            try:
                return Logical(op, tuple(children))
            except ValidationError as exc:
                raise ValidationError(exc.message, path=path) from exc

        attr = data.get("attr")
        if not attr or not isinstance(attr, str):
            raise ValidationError(
                f"Leaf filter missing 'attr': {data}",
                path=path,
            )
        if allowed_fields is not None and attr not in allowed_fields:
            raise ValidationError(
                f"Field '{attr}' is not in the allowed fields list",
                path=path,
            )
        val = data.get("val")
        if op in MEMBERSHIP_OPERATORS and isinstance(val, list):
            val = tuple(val)
        try:
            return Comparison(attr, op, val)
        except ValidationError as exc:
            raise ValidationError(exc.message, path=path) from exc

    @staticmethod
    def _operator(data: dict[str, Any], path: str) -> FilterOperator:
        op_str = data.get("op")
        if not op_str or not isinstance(op_str, str):
            raise ValidationError("Missing or empty 'op' key", path=path)
        try:
            return normalize_operator(op_str)
        except ValueError as exc:
            raise OperatorNotFoundError(op_str.lower(), _VALID_OPERATORS) from exc

    @staticmethod
    def _children(
        data: dict[str, Any],
        op: FilterOperator,
        path: str,
    ) -> list[tuple[str, Any]]:
        conditions = data.get("conditions")
        if conditions is None and op == FilterOperator.NOT and "condition" in data:
            return [(f"{path}.condition", data["condition"])]
        if conditions is None:
            raise ValidationError(
                f"Logical operator '{op.value}' requires 'conditions' list",
                path=path,
            )
        if not isinstance(conditions, list):
            raise ValidationError("'conditions' must be a list", path=path)
        return [(f"{path}.conditions[{idx}]", c) for idx, c in enumerate(conditions)]

    # ------------------------------------------------------------------ #
    # Internal: validation (collects every error)                         #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _collect_errors(
        data: Any,
        errors: list[str],
        *,
        path: str,
        allowed_fields: Sequence[str] | None = None,
    ) -> None:
        """Recursive error collection (non-throwing)."""
        if not isinstance(data, dict):
            errors.append(f"{path}: expected dict, got {type(data).__name__}")
            return

        op_str = data.get("op")
        if not op_str or not isinstance(op_str, str):
            errors.append(f"{path}: missing or empty 'op' key")
            return

        try:
            op = normalize_operator(op_str)
        except ValueError:
            errors.append(f"{path}: unknown operator '{op_str.lower()}'")
            return

        if op in LOGICAL_OPERATORS:
            FilterFactory._collect_logical_errors(
                data, op, errors, path, allowed_fields
            )
        else:
            FilterFactory._collect_leaf_errors(data, op, errors, path, allowed_fields)

    @staticmethod
    def _collect_logical_errors(
        data: dict[str, Any],
        op: FilterOperator,
        errors: list[str],
        path: str,
        allowed_fields: Sequence[str] | None,
    ) -> None:
        try:
            children = FilterFactory._children(data, op, path)
        except ValidationError as exc:
            errors.append(f"{path}: {exc.message}")
            return

        if op == FilterOperator.NOT and len(children) != 1:
            errors.append(f"{path}: 'not' takes exactly one condition")
        elif op != FilterOperator.NOT and len(children) < 2:
            errors.append(f"{path}: '{op.value}' requires at least two conditions")

        for child_path, child in children:
            FilterFactory._collect_errors(
                child, errors, path=child_path, allowed_fields=allowed_fields
            )

    @staticmethod
    def _collect_leaf_errors(
        data: dict[str, Any],
        op: FilterOperator,
        errors: list[str],
        path: str,
        allowed_fields: Sequence[str] | None,
    ) -> None:
        attr = data.get("attr")
        if not attr or not isinstance(attr, str):
            errors.append(f"{path}: missing 'attr'")
            return

        if allowed_fields is not None and attr not in allowed_fields:
            errors.append(f"{path}: field '{attr}' not allowed")

        val = data.get("val")
        if op in MEMBERSHIP_OPERATORS and isinstance(val, list):
            val = tuple(val)
        try:
            Comparison(attr, op, val)
        except ValidationError as exc:
            errors.append(f"{path}: {exc.message}")
