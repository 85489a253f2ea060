"""Weaviate filter translation exceptions."""

from __future__ import annotations

from difflib import get_close_matches
from typing import TYPE_CHECKING, Any

from vectorq_filters.exceptions import FilterError

if TYPE_CHECKING:
    from .registry import FieldType


class TranslationError(FilterError):
    """Base for errors raised while turning a portable filter into a Weaviate one."""


class ConfigurationError(TranslationError):
    """Raised when the field registry or store is configured incorrectly."""


class UnknownFieldError(TranslationError):
    """
    A filter references a field that was never registered.

    Uses fuzzy matching to suggest similar registered field names.
    """

    def __init__(self, field: str, available_fields: list[str]) -> None:
        self.field = field
        self.available_fields = available_fields
        self.suggestions = get_close_matches(field, available_fields, n=3, cutoff=0.6)

        message = f"Field '{field}' is not registered for filtering."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        if available_fields:
            message += f" Registered fields: {', '.join(sorted(available_fields))}"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNKNOWN_FIELD",
            "field": self.field,
            "suggestions": self.suggestions,
            "available_fields": sorted(self.available_fields),
        }


class TypeMismatchError(TranslationError):
    """A literal's runtime type disagrees with the field's declared type."""

    def __init__(self, field: str, expected: FieldType, value: Any) -> None:
        self.field = field
        self.expected = expected
        self.value = value
        super().__init__(
            f"Field '{field}' is declared as {expected.value} but the filter "
            f"compares it with {type(value).__name__} value {value!r}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "TYPE_MISMATCH",
            "field": self.field,
            "expected": self.expected.value,
            "actual": type(self.value).__name__,
        }


class UnsupportedOperatorError(TranslationError):
    """The target system has no equivalent for an operator used in the filter."""

    def __init__(self, operator: str, reason: str | None = None) -> None:
        self.operator = operator
        message = f"Operator '{operator}' is not supported by the target filter"
        if reason:
            message += f": {reason}"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNSUPPORTED_OPERATOR",
            "operator": self.operator,
            "message": str(self),
        }
