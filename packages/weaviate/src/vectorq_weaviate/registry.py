"""
FieldRegistry: filterable metadata fields and their declared types.

Populated once while the store is configured and read-only afterwards.
Registration still takes a lock so late registration from several threads
cannot lose entries.
"""

from __future__ import annotations

import logging
import math
import threading
from enum import Enum
from typing import TYPE_CHECKING, Any

from .exceptions import ConfigurationError, UnknownFieldError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger("vectorq.weaviate.registry")

DEFAULT_PREFIX = "meta_"


class FieldType(str, Enum):
    """Scalar type declared for a filterable metadata field."""

    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"

    @property
    def value_slot(self) -> str:
        """Weaviate ``where`` key that carries a literal of this type."""
        return _VALUE_SLOTS[self]

    def accepts(self, value: Any) -> bool:
        """True if *value* is a literal of this type.

        ``bool`` is never a number, ``int`` and finite ``float`` values share the
        number slot.
        """
        if self is FieldType.BOOLEAN:
            return isinstance(value, bool)
        if isinstance(value, bool):
            return False
        if self is FieldType.NUMBER:
            if isinstance(value, float):
                return math.isfinite(value)
            return isinstance(value, int)
        return isinstance(value, str)


_VALUE_SLOTS: dict[FieldType, str] = {
    FieldType.TEXT: "valueText",
    FieldType.NUMBER: "valueNumber",
    FieldType.BOOLEAN: "valueBoolean",
}


class FieldRegistry:
    """Allowed filter fields mapped to their declared :class:`FieldType`."""

    def __init__(
        self,
        prefix: str = DEFAULT_PREFIX,
        fields: Mapping[str, FieldType | str] | None = None,
    ) -> None:
        if not isinstance(prefix, str):
            raise ConfigurationError(
                f"Metadata field prefix must be a string, got {type(prefix).__name__}"
            )
        self._prefix = prefix
        self._fields: dict[str, FieldType] = {}
        self._lock = threading.Lock()
        if fields:
            self.register_all(fields)

    # -- registration --------------------------------------------------------

    def register(self, name: str, field_type: FieldType | str) -> None:
        """Add or overwrite the declared type of *name*."""
        if not isinstance(name, str) or not name:
            raise ConfigurationError("Filter field name must be a non-empty string")
        resolved = _coerce_field_type(name, field_type)
        with self._lock:
            previous = self._fields.get(name)
            fields = dict(self._fields)
            fields[name] = resolved
            self._fields = fields
        if previous is not None and previous is not resolved:
            logger.info(
                "Filter field %r re-registered: %s -> %s",
                name,
                previous.value,
                resolved.value,
            )

    def register_all(self, fields: Mapping[str, FieldType | str]) -> None:
        """Register multiple fields at once."""
        for name, field_type in fields.items():
            self.register(name, field_type)

    # -- look-up -------------------------------------------------------------

    def resolve(self, name: str) -> FieldType:
        """
        Return the declared type of *name*.

        Raises:
            UnknownFieldError: If *name* is not registered.
        """
        field_type = self._fields.get(name)
        if field_type is None:
            raise UnknownFieldError(name, list(self._fields))
        return field_type

    def prefixed_name(self, name: str) -> str:
        """Stored property name for metadata field *name*."""
        return f"{self._prefix}{name}"

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def fields(self) -> dict[str, FieldType]:
        """Snapshot of the registered fields."""
        return dict(self._fields)

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"FieldRegistry(prefix={self._prefix!r}, fields={self.fields!r})"


def _coerce_field_type(name: str, field_type: FieldType | str) -> FieldType:
    if isinstance(field_type, FieldType):
        return field_type
    try:
        return FieldType(str(field_type).lower())
    except ValueError as exc:
        valid = ", ".join(t.value for t in FieldType)
        raise ConfigurationError(
            f"Unknown type {field_type!r} for filter field '{name}'. "
            f"Valid types: {valid}"
        ) from exc
