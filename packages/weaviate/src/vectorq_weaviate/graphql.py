"""Render translated ``where`` filters as GraphQL argument text."""

from __future__ import annotations

import json
import math
from typing import Any

# Keys whose values are GraphQL enum names and render unquoted
_ENUM_KEYS = frozenset({"operator"})


def render_where(target: dict[str, Any]) -> str:
    """
    Render a ``where`` filter document as a GraphQL input object.

    Example::

        render_where({"path": ["meta_year"], "operator": "GreaterThan",
                      "valueNumber": 2020})
        # '{path: ["meta_year"], operator: GreaterThan, valueNumber: 2020}'
    """
    return _render_value(target, key=None)


def _render_value(value: Any, *, key: str | None) -> str:
    if isinstance(value, dict):
        fields = ", ".join(f"{k}: {_render_value(v, key=k)}" for k, v in value.items())
        return "{" + fields + "}"
    if isinstance(value, list | tuple):
        return "[" + ", ".join(_render_value(v, key=None) for v in value) + "]"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Cannot render non-finite number {value!r}")
        return repr(value)
    if isinstance(value, str):
        return value if key in _ENUM_KEYS else json.dumps(value, ensure_ascii=False)
    raise TypeError(f"Cannot render {type(value).__name__} in a where filter")
