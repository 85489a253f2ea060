from enum import Enum


class FilterOperator(str, Enum):
    """Supported operators for portable filter expressions."""

    # Comparison
    EQ = "eq"
    NEQ = "neq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"

    # Membership
    IN = "in"
    NIN = "nin"

    # Logical operators
    AND = "and"
    OR = "or"
    NOT = "not"


SCALAR_OPERATORS: frozenset[FilterOperator] = frozenset(
    {
        FilterOperator.EQ,
        FilterOperator.NEQ,
        FilterOperator.GT,
        FilterOperator.GTE,
        FilterOperator.LT,
        FilterOperator.LTE,
    }
)
MEMBERSHIP_OPERATORS: frozenset[FilterOperator] = frozenset(
    {FilterOperator.IN, FilterOperator.NIN}
)
COMPARISON_OPERATORS: frozenset[FilterOperator] = SCALAR_OPERATORS | MEMBERSHIP_OPERATORS
LOGICAL_OPERATORS: frozenset[FilterOperator] = frozenset(
    {FilterOperator.AND, FilterOperator.OR, FilterOperator.NOT}
)

# Alternative spellings accepted by dict and text input
OPERATOR_ALIASES: dict[str, FilterOperator] = {
    "=": FilterOperator.EQ,
    "==": FilterOperator.EQ,
    "!=": FilterOperator.NEQ,
    "ne": FilterOperator.NEQ,
    ">": FilterOperator.GT,
    ">=": FilterOperator.GTE,
    "ge": FilterOperator.GTE,
    "<": FilterOperator.LT,
    "<=": FilterOperator.LTE,
    "le": FilterOperator.LTE,
    "not_in": FilterOperator.NIN,
}


def normalize_operator(op: "FilterOperator | str") -> FilterOperator:
    """
    Return the :class:`FilterOperator` for *op*.

    Accepts enum members, their values (case-insensitive) and the aliases in
    :data:`OPERATOR_ALIASES`.

    Raises:
        ValueError: If *op* is not a string or names no known operator.
    """
    if isinstance(op, FilterOperator):
        return op
    if not isinstance(op, str):
        raise ValueError(f"Operator must be a string, got {type(op).__name__}")
    key = op.strip().lower()
    if key in OPERATOR_ALIASES:
        return OPERATOR_ALIASES[key]
    return FilterOperator(key)
