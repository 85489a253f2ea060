from .ast import Comparison, FilterExpression, Logical, Scalar, iter_comparisons
from .builder import (
    FilterBuilder,
    and_,
    eq,
    gt,
    gte,
    in_,
    lt,
    lte,
    neq,
    nin,
    not_,
    or_,
)
from .exceptions import (
    FilterError,
    FilterParseError,
    OperatorNotFoundError,
    ValidationError,
)
from .factory import FilterFactory
from .operators import FilterOperator, normalize_operator
from .parser import parse_expression

__all__ = [
    # Core types
    "FilterOperator",
    "Comparison",
    "Logical",
    "FilterExpression",
    "Scalar",
    # Builders
    "eq",
    "neq",
    "gt",
    "gte",
    "lt",
    "lte",
    "in_",
    "nin",
    "and_",
    "or_",
    "not_",
    "FilterBuilder",
    # Dict / JSON / text input
    "FilterFactory",
    "parse_expression",
    # Exceptions
    "FilterError",
    "ValidationError",
    "FilterParseError",
    "OperatorNotFoundError",
    # Utilities
    "iter_comparisons",
    "normalize_operator",
]
