"""Value objects for the tablestakes domain.

Value objects are immutable types that represent domain concepts.
They have no identity - two value objects with the same attributes are equal.

Exports:
    Conditions:
        - Condition: Comparison of a cell against a literal operand
        - LogicalCondition: Conditions combined with AND, OR, NOT
        - ComparisonOp, LogicalOp: Operator enumerations
        - parse_condition: Restricted "OPERATOR LITERAL" condition text
        - eq, ne, lt, le, gt, ge, matches, contains, startswith, is_in, between

    Conversions:
        - as_int, as_float, as_date: Explicit text converters
"""

from tablestakes.domain.value_objects.conditions import (
    ComparisonOp,
    Condition,
    ConditionParseError,
    LogicalCondition,
    LogicalOp,
    as_predicate,
    between,
    contains,
    eq,
    ge,
    gt,
    is_in,
    le,
    lt,
    matches,
    ne,
    parse_condition,
    startswith,
)
from tablestakes.domain.value_objects.conversions import as_date, as_float, as_int

__all__ = [
    # Conditions
    "ComparisonOp",
    "LogicalOp",
    "Condition",
    "LogicalCondition",
    "ConditionParseError",
    "parse_condition",
    "as_predicate",
    "eq",
    "ne",
    "lt",
    "le",
    "gt",
    "ge",
    "matches",
    "contains",
    "startswith",
    "is_in",
    "between",
    # Conversions
    "as_int",
    "as_float",
    "as_date",
]
