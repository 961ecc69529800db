"""
Tablestakes - In-memory column-oriented tables

A generic table of text cells that is loaded from and saved to tab-delimited
files, and manipulated with database-style operations: select, where, join,
union/intersect, tally/top/bottom, sort and substitution.
"""

from tablestakes.domain.entities import Table
from tablestakes.domain.errors import (
    ColumnLengthMismatchError,
    DuplicateColumnError,
    HeaderMismatchError,
    InvalidColumnError,
    InvalidMatchSpecError,
    InvalidTableError,
    RowIndexOutOfBoundsError,
    RowLengthMismatchError,
    TableError,
)
from tablestakes.domain.value_objects import (
    Condition,
    ConditionParseError,
    as_date,
    as_float,
    as_int,
    parse_condition,
)

__version__ = "0.1.0"

__all__ = [
    "Table",
    # Errors
    "TableError",
    "DuplicateColumnError",
    "InvalidColumnError",
    "RowLengthMismatchError",
    "ColumnLengthMismatchError",
    "RowIndexOutOfBoundsError",
    "HeaderMismatchError",
    "InvalidTableError",
    "InvalidMatchSpecError",
    # Conditions
    "Condition",
    "ConditionParseError",
    "parse_condition",
    "as_int",
    "as_float",
    "as_date",
]
