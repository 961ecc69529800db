"""Error taxonomy for table operations.

Every table failure derives from TableError. Each kind also inherits the
builtin exception it refines, so callers may catch either.

File I/O failures are not part of this taxonomy; they propagate as OSError.
"""

from __future__ import annotations


class TableError(Exception):
    """Base class for all table operation failures."""

    pass


class DuplicateColumnError(TableError, ValueError):
    """Raised when a column name is already present in the table."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Duplicate column name: {name!r}")
        self.name = name


class InvalidColumnError(TableError, KeyError):
    """Raised when a referenced column does not exist."""

    def __init__(self, name: object) -> None:
        super().__init__(f"Invalid column name: {name!r}")
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])


class RowLengthMismatchError(TableError, ValueError):
    """Raised when a row's field count differs from the header count."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Wrong number of fields: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class ColumnLengthMismatchError(TableError, ValueError):
    """Raised when a new column's length differs from the row count."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"Number of values in column does not match table: expected {expected}, got {actual}"
        )
        self.expected = expected
        self.actual = actual


class RowIndexOutOfBoundsError(TableError, IndexError):
    """Raised when a row index does not address an existing row."""

    def __init__(self, index: int, row_count: int) -> None:
        super().__init__(f"Row index {index} out of bounds for table with {row_count} rows")
        self.index = index
        self.row_count = row_count


class HeaderMismatchError(TableError, ValueError):
    """Raised when appending a table whose headers differ."""

    def __init__(self, expected: list[str], actual: list[str]) -> None:
        super().__init__(f"Headers do not match: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class InvalidTableError(TableError, TypeError):
    """Raised when a table argument is not a Table."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Expected a Table, got {type(value).__name__}")


class InvalidMatchSpecError(TableError, TypeError):
    """Raised when substitution arguments have an unsupported shape."""

    pass
