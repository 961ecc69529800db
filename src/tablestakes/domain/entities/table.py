"""Column-oriented table entity.

A Table holds string cells in a column store keyed by header name. The header
list defines the schema and the canonical column order. All columns always
share one length, the row count. Rows are never stored: they are materialized
on demand as fresh lists, so mutating a returned row never affects the table.

Invariants:
    - headers are unique and match the column store keys exactly
    - every column has the same length (the row count)
    - an empty table has no headers and no columns (row count 0)

Operations come in two families. Pure operations (select, where, tally, top,
bottom, sort, sub, join) return a brand-new Table and never share backing
lists with the receiver. Mutating operations (add_*, del_*, rename_header,
append, sort_in_place, sub_in_place) validate all arguments first, then modify
the receiver and return it.

Thread Safety:
    Not synchronized. Concurrent mutation of one table must be serialized by
    the caller. Pure operations only read the receiver and may run
    concurrently with each other on an unchanging table.

Example:
    >>> people = Table([["Name", "State"], ["John", "NY"], ["Amy", "NY"], ["Lee", "TX"]])
    >>> people.tally("State").to_list()
    [['State', 'Count'], ['NY', '2'], ['TX', '1']]
    >>> people.count("State", "NY")
    2
"""

from __future__ import annotations

import functools
import os
import re
from collections.abc import Mapping
from typing import Any, Callable, Iterable, Iterator, Sequence, Union

from tablestakes.domain.errors import (
    ColumnLengthMismatchError,
    DuplicateColumnError,
    HeaderMismatchError,
    InvalidColumnError,
    InvalidMatchSpecError,
    InvalidTableError,
    RowIndexOutOfBoundsError,
    RowLengthMismatchError,
)
from tablestakes.domain.services.delimited import parse_delimited, render_delimited
from tablestakes.domain.value_objects.conditions import Predicate, as_predicate
from tablestakes.infrastructure.config import get_config
from tablestakes.infrastructure.logging import get_logger

logger = get_logger(__name__)

COUNT_HEADER = "Count"
"""Header of the count column produced by tally, top and bottom."""

ColumnRef = Union[str, int]
Comparator = Callable[[Any, Any], int]
Transform = Callable[[str], str]


class Table:
    """An in-memory, column-oriented table of text cells.

    A Table is built empty, from a sequence of rows whose first row supplies
    the headers, or as a deep copy of another Table::

        Table()
        Table([["City", "State"], ["Albany", "NY"]])
        Table(other_table)

    Use ``Table.from_text`` or ``Table.read_file`` to parse delimited text.
    """

    def __init__(self, source: Table | Iterable[Sequence[str]] | None = None) -> None:
        self._headers: list[str] = []
        self._columns: dict[str, list[str]] = {}

        if source is None:
            return
        if isinstance(source, Table):
            self._headers = list(source._headers)
            self._columns = {h: list(source._columns[h]) for h in source._headers}
        elif isinstance(source, (str, bytes)):
            raise TypeError(
                "Table() takes rows or a Table; use Table.from_text() or Table.read_file()"
            )
        else:
            self.add_rows(source)

    @classmethod
    def _from_columns(cls, headers: list[str], columns: dict[str, list[str]]) -> Table:
        """Wrap freshly built columns without copying them again."""
        table = cls()
        table._headers = headers
        table._columns = columns
        return table

    # ------------------------------------------------------------------
    # Parsing and serialization
    # ------------------------------------------------------------------

    @classmethod
    def from_text(cls, text: str, delimiter: str | None = None) -> Table:
        """Parse delimited text into a Table.

        Short rows are padded with empty strings. Rows with too many fields
        are skipped and logged, they do not abort the load.

        Raises:
            DuplicateColumnError: If the header line repeats a name.
        """
        result = parse_delimited(text, delimiter or get_config().io.delimiter)
        for rejected in result.rejected:
            logger.warning(
                "malformed_row_skipped",
                line=rejected.line_number,
                fields=len(rejected.fields),
                expected=rejected.expected,
                row=";".join(rejected.fields),
            )

        table = cls()
        table._define_headers(result.headers)
        for header, values in zip(table._headers, zip(*result.rows)):
            table._columns[header].extend(values)
        return table

    @classmethod
    def read_file(
        cls,
        path: str | os.PathLike[str],
        encoding: str | None = None,
        delimiter: str | None = None,
    ) -> Table:
        """Load a Table from a delimited file.

        Raises:
            OSError: If the file cannot be opened or read.
        """
        with open(path, encoding=encoding or get_config().io.encoding, newline="") as f:
            text = f.read()
        table = cls.from_text(text, delimiter)
        logger.info(
            "table_loaded",
            path=os.fspath(path),
            rows=table.row_count,
            columns=len(table._headers),
        )
        return table

    def write_file(
        self,
        path: str | os.PathLike[str],
        encoding: str | None = None,
        delimiter: str | None = None,
    ) -> None:
        """Write the delimited rendering of this table, replacing the file."""
        text = self.to_text(delimiter)
        with open(path, "w", encoding=encoding or get_config().io.encoding, newline="") as f:
            f.write(text)
        logger.info(
            "table_written",
            path=os.fspath(path),
            rows=self.row_count,
            columns=len(self._headers),
        )

    def to_list(self) -> list[list[str]]:
        """Return the headers followed by every row, all as fresh lists."""
        return [list(self._headers), *self]

    def to_text(self, delimiter: str | None = None) -> str:
        """Render as delimited text: a header line, then one line per row."""
        return render_delimited(self._headers, self, delimiter or get_config().io.delimiter)

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"Table(headers={self._headers!r}, rows={self.row_count})"

    # ------------------------------------------------------------------
    # Shape and access
    # ------------------------------------------------------------------

    @property
    def headers(self) -> list[str]:
        """A copy of the header names in column order."""
        return list(self._headers)

    @property
    def row_count(self) -> int:
        if not self._headers:
            return 0
        return len(self._columns[self._headers[0]])

    def __len__(self) -> int:
        return self.row_count

    def is_empty(self) -> bool:
        """True if the table has no headers (and therefore no data)."""
        return not self._headers

    def __iter__(self) -> Iterator[list[str]]:
        """Yield each row as a freshly materialized list."""
        for index in range(self.row_count):
            yield self._materialize(index)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Table):
            return NotImplemented
        return self._headers == other._headers and self._columns == other._columns

    __hash__ = None  # type: ignore[assignment]

    def copy(self) -> Table:
        return Table(self)

    def column(self, name: str) -> list[str]:
        """Return a copy of a column, or an empty list if it does not exist."""
        if name not in self._columns:
            return []
        return list(self._columns[name])

    def row(self, index: int) -> list[str]:
        """Return a copy of a row, or an empty list if the index is out of bounds.

        Negative indices count from the end.
        """
        count = self.row_count
        if not -count <= index < count:
            return []
        return self._materialize(index)

    def count(self, colname: str | None = None, value: str | None = None) -> int:
        """Count rows.

        With no arguments (or either omitted) returns the row count. Otherwise
        returns the number of rows whose ``colname`` cell equals ``value``.
        Cells are text, so ``value`` is compared as given.

        Raises:
            InvalidColumnError: If ``colname`` does not exist.
        """
        if colname is None or value is None:
            return self.row_count
        self._require_column(colname)
        return sum(1 for cell in self._columns[colname] if cell == value)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_column(self, name: str, values: Iterable[str]) -> Table:
        """Append a column.

        Raises:
            DuplicateColumnError: If ``name`` is already a header.
            ColumnLengthMismatchError: If the table has headers and the number
                of values differs from the row count.
        """
        if name in self._columns:
            raise DuplicateColumnError(name)
        values = list(values)
        if not self.is_empty() and len(values) != self.row_count:
            raise ColumnLengthMismatchError(self.row_count, len(values))

        self._headers.append(name)
        self._columns[name] = values
        return self

    def add_row(self, values: Sequence[str]) -> Table:
        """Append a row. On a table without headers, the values become the headers.

        Raises:
            RowLengthMismatchError: If the value count differs from the header count.
            DuplicateColumnError: If defining headers that repeat a name.
        """
        values = list(values)
        if not self._headers:
            self._define_headers(values)
            return self
        if len(values) != len(self._headers):
            raise RowLengthMismatchError(len(self._headers), len(values))

        for header, value in zip(self._headers, values):
            self._columns[header].append(value)
        return self

    def add_rows(self, rows: Iterable[Sequence[str]]) -> Table:
        """Append rows in order. A failing row stops processing; earlier rows remain."""
        for row in rows:
            self.add_row(row)
        return self

    def del_column(self, name: str) -> Table:
        """Remove a column.

        Raises:
            InvalidColumnError: If the column does not exist.
        """
        self._require_column(name)
        self._headers.remove(name)
        del self._columns[name]
        return self

    def del_row(self, index: int) -> Table:
        """Remove the row at ``index``; negative indices count from the end.

        Raises:
            RowIndexOutOfBoundsError: If the table has no such row.
        """
        count = self.row_count
        if self.is_empty() or not -count <= index < count:
            raise RowIndexOutOfBoundsError(index, count)
        for values in self._columns.values():
            del values[index]
        return self

    def rename_header(self, old_name: str, new_name: str) -> Table:
        """Rename a header, keeping its position and values.

        Raises:
            InvalidColumnError: If ``old_name`` does not exist.
            DuplicateColumnError: If ``new_name`` is another existing header.
        """
        self._require_column(old_name)
        if new_name == old_name:
            return self
        if new_name in self._columns:
            raise DuplicateColumnError(new_name)

        self._headers[self._headers.index(old_name)] = new_name
        self._columns[new_name] = self._columns.pop(old_name)
        return self

    def append(self, other: Table) -> Table:
        """Append the rows of another table.

        An empty receiver takes on the other table's headers and rows. An
        empty argument leaves the receiver unchanged.

        Raises:
            InvalidTableError: If ``other`` is not a Table.
            HeaderMismatchError: If both have headers and they differ
                (by name or order).
        """
        other = self._require_table(other)
        if other.is_empty():
            return self
        if self.is_empty():
            self._headers = list(other._headers)
            self._columns = {h: list(other._columns[h]) for h in other._headers}
            return self
        if other._headers != self._headers:
            raise HeaderMismatchError(self.headers, other.headers)

        incoming = {h: list(other._columns[h]) for h in self._headers}
        for header in self._headers:
            self._columns[header].extend(incoming[header])
        return self

    # ------------------------------------------------------------------
    # Selection and filtering
    # ------------------------------------------------------------------

    def select(self, *names: str | Sequence[str]) -> Table:
        """Return a table with only the named columns, in the order given.

        Lists and tuples of names may be mixed with single names; they are
        flattened in place, so ``select(["A"], "B")`` selects ``A`` then ``B``.

        Raises:
            InvalidColumnError: If any name does not exist or is not a str.
            DuplicateColumnError: If a name is requested twice.
        """
        flat: list[str] = []
        for name in names:
            if isinstance(name, (list, tuple)):
                flat.extend(name)
            else:
                flat.append(name)
        for name in flat:
            if not isinstance(name, str):
                raise InvalidColumnError(name)
            self._require_column(name)
        if not flat:
            return Table()

        headers: list[str] = []
        for name in flat:
            if name in headers:
                raise DuplicateColumnError(name)
            headers.append(name)
        return self._from_columns(headers, {h: list(self._columns[h]) for h in headers})

    get_columns = select

    def where(self, name: str, condition: Predicate | str | None = None) -> Table:
        """Return the rows whose ``name`` cell satisfies ``condition``.

        ``condition`` is a Condition, any callable taking the cell text and
        returning a bool, or condition text such as ``"== 'NY'"``. Without a
        condition every row is returned. If no row matches, an empty Table
        (no headers) is returned.

        Raises:
            InvalidColumnError: If ``name`` does not exist.
            ConditionParseError: If condition text is malformed.
        """
        self._require_column(name)
        if condition is None:
            return Table(self)

        predicate = as_predicate(condition)
        keep = [i for i, cell in enumerate(self._columns[name]) if predicate(cell)]
        if not keep:
            return Table()
        return self._take(keep)

    filter = where
    get_rows = where

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    def tally(self, name: str) -> Table:
        """Count distinct values of a column.

        Returns a two-column table ``(name, Count)`` with one row per distinct
        value, in order of first occurrence. Counts are rendered as text.

        Raises:
            InvalidColumnError: If ``name`` does not exist.
        """
        counts = self._tally_counts(name)
        return self._frequency_table(name, list(counts.items()))

    def top(self, name: str, n: int = 1) -> Table:
        """Return at most ``n`` most frequent values of a column with their counts.

        Ties keep first-occurrence order.
        """
        counts = self._tally_counts(name)
        ranked = sorted(counts.items(), key=lambda item: -item[1])
        return self._frequency_table(name, ranked[: max(n, 0)])

    def bottom(self, name: str, n: int = 1) -> Table:
        """Return at most ``n`` least frequent values of a column with their counts.

        Ties keep first-occurrence order.
        """
        counts = self._tally_counts(name)
        ranked = sorted(counts.items(), key=lambda item: item[1])
        return self._frequency_table(name, ranked[: max(n, 0)])

    def _tally_counts(self, name: str) -> dict[str, int]:
        self._require_column(name)
        counts: dict[str, int] = {}
        for cell in self._columns[name]:
            counts[cell] = counts.get(cell, 0) + 1
        return counts

    def _frequency_table(self, name: str, items: list[tuple[str, int]]) -> Table:
        count_header = _unique_name(COUNT_HEADER, {name})
        return self._from_columns(
            [name, count_header],
            {
                name: [value for value, _ in items],
                count_header: [str(count) for _, count in items],
            },
        )

    # ------------------------------------------------------------------
    # Sorting
    # ------------------------------------------------------------------

    def sort(
        self,
        column: ColumnRef | None = None,
        comparator: Comparator | None = None,
        *,
        key: Callable[[str], Any] | None = None,
        reverse: bool = False,
    ) -> Table:
        """Return a new table with rows ordered by one column.

        Args:
            column: Header name or position; defaults to the first column.
            comparator: Optional ``cmp``-style function over two sort values
                returning a negative, zero or positive int. When given it
                fully determines the order.
            key: Optional explicit conversion applied to each cell before
                ordering (e.g. ``as_int``). Without it cells sort as text.
            reverse: Sort descending.

        The sort is stable. Sorting an empty table returns an empty table.

        Raises:
            InvalidColumnError: If the column name or position does not exist.
        """
        if self.is_empty():
            return Table()
        return self._take(self._sort_order(column, comparator, key, reverse))

    def sort_in_place(
        self,
        column: ColumnRef | None = None,
        comparator: Comparator | None = None,
        *,
        key: Callable[[str], Any] | None = None,
        reverse: bool = False,
    ) -> Table:
        """Reorder this table's rows like ``sort`` and return it."""
        if self.is_empty():
            return self
        order = self._sort_order(column, comparator, key, reverse)
        for header in self._headers:
            values = self._columns[header]
            self._columns[header] = [values[i] for i in order]
        return self

    def _sort_order(
        self,
        column: ColumnRef | None,
        comparator: Comparator | None,
        key: Callable[[str], Any] | None,
        reverse: bool,
    ) -> list[int]:
        values = self._columns[self._resolve_column(column)]
        sort_values = [key(v) for v in values] if key is not None else values

        if comparator is not None:
            cmp_key = functools.cmp_to_key(comparator)
            return sorted(
                range(len(sort_values)),
                key=lambda i: cmp_key(sort_values[i]),
                reverse=reverse,
            )
        return sorted(range(len(sort_values)), key=sort_values.__getitem__, reverse=reverse)

    def _resolve_column(self, column: ColumnRef | None) -> str:
        if column is None:
            return self._headers[0]
        if isinstance(column, int) and not isinstance(column, bool):
            if not -len(self._headers) <= column < len(self._headers):
                raise InvalidColumnError(column)
            return self._headers[column]
        self._require_column(column)
        return column

    # ------------------------------------------------------------------
    # Relational operations
    # ------------------------------------------------------------------

    def join(self, other: Table, colname: str, col2name: str | None = None) -> Table:
        """Inner equality join with another table.

        Every pair of rows whose key cells are equal yields one output row, so
        a row with several matches fans out and a row with none is dropped.
        Output headers are this table's headers followed by the other's.
        Other headers that collide are prefixed with ``_`` (repeatedly, until
        unique), including the key column. If no rows match, the result has
        the headers and no rows.

        Raises:
            InvalidTableError: If ``other`` is not a Table.
            InvalidColumnError: If a key column does not exist.
        """
        other, col2name = self._require_pair(other, colname, col2name)

        renamed = self._disambiguate(other._headers)
        positions: dict[str, list[int]] = {}
        for j, cell in enumerate(other._columns[col2name]):
            positions.setdefault(cell, []).append(j)
        pairs = [
            (i, j)
            for i, cell in enumerate(self._columns[colname])
            for j in positions.get(cell, ())
        ]

        columns = {h: [self._columns[h][i] for i, _ in pairs] for h in self._headers}
        for original, new in zip(other._headers, renamed):
            values = other._columns[original]
            columns[new] = [values[j] for _, j in pairs]
        return self._from_columns(self._headers + renamed, columns)

    def union(self, other: Table, colname: str, col2name: str | None = None) -> list[str]:
        """Distinct values found in either column.

        Values from this table come first, in first-occurrence order, followed
        by values only found in the other table.
        """
        other, col2name = self._require_pair(other, colname, col2name)
        return list(dict.fromkeys(self._columns[colname] + other._columns[col2name]))

    def intersect(self, other: Table, colname: str, col2name: str | None = None) -> list[str]:
        """Distinct values found in both columns, in this table's first-occurrence order."""
        other, col2name = self._require_pair(other, colname, col2name)
        present = set(other._columns[col2name])
        return [v for v in dict.fromkeys(self._columns[colname]) if v in present]

    def _require_pair(
        self, other: Table, colname: str, col2name: str | None
    ) -> tuple[Table, str]:
        other = self._require_table(other)
        if col2name is None:
            col2name = colname
        self._require_column(colname)
        other._require_column(col2name)
        return other, col2name

    def _disambiguate(self, names: Sequence[str]) -> list[str]:
        """Prefix names colliding with this table's headers with underscores."""
        taken = set(self._headers) | set(names)
        result = []
        for name in names:
            if name in self._columns:
                name = _unique_name(name, taken)
                taken.add(name)
            result.append(name)
        return result

    # ------------------------------------------------------------------
    # Substitution
    # ------------------------------------------------------------------

    def sub(
        self,
        colname: str,
        match: str | re.Pattern[str] | None = None,
        replacement: str | Mapping[str, str] | None = None,
        *,
        func: Transform | None = None,
    ) -> Table:
        """Return a copy with one substitution applied to every cell of a column.

        Args:
            colname: Column to rewrite.
            match: Literal substring or compiled pattern. Only the first
                occurrence in each cell is replaced.
            replacement: Replacement text, or a mapping from matched text to
                replacement text (matched text missing from the mapping is
                left unchanged). Pattern replacements may use group
                references such as ``\\1``.
            func: Alternative to match/replacement: a transform applied to
                every cell.

        Raises:
            InvalidColumnError: If ``colname`` does not exist.
            InvalidMatchSpecError: If neither a usable match/replacement pair
                nor a transform is given.
        """
        transform = self._substitution(colname, match, replacement, func)
        result = Table(self)
        result._columns[colname] = [transform(cell) for cell in result._columns[colname]]
        return result

    def sub_in_place(
        self,
        colname: str,
        match: str | re.Pattern[str] | None = None,
        replacement: str | Mapping[str, str] | None = None,
        *,
        func: Transform | None = None,
    ) -> Table:
        """Apply ``sub`` to this table's column and return the table."""
        transform = self._substitution(colname, match, replacement, func)
        self._columns[colname] = [transform(cell) for cell in self._columns[colname]]
        return self

    def _substitution(
        self,
        colname: str,
        match: str | re.Pattern[str] | None,
        replacement: str | Mapping[str, str] | None,
        func: Transform | None,
    ) -> Transform:
        self._require_column(colname)

        if func is not None:
            if not callable(func):
                raise InvalidMatchSpecError("Transform must be callable")
            return func
        if match is None:
            raise InvalidMatchSpecError("No match expression or transform given")
        if not isinstance(match, (str, re.Pattern)):
            raise InvalidMatchSpecError("Match expression must be str or compiled pattern")

        if isinstance(replacement, Mapping):
            mapping = replacement
            pattern = re.compile(re.escape(match)) if isinstance(match, str) else match

            def replace_mapped(m: re.Match[str]) -> str:
                text = m.group(0)
                return mapping.get(text, text)

            return lambda cell: pattern.sub(replace_mapped, cell, count=1)

        if not isinstance(replacement, str):
            raise InvalidMatchSpecError("Replacement must be str or mapping")
        if isinstance(match, str):
            return lambda cell: cell.replace(match, replacement, 1)
        return lambda cell: match.sub(replacement, cell, count=1)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _materialize(self, index: int) -> list[str]:
        return [self._columns[h][index] for h in self._headers]

    def _take(self, indices: Sequence[int]) -> Table:
        """Build a new table from the rows at ``indices``, in that order."""
        return self._from_columns(
            list(self._headers),
            {h: [self._columns[h][i] for i in indices] for h in self._headers},
        )

    def _define_headers(self, headers: Sequence[str]) -> None:
        seen: set[str] = set()
        for header in headers:
            if header in seen:
                raise DuplicateColumnError(header)
            seen.add(header)
        self._headers = list(headers)
        self._columns = {h: [] for h in self._headers}

    def _require_column(self, name: str) -> None:
        if name not in self._columns:
            raise InvalidColumnError(name)

    @staticmethod
    def _require_table(value: object) -> Table:
        if not isinstance(value, Table):
            raise InvalidTableError(value)
        return value


def _unique_name(name: str, taken: set[str]) -> str:
    """Prefix ``name`` with underscores until it is not in ``taken``."""
    while name in taken:
        name = "_" + name
    return name
