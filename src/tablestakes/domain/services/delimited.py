"""Tab-delimited text codec for tables.

Format:
    - Line 1: header names separated by the delimiter
    - Lines 2+: one row each, same field count as the header line
    - Every line is terminated by a single newline

Reading is best-effort. A row with fewer fields than the header is padded with
empty strings at the end. A row with more fields is rejected and reported
without aborting the load. Rendering is the exact inverse for well-formed rows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

DEFAULT_DELIMITER = "\t"
LINE_TERMINATOR = "\n"


@dataclass(frozen=True)
class RejectedRow:
    """A data line excluded from the parse result.

    Attributes:
        line_number: 1-based line number in the source text.
        fields: The fields found on that line.
        expected: The header field count.
    """

    line_number: int
    fields: tuple[str, ...]
    expected: int

    def __str__(self) -> str:
        return f"line {self.line_number}: {len(self.fields)} fields --> {';'.join(self.fields)}"


@dataclass
class ParseResult:
    """Outcome of parsing delimited text."""

    headers: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)
    rejected: list[RejectedRow] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.rejected


def split_lines(text: str) -> list[str]:
    """Split text into lines, dropping the final terminator.

    Only the newline character separates lines. Text whose header line ends
    in CRLF is treated as CRLF text and the CR before each newline is
    dropped. Otherwise every other character, CR included, stays in its
    field.
    """
    if not text:
        return []
    lines = text.split(LINE_TERMINATOR)
    if lines[-1] == "":
        lines.pop()
    if lines and lines[0].endswith("\r"):
        return [line[:-1] if line.endswith("\r") else line for line in lines]
    return lines


def parse_delimited(text: str, delimiter: str = DEFAULT_DELIMITER) -> ParseResult:
    """Parse delimited text into headers and rows.

    Args:
        text: The full text to parse.
        delimiter: Field separator (a single character).

    Returns:
        ParseResult with the header line, accepted rows (padded as needed)
        and rejected rows.
    """
    result = ParseResult()
    lines = split_lines(text)
    if not lines:
        return result

    result.headers = lines[0].split(delimiter)
    width = len(result.headers)

    for line_number, line in enumerate(lines[1:], start=2):
        fields = line.split(delimiter)
        if len(fields) > width:
            result.rejected.append(RejectedRow(line_number, tuple(fields), width))
            continue
        if len(fields) < width:
            fields.extend([""] * (width - len(fields)))
        result.rows.append(fields)

    return result


def render_delimited(
    headers: Sequence[str],
    rows: Iterable[Sequence[str]],
    delimiter: str = DEFAULT_DELIMITER,
) -> str:
    """Render headers and rows as delimited text.

    Returns an empty string when there are no headers.
    """
    if not headers:
        return ""
    lines = [delimiter.join(str(h) for h in headers)]
    lines.extend(delimiter.join(str(v) for v in row) for row in rows)
    return LINE_TERMINATOR.join(lines) + LINE_TERMINATOR
