"""Domain services for tablestakes.

Exports:
    Delimited codec:
        - parse_delimited: Best-effort parse of tab-delimited text
        - render_delimited: Render headers and rows as tab-delimited text
        - ParseResult: Headers, accepted rows and rejected rows
        - RejectedRow: A malformed line excluded from a parse
        - split_lines: Split text into lines, honoring CRLF text
"""

from tablestakes.domain.services.delimited import (
    DEFAULT_DELIMITER,
    ParseResult,
    RejectedRow,
    parse_delimited,
    render_delimited,
    split_lines,
)

__all__ = [
    "DEFAULT_DELIMITER",
    "ParseResult",
    "RejectedRow",
    "parse_delimited",
    "render_delimited",
    "split_lines",
]
