"""Explicit conversions from stored text to comparable values.

All cells are stored as text. Numeric or date ordering must be requested
explicitly by passing one of these converters as a condition's ``convert``
or as a sort ``key``. Each converter raises ValueError on malformed input.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable


def as_int(value: str) -> int:
    """Convert text to an integer, ignoring surrounding whitespace."""
    return int(value.strip())


def as_float(value: str) -> float:
    """Convert text to a float, ignoring surrounding whitespace."""
    return float(value.strip())


def as_date(fmt: str = "%Y-%m-%d") -> Callable[[str], date]:
    """Return a converter parsing text dates with the given strptime format.

    Example:
        >>> as_date("%m/%d/%Y")("07/04/1776")
        datetime.date(1776, 7, 4)
    """

    def convert(value: str) -> date:
        return datetime.strptime(value.strip(), fmt).date()

    convert.__name__ = f"as_date({fmt!r})"
    return convert
