"""Typed per-value conditions used to filter table rows.

A condition is evaluated against a single cell and returns a boolean. It is
either any plain callable ``str -> bool`` or a Condition built from a
comparison operator and a literal operand. Conditions may also be parsed from
a restricted text form::

    == 'NY'          equality against a quoted literal
    != TX            equality against a bare literal
    =~ /^New.*/i     regular expression search
    >= 1000000       ordering (combine with an explicit converter)

Nothing is ever executed as code. Cells are text; numeric or date comparisons
need an explicit ``convert`` callable (see conversions).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable

from tablestakes.infrastructure.logging import get_logger

logger = get_logger(__name__)

Converter = Callable[[str], Any]
Predicate = Callable[[str], bool]


class ComparisonOp(Enum):
    """Comparison operators for conditions."""

    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    MATCH = "=~"
    NOT_MATCH = "!~"
    CONTAINS = "contains"
    STARTSWITH = "startswith"
    IN = "in"
    BETWEEN = "between"


class LogicalOp(Enum):
    """Logical operators for combining conditions."""

    AND = "and"
    OR = "or"
    NOT = "not"


class ConditionParseError(ValueError):
    """Raised when condition text does not follow the condition grammar."""

    pass


class _Combinable:
    """Mixin providing &, | and ~ over conditions."""

    def __and__(self, other: Predicate) -> LogicalCondition:
        return LogicalCondition(LogicalOp.AND, (self, other))  # type: ignore[arg-type]

    def __or__(self, other: Predicate) -> LogicalCondition:
        return LogicalCondition(LogicalOp.OR, (self, other))  # type: ignore[arg-type]

    def __invert__(self) -> LogicalCondition:
        return LogicalCondition(LogicalOp.NOT, (self,))  # type: ignore[arg-type]


@dataclass(frozen=True)
class Condition(_Combinable):
    """A comparison between a cell value and a literal operand.

    Attributes:
        op: The comparison operator.
        operand: The literal to compare against. A compiled pattern for
            MATCH/NOT_MATCH, a tuple for IN, a (low, high) pair for BETWEEN.
        convert: Optional converter applied to the cell before comparing.
            A cell the converter rejects never matches.

    Example:
        >>> Condition(ComparisonOp.EQ, "NY")("NY")
        True
        >>> Condition(ComparisonOp.GT, 10, convert=int)("9")
        False
    """

    op: ComparisonOp
    operand: Any
    convert: Converter | None = None

    def __post_init__(self) -> None:
        if self.op in (ComparisonOp.MATCH, ComparisonOp.NOT_MATCH):
            if isinstance(self.operand, str):
                object.__setattr__(self, "operand", re.compile(self.operand))
            elif not isinstance(self.operand, re.Pattern):
                raise TypeError("pattern conditions require a str or compiled pattern")
        elif self.op == ComparisonOp.IN:
            if isinstance(self.operand, str):
                raise TypeError("IN condition requires a collection of values, not a str")
            object.__setattr__(self, "operand", tuple(self.operand))
        elif self.op == ComparisonOp.BETWEEN:
            bounds = tuple(self.operand)
            if len(bounds) != 2:
                raise ValueError("BETWEEN condition requires exactly two bounds")
            object.__setattr__(self, "operand", bounds)

    def __call__(self, value: str) -> bool:
        return self._evaluate(value) is True

    def _evaluate(self, value: str) -> bool | None:
        """Compare a cell, or return None if the converter rejects it."""
        if self.convert is not None:
            try:
                value = self.convert(value)
            except (TypeError, ValueError):
                logger.debug("condition_unconvertible_value", value=value, condition=str(self))
                return None
        return self._compare(value)

    def _compare(self, value: Any) -> bool:
        """Compare a (converted) cell value against the operand."""
        op = self.op
        operand = self.operand
        if op == ComparisonOp.EQ:
            return value == operand
        elif op == ComparisonOp.NE:
            return value != operand
        elif op == ComparisonOp.LT:
            return value < operand
        elif op == ComparisonOp.LE:
            return value <= operand
        elif op == ComparisonOp.GT:
            return value > operand
        elif op == ComparisonOp.GE:
            return value >= operand
        elif op == ComparisonOp.MATCH:
            return operand.search(str(value)) is not None
        elif op == ComparisonOp.NOT_MATCH:
            return operand.search(str(value)) is None
        elif op == ComparisonOp.CONTAINS:
            return operand in value
        elif op == ComparisonOp.STARTSWITH:
            return str(value).startswith(operand)
        elif op == ComparisonOp.IN:
            return value in operand
        elif op == ComparisonOp.BETWEEN:
            low, high = operand
            return low <= value <= high
        return False

    def __str__(self) -> str:
        operand = self.operand
        if isinstance(operand, re.Pattern):
            operand = f"/{operand.pattern}/"
        else:
            operand = repr(operand)
        return f"{self.op.value} {operand}"


@dataclass(frozen=True)
class LogicalCondition(_Combinable):
    """Conditions combined with AND, OR or NOT.

    A cell that any operand cannot convert makes the whole combination
    unknown, and unknown never matches. Negation therefore cannot turn an
    unconvertible cell into a match.
    """

    op: LogicalOp
    operands: tuple[Predicate, ...]

    def __call__(self, value: str) -> bool:
        return self._evaluate(value) is True

    def _evaluate(self, value: str) -> bool | None:
        results = [_evaluate_predicate(o, value) for o in self.operands]
        if None in results:
            return None
        if self.op == LogicalOp.AND:
            return all(results)
        elif self.op == LogicalOp.OR:
            return any(results)
        elif self.op == LogicalOp.NOT:
            return not results[0]
        return False


def _evaluate_predicate(predicate: Predicate, value: str) -> bool | None:
    """Evaluate any predicate, keeping the unknown result of conditions."""
    if isinstance(predicate, (Condition, LogicalCondition)):
        return predicate._evaluate(value)
    return bool(predicate(value))


def eq(value: Any, convert: Converter | None = None) -> Condition:
    return Condition(ComparisonOp.EQ, value, convert)


def ne(value: Any, convert: Converter | None = None) -> Condition:
    return Condition(ComparisonOp.NE, value, convert)


def lt(value: Any, convert: Converter | None = None) -> Condition:
    return Condition(ComparisonOp.LT, value, convert)


def le(value: Any, convert: Converter | None = None) -> Condition:
    return Condition(ComparisonOp.LE, value, convert)


def gt(value: Any, convert: Converter | None = None) -> Condition:
    return Condition(ComparisonOp.GT, value, convert)


def ge(value: Any, convert: Converter | None = None) -> Condition:
    return Condition(ComparisonOp.GE, value, convert)


def matches(pattern: str | re.Pattern[str], flags: int = 0) -> Condition:
    """Match cells containing the regular expression (unanchored search)."""
    if isinstance(pattern, str):
        pattern = re.compile(pattern, flags)
    return Condition(ComparisonOp.MATCH, pattern)


def contains(text: str) -> Condition:
    return Condition(ComparisonOp.CONTAINS, text)


def startswith(prefix: str) -> Condition:
    return Condition(ComparisonOp.STARTSWITH, prefix)


def is_in(values: Iterable[Any], convert: Converter | None = None) -> Condition:
    return Condition(ComparisonOp.IN, tuple(values), convert)


def between(low: Any, high: Any, convert: Converter | None = None) -> Condition:
    """Match cells within the inclusive range [low, high]."""
    return Condition(ComparisonOp.BETWEEN, (low, high), convert)


_CONDITION_RE = re.compile(r"^\s*(==|!=|<=|>=|=~|!~|<|>)\s*(.*?)\s*$", re.DOTALL)
_REGEX_LITERAL_RE = re.compile(r"^/(.*)/([imsx]*)$", re.DOTALL)
_REGEX_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "x": re.VERBOSE}


def parse_condition(text: str, convert: Converter | None = None) -> Condition:
    """Parse condition text of the form ``OPERATOR LITERAL``.

    Args:
        text: Condition text, e.g. ``"== 'NY'"`` or ``"=~ /New.*/"``.
        convert: Optional converter; the literal is converted with it too,
            so ``parse_condition("> 1000", convert=int)`` compares integers.

    Returns:
        The parsed Condition.

    Raises:
        ConditionParseError: If the text does not follow the grammar.
    """
    m = _CONDITION_RE.match(text)
    if m is None:
        raise ConditionParseError(f"Invalid condition: {text!r}")
    op = ComparisonOp(m.group(1))
    literal = m.group(2)

    regex = _REGEX_LITERAL_RE.match(literal)
    if regex is not None:
        if op not in (ComparisonOp.MATCH, ComparisonOp.NOT_MATCH):
            raise ConditionParseError(f"Regular expression literal requires =~ or !~: {text!r}")
        flags = 0
        for flag in regex.group(2):
            flags |= _REGEX_FLAGS[flag]
        try:
            pattern = re.compile(regex.group(1), flags)
        except re.error as e:
            raise ConditionParseError(f"Invalid regular expression in {text!r}: {e}") from e
        return Condition(op, pattern)

    if len(literal) >= 2 and literal[0] == literal[-1] and literal[0] in "'\"":
        literal = literal[1:-1]
    elif not literal:
        raise ConditionParseError(f"Missing literal in condition: {text!r}")

    if op in (ComparisonOp.MATCH, ComparisonOp.NOT_MATCH):
        try:
            return Condition(op, re.compile(literal))
        except re.error as e:
            raise ConditionParseError(f"Invalid regular expression in {text!r}: {e}") from e

    operand: Any = literal
    if convert is not None:
        try:
            operand = convert(literal)
        except (TypeError, ValueError) as e:
            raise ConditionParseError(f"Cannot convert literal {literal!r}: {e}") from e
    return Condition(op, operand, convert)


def as_predicate(condition: Predicate | str) -> Predicate:
    """Normalize a condition argument to a predicate callable.

    Raises:
        ConditionParseError: If condition text is malformed.
        TypeError: If the argument is neither text nor callable.
    """
    if isinstance(condition, str):
        return parse_condition(condition)
    if callable(condition):
        return condition
    raise TypeError(f"Condition must be callable or condition text, got {type(condition).__name__}")
