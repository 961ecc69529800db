"""Unit tests for typed conditions and explicit conversions."""

from __future__ import annotations

import re
from datetime import date

import pytest
from structlog.testing import capture_logs

from tablestakes.domain.value_objects import (
    ComparisonOp,
    Condition,
    ConditionParseError,
    LogicalCondition,
    LogicalOp,
    as_date,
    as_float,
    as_int,
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


class TestCondition:
    """Tests for Condition evaluation."""

    def test_equality(self) -> None:
        """eq and ne compare text."""
        assert eq("NY")("NY")
        assert not eq("NY")("TX")
        assert ne("NY")("TX")

    def test_ordering_without_conversion_is_lexical(self) -> None:
        """Text compares lexically."""
        assert gt("10")("9")
        assert lt("b")("a")

    def test_ordering_with_conversion(self) -> None:
        """A converter makes ordering numeric."""
        assert not gt(10, convert=as_int)("9")
        assert ge(9, convert=as_int)("9")
        assert le(2.5, convert=as_float)("2.25")

    def test_unconvertible_cell_never_matches(self) -> None:
        """A cell the converter rejects does not match."""
        condition = gt(10, convert=as_int)
        assert not condition("n/a")
        assert (~condition)("5")
        assert not (~condition)("n/a")

    def test_unconvertible_cell_in_combinations(self) -> None:
        """Combining conditions never turns an unconvertible cell into a match."""
        big = gt(10, convert=as_int)

        assert not (~(big & eq("x")))("n/a")
        assert not (~(big | lt(0, convert=as_int)))("n/a")
        assert not (big | eq("n/a"))("n/a")
        assert (~(big & eq("x")))("50")
        assert (big | eq("x"))("50")

    def test_unconvertible_cell_logged(self) -> None:
        """A rejected cell is reported at debug level."""
        with capture_logs() as logs:
            assert not gt(10, convert=as_int)("n/a")

        events = [e for e in logs if e["event"] == "condition_unconvertible_value"]
        assert len(events) == 1
        assert events[0]["value"] == "n/a"
        assert events[0]["log_level"] == "debug"

    def test_pattern(self) -> None:
        """matches() searches anywhere in the cell."""
        assert matches("ork")("New York")
        assert not matches("^ork")("New York")
        assert matches("new", re.IGNORECASE)("New York")

    def test_pattern_from_text_operand(self) -> None:
        """A str operand for MATCH is compiled."""
        condition = Condition(ComparisonOp.MATCH, "^A")
        assert isinstance(condition.operand, re.Pattern)
        assert condition("Albany")

    def test_pattern_requires_text(self) -> None:
        """MATCH rejects non-pattern operands."""
        with pytest.raises(TypeError):
            Condition(ComparisonOp.MATCH, 42)

    def test_contains_and_startswith(self) -> None:
        """Substring tests."""
        assert contains("Main")("123 Main")
        assert startswith("123")("123 Main")
        assert not startswith("Main")("123 Main")

    def test_is_in(self) -> None:
        """Membership tests."""
        condition = is_in(["NY", "NJ"])
        assert condition("NJ")
        assert not condition("TX")

    def test_is_in_rejects_text(self) -> None:
        """A bare string is not a collection of values."""
        with pytest.raises(TypeError):
            Condition(ComparisonOp.IN, "NY")

    def test_between(self) -> None:
        """Inclusive range."""
        condition = between(1, 3, convert=as_int)
        assert condition("1")
        assert condition("3")
        assert not condition("4")

    def test_between_requires_two_bounds(self) -> None:
        """BETWEEN needs exactly two bounds."""
        with pytest.raises(ValueError):
            Condition(ComparisonOp.BETWEEN, (1, 2, 3))

    def test_combinations(self) -> None:
        """&, | and ~ build logical conditions."""
        ny_or_nj = eq("NY") | eq("NJ")
        assert isinstance(ny_or_nj, LogicalCondition)
        assert ny_or_nj.op == LogicalOp.OR
        assert ny_or_nj("NJ")

        small = ge(1, convert=as_int) & lt(10, convert=as_int)
        assert small("5")
        assert not small("10")

        assert (~eq("NY"))("TX")

    def test_str(self) -> None:
        """Conditions render in their text form."""
        assert str(eq("NY")) == "== 'NY'"
        assert str(matches("^New")) == "=~ /^New/"


class TestParseCondition:
    """Tests for the restricted condition grammar."""

    @pytest.mark.parametrize(
        ("text", "op", "operand"),
        [
            ("== 'NY'", ComparisonOp.EQ, "NY"),
            ('!= "NY"', ComparisonOp.NE, "NY"),
            ("==NY", ComparisonOp.EQ, "NY"),
            ("  <  b ", ComparisonOp.LT, "b"),
            (">= 'New York'", ComparisonOp.GE, "New York"),
            ("== ''", ComparisonOp.EQ, ""),
        ],
    )
    def test_comparisons(self, text: str, op: ComparisonOp, operand: str) -> None:
        """Operators and literals are recognized."""
        condition = parse_condition(text)
        assert condition.op == op
        assert condition.operand == operand

    def test_regex_literal(self) -> None:
        """/pattern/flags literals compile with flags."""
        condition = parse_condition("=~ /^new/i")

        assert condition.op == ComparisonOp.MATCH
        assert condition.operand.flags & re.IGNORECASE
        assert condition("New York")

    def test_not_match(self) -> None:
        """!~ negates a pattern."""
        condition = parse_condition("!~ /^New/")
        assert condition("Albany")
        assert not condition("Newark")

    def test_quoted_pattern(self) -> None:
        """A quoted literal after =~ is a pattern."""
        assert parse_condition("=~ 'York$'")("New York")

    def test_convert(self) -> None:
        """A converter applies to the literal and the cells."""
        condition = parse_condition("> 1000000", convert=as_int)

        assert condition.operand == 1000000
        assert condition("8336817")
        assert not condition("99224")

    @pytest.mark.parametrize(
        "text",
        ["", "NY", "=", "== ", "system('ls')", "== /NY/", "=~ /(/"],
    )
    def test_invalid(self, text: str) -> None:
        """Anything outside the grammar is rejected."""
        with pytest.raises(ConditionParseError):
            parse_condition(text)

    def test_unconvertible_literal(self) -> None:
        """A literal the converter rejects is a parse error."""
        with pytest.raises(ConditionParseError):
            parse_condition("> lots", convert=as_int)

    def test_as_predicate(self) -> None:
        """as_predicate accepts callables and text only."""
        def is_ny(value: str) -> bool:
            return value == "NY"

        assert as_predicate(is_ny) is is_ny
        assert isinstance(as_predicate("== NY"), Condition)
        with pytest.raises(TypeError):
            as_predicate(None)  # type: ignore[arg-type]


class TestConversions:
    """Tests for explicit text conversions."""

    def test_as_int(self) -> None:
        assert as_int(" 42 ") == 42
        with pytest.raises(ValueError):
            as_int("4.2")

    def test_as_float(self) -> None:
        assert as_float("2.5") == 2.5

    def test_as_date(self) -> None:
        """as_date builds a converter for a strptime format."""
        assert as_date()("2014-03-01") == date(2014, 3, 1)
        assert as_date("%m/%d/%Y")("07/04/1776") == date(1776, 7, 4)
        with pytest.raises(ValueError):
            as_date()("March 1")
