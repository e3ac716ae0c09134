"""Tests for search filter parsing."""

from datetime import datetime

import pytest

from helpers.search_filters import parse_range, parse_timestamp, wildcard_to_like
from models.exceptions import ValidationException


class TestParseRange:
    """Test range expression parsing."""

    @pytest.mark.parametrize(
        "expression,expected",
        [
            ("5", ("eq", 5)),
            (" 7 ", ("eq", 7)),
            ("1,2,3", ("in", [1, 2, 3])),
            ("1..10", ("between", (1, 10))),
            ("..10", ("between", (None, 10))),
            ("3..", ("between", (3, None))),
            (">5", (">", 5)),
            (">=5", (">=", 5)),
            ("<5", ("<", 5)),
            ("<=5", ("<=", 5)),
        ],
    )
    def test_integer_expressions(self, expression, expected) -> None:
        assert parse_range(expression, int) == expected

    @pytest.mark.parametrize("expression", ["", "  ", "abc", "1..x", "..", ",", ">"])
    def test_malformed_expressions(self, expression) -> None:
        with pytest.raises(ValidationException):
            parse_range(expression, int)

    def test_timestamp_range(self) -> None:
        op, (low, high) = parse_range("2024-01-01..2024-02-01", parse_timestamp)
        assert op == "between"
        assert low == datetime(2024, 1, 1)
        assert high == datetime(2024, 2, 1)


class TestParseTimestamp:
    """Test timestamp parsing."""

    def test_naive_value_unchanged(self) -> None:
        assert parse_timestamp("2024-05-01T12:30:00") == datetime(2024, 5, 1, 12, 30)

    def test_aware_value_converted_to_utc(self) -> None:
        """Offsets are applied and the result is naive UTC."""
        parsed = parse_timestamp("2024-05-01T12:30:00+02:00")
        assert parsed == datetime(2024, 5, 1, 10, 30)
        assert parsed.tzinfo is None


class TestWildcardToLike:
    """Test wildcard conversion."""

    def test_plain_text_matches_substring(self) -> None:
        assert wildcard_to_like("spam") == "%spam%"

    def test_star_becomes_percent(self) -> None:
        assert wildcard_to_like("spam*bot") == "spam%bot"
        assert wildcard_to_like("*bot") == "%bot"

    def test_like_metacharacters_escaped(self) -> None:
        assert wildcard_to_like("100%") == "%100\\%%"
        assert wildcard_to_like("a_b*") == "a\\_b%"
