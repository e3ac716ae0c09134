"""
Search filter parsing for report listings.

Range expressions accepted for numeric and timestamp attributes:

    5           equal to 5
    1,2,3       any of the listed values
    1..10       between 1 and 10, inclusive (either side may be omitted)
    >5 >=5      greater than (or equal)
    <5 <=5      less than (or equal)
"""

from datetime import datetime, timezone
from typing import Any, Callable, TypeVar

from sqlalchemy import and_
from sqlalchemy.sql.elements import ColumnElement

from models.exceptions import ValidationException

V = TypeVar("V")

_COMPARISONS = (">=", "<=", ">", "<")

# Characters with special meaning in SQL LIKE patterns
LIKE_ESCAPE = "\\"


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 date or datetime.

    Aware values are converted to UTC and made naive to match stored timestamps.
    """
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _cast(raw: str, cast: Callable[[str], V], expression: str) -> V:
    try:
        return cast(raw.strip())
    except ValueError as e:
        raise ValidationException(f"Invalid range expression '{expression}'") from e


def parse_range(expression: str, cast: Callable[[str], V]) -> tuple[str, Any]:
    """
    Parse a range expression into an (operator, operand) pair.

    Args:
        expression: Raw expression from search parameters
        cast: Converter for individual values (e.g. int, parse_timestamp)

    Returns:
        Tuple of operator ("eq", "in", "between", ">=", "<=", ">", "<")
        and the converted operand. For "between" the operand is a
        (low, high) tuple in which either bound may be None.

    Raises:
        ValidationException: If the expression is empty or malformed
    """
    expr = expression.strip()
    if not expr:
        raise ValidationException("Range expression must not be empty")

    if "," in expr:
        values = [
            _cast(part, cast, expression) for part in expr.split(",") if part.strip()
        ]
        if not values:
            raise ValidationException(f"Invalid range expression '{expression}'")
        return "in", values

    if ".." in expr:
        low_raw, high_raw = expr.split("..", 1)
        low = _cast(low_raw, cast, expression) if low_raw.strip() else None
        high = _cast(high_raw, cast, expression) if high_raw.strip() else None
        if low is None and high is None:
            raise ValidationException(f"Invalid range expression '{expression}'")
        return "between", (low, high)

    for op in _COMPARISONS:
        if expr.startswith(op):
            return op, _cast(expr[len(op) :], cast, expression)

    return "eq", _cast(expr, cast, expression)


def range_clause(
    column: Any, expression: str, cast: Callable[[str], Any] = int
) -> ColumnElement[bool]:
    """
    Build a SQL filter clause for a column from a range expression.

    Args:
        column: SQLAlchemy column attribute
        expression: Range expression
        cast: Value converter

    Returns:
        Boolean clause usable with Query.filter
    """
    op, operand = parse_range(expression, cast)

    if op == "in":
        return column.in_(operand)
    if op == "between":
        low, high = operand
        bounds = []
        if low is not None:
            bounds.append(column >= low)
        if high is not None:
            bounds.append(column <= high)
        return and_(*bounds)
    if op == ">=":
        return column >= operand
    if op == "<=":
        return column <= operand
    if op == ">":
        return column > operand
    if op == "<":
        return column < operand
    return column == operand


def wildcard_to_like(pattern: str) -> str:
    """
    Convert a user pattern with '*' wildcards to a LIKE pattern.

    A pattern without any '*' matches as a substring. Literal '%' and '_'
    are escaped with a backslash.

    Args:
        pattern: User-supplied pattern

    Returns:
        Pattern for use with ``ilike(..., escape="\\")``
    """
    escaped = (
        pattern.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    if "*" not in escaped:
        return f"%{escaped}%"
    return escaped.replace("*", "%")
