"""
Money Utilities - Safe Decimal operations for prices.

Avoids float precision issues by using Decimal throughout; prices are
stored as strings so a cart snapshot survives a JSON round trip exactly.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

MONEY_PRECISION = Decimal("0.01")

DEFAULT_CURRENCY = "NPR"

Number = Union[str, int, float, Decimal]


def to_decimal(value: Union[Number, None]) -> Decimal:
    """
    Convert any value to Decimal leniently.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)

    Returns:
        Decimal representation, or Decimal("0") if None/invalid
    """
    if value is None:
        return Decimal("0")

    if isinstance(value, Decimal):
        return value

    try:
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def parse_money(value: Number) -> Decimal:
    """
    Convert a value to a finite, non-negative Decimal or raise.

    Unlike to_decimal this never substitutes zero, so corrupted input
    can be told apart from a free product.

    Raises:
        ValueError: If the value is not a valid price
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid price: {value!r}")
    try:
        result = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, ValueError, TypeError) as e:
        raise ValueError(f"Invalid price: {value!r}") from e
    if not result.is_finite() or result < 0:
        raise ValueError(f"Invalid price: {value!r}")
    return result


def round_money(value: Number) -> Decimal:
    """Round a monetary value to two decimal places."""
    return to_decimal(value).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def format_money(value: Number, currency: str = DEFAULT_CURRENCY) -> str:
    """
    Format a monetary value for display, e.g. "NPR 1,250.00".

    Args:
        value: Value to format
        currency: Currency code prefix

    Returns:
        Formatted string
    """
    return f"{currency} {round_money(value):,.2f}"


def to_float(value: Number) -> float:
    """
    Convert Decimal to float for JSON responses.

    Use only at API boundaries, not for internal calculations.
    """
    return float(to_decimal(value))
