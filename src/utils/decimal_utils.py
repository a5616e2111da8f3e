"""Helpers for Decimal normalization."""

from decimal import Decimal, InvalidOperation

MONEY_PLACES = Decimal("0.01")
# Largest value a NUMERIC(18, 2) column holds.
MAX_MONEY = Decimal("9999999999999999.99")


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from SQL, adapters or user input.

    Returns:
        Decimal: Normalized numeric value.

    Raises:
        ValueError: If the value cannot be read as a number.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a numeric value: {value!r}")
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Not a numeric value: {value!r}") from exc


def quantize_money(value) -> Decimal:
    """Round a value to two decimal places."""
    return coerce_decimal(value).quantize(MONEY_PLACES)


def has_money_precision(value: Decimal) -> bool:
    """Return True when the value carries at most two decimal places.

    Values too large to quantize within the Decimal context are reported
    as False.
    """
    try:
        return value == value.quantize(MONEY_PLACES)
    except InvalidOperation:
        return False


__all__ = [
    "MONEY_PLACES",
    "MAX_MONEY",
    "coerce_decimal",
    "quantize_money",
    "has_money_precision",
]
