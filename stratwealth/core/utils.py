from datetime import datetime, timezone
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP
from typing import Optional, Union

from stratwealth.core.config import settings

CENT = Decimal("0.01")


def to_decimal(value: Union[Decimal, int, float, str]) -> Decimal:
    """
    Converts a numeric input to Decimal without binary floating point drift.
    Floats go through their shortest repr, so 0.1 becomes Decimal("0.1").
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("Boolean is not a monetary amount")
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def quantize_money(value: Decimal) -> Decimal:
    """Rounds to the currency minor unit (cents), half up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def truncate_money(value: Decimal) -> Decimal:
    """Drops fractions of a cent, rounding toward zero."""
    return value.quantize(CENT, rounding=ROUND_DOWN)


def format_money(value: Decimal, currency: Optional[str] = None) -> str:
    """
    Human readable amount for notification messages.
    Example: 1500000 -> "1,500,000.00 USD"
    """
    return f"{quantize_money(value):,.2f} {currency or settings.CURRENCY}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """SQLite drops tzinfo on round-trip; stored datetimes are always UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
