"""Shared field checks used by transaction and budget validation.

Checks return an error message (or None) instead of raising, so callers can
collect every violated field before raising a single ValidationError.
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from fintrack.domain.models import Money

CENT = Decimal("0.01")

# Largest storable amount in cents, well inside SQLite's signed 64-bit INTEGER
MAX_AMOUNT = Money(10**15)


def is_missing(value: Any) -> bool:
    """Check whether a required field was not supplied."""
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def is_number(value: Any) -> bool:
    """Check whether a value is a finite real number (booleans excluded)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, float):
        return math.isfinite(value)
    return False


def to_money(value: int | float | Decimal) -> Money:
    """Convert an amount in major currency units to minor units.

    Args:
        value: Amount in major units (e.g. 12.34).

    Returns:
        Amount in cents, rounded half-up.

    Raises:
        ValueError: If the amount exceeds MAX_AMOUNT once converted.
    """
    major = Decimal(str(value))
    if abs(major) * 100 > MAX_AMOUNT:
        raise ValueError(f"Amount {value} is larger than the largest storable amount")
    major = major.quantize(CENT, rounding=ROUND_HALF_UP)
    return Money(int(major * 100))


def check_amount(name: str, value: Any, allow_zero: bool) -> str | None:
    """Validate a monetary field.

    Args:
        name: Field name used in the message.
        value: Raw field value in major units.
        allow_zero: Whether zero is acceptable (budgets) or not (transactions).

    Returns:
        Error message, or None if the value is valid.
    """
    if is_missing(value):
        return f"{name} is required"
    if not is_number(value):
        return f"{name} must be a number"
    if allow_zero and value < 0:
        return f"{name} cannot be negative"
    if not allow_zero and value <= 0:
        return f"{name} must be a positive number"
    if Decimal(str(value)) * 100 > MAX_AMOUNT:
        return f"{name} is too large"
    return None


def check_text(name: str, value: Any) -> str | None:
    """Validate a required free-text field."""
    if is_missing(value):
        return f"{name} is required"
    if not isinstance(value, str):
        return f"{name} must be text"
    return None
