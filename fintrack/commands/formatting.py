"""Shared display helpers for command output."""

from fintrack.domain.models import Money


def format_money(amount: Money, currency: str = "$") -> str:
    """Format an amount in cents for display (e.g., "$1,234.50")."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{currency}{abs(amount) / 100:,.2f}"


def to_major_units(amount: Money) -> float:
    """Convert cents back to major currency units for editing."""
    return amount / 100
