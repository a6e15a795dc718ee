"""Date utilities for fintrack.

Pure functions for month keys and labels.
"""

import re
from datetime import date, datetime

from fintrack.domain.models import Month

MONTH_KEY_PATTERN = re.compile(r"^\d{4}-\d{2}$")
MONTH_LABEL_FORMAT = "%b %Y"


def is_month_key(value: object) -> bool:
    """Check whether a value is a valid YYYY-MM month key."""
    if not isinstance(value, str) or not MONTH_KEY_PATTERN.match(value):
        return False
    return 1 <= int(value[5:7]) <= 12


def parse_record_date(value: object) -> date | None:
    """Parse a stored transaction date, tolerating legacy formats.

    Args:
        value: A date, datetime, or ISO-8601 string (time part ignored).

    Returns:
        The calendar date, or None if the value cannot be interpreted.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def month_of(value: object) -> Month | None:
    """Get the YYYY-MM month key of a stored transaction date.

    Returns:
        Month key, or None if the date is malformed.
    """
    parsed = parse_record_date(value)
    if parsed is None:
        return None
    return Month(parsed.strftime("%Y-%m"))


def current_month(today: date | None = None) -> Month:
    """Get the month key for a reference date (defaults to the system clock)."""
    if today is None:
        today = date.today()
    return Month(today.strftime("%Y-%m"))


def shift_month(month: Month, offset: int) -> Month:
    """Move a month key forwards or backwards by whole months.

    Args:
        month: Month in YYYY-MM format.
        offset: Number of months to move (negative moves backwards).

    Returns:
        Shifted month key, with year rollover.
    """
    year, month_num = int(month[:4]), int(month[5:7])
    index = year * 12 + (month_num - 1) + offset
    return Month(f"{index // 12:04d}-{index % 12 + 1:02d}")


def previous_month(month: Month) -> Month:
    """Get the month before the given one (January rolls back to December)."""
    return shift_month(month, -1)


def month_label(month: Month) -> str:
    """Format a month key as a short label (e.g., "Jan 2025")."""
    return datetime.strptime(month, "%Y-%m").strftime(MONTH_LABEL_FORMAT)


def month_display(month: Month) -> str:
    """Format a month key as a long label (e.g., "January 2025")."""
    return datetime.strptime(month, "%Y-%m").strftime("%B %Y")


def parse_month_label(label: str) -> date:
    """Parse a short month label back to the first day of that month.

    Raises:
        ValueError: If the label is not in "Mon YYYY" form.
    """
    return datetime.strptime(label, MONTH_LABEL_FORMAT).date()


def month_options(today: date | None = None, span: int = 12) -> list[Month]:
    """List month keys around a reference date for budget entry.

    Args:
        today: Reference date. If None, uses the system clock.
        span: Number of months either side of the reference month.

    Returns:
        Sorted month keys from span months before to span months after.
    """
    base = current_month(today)
    return sorted({shift_month(base, offset) for offset in range(-span, span + 1)})
