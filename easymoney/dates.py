"""Date utilities for easymoney.

Pure functions for month keys and formatting.
"""

from datetime import date, datetime

from easymoney.domain.models import Month


def month_key(value: date) -> Month:
    """Derive the month key for a date.

    Args:
        value: Date or datetime. No timezone conversion is applied.

    Returns:
        Month in YYYY-MM format (e.g., "2024-03").
    """
    return Month(f"{value.year:04d}-{value.month:02d}")


def current_month() -> Month:
    """Month key for today."""
    return month_key(datetime.now())


def parse_month(text: str) -> Month:
    """Validate a month string.

    Args:
        text: Month in YYYY-MM format.

    Returns:
        The normalized month key.

    Raises:
        ValueError: If text is not a valid YYYY-MM month.
    """
    dt = datetime.strptime(text.strip(), "%Y-%m")
    return month_key(dt)


def month_label(month: Month) -> str:
    """Human-readable label for a month (e.g., "March 2024")."""
    dt = datetime.strptime(month, "%Y-%m")
    return dt.strftime("%B %Y")
