"""
Datetime utility functions.
Provides replacements for deprecated datetime functions.
"""

from datetime import date, datetime
from typing import Union
import pytz


def utcnow() -> datetime:
    """
    Get current UTC datetime using pytz.UTC.

    Returns:
        Current UTC datetime with pytz timezone information
    """
    return datetime.now(pytz.UTC)


def today() -> date:
    """Current calendar date in UTC."""
    return utcnow().date()


def parse_date(date_input: Union[str, date]) -> date:
    """
    Parse an ISO date string (YYYY-MM-DD) into a date.

    Args:
        date_input: ISO date string, date or datetime

    Returns:
        date object

    Raises:
        ValueError: If the string is not a valid ISO date
    """
    if isinstance(date_input, datetime):
        return date_input.date()
    if isinstance(date_input, date):
        return date_input
    if not isinstance(date_input, str):
        raise ValueError(f"Expected string or date, got {type(date_input)}")
    try:
        return datetime.strptime(date_input.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValueError(f"Invalid date '{date_input}', expected YYYY-MM-DD")


def format_long_date(value: date) -> str:
    """
    Format a date the way booking confirmations display it.

    Examples:
        >>> format_long_date(date(2026, 1, 5))
        "January 5, 2026"
    """
    return f"{value.strftime('%B')} {value.day}, {value.year}"


def format_short_date(value: Union[date, datetime]) -> str:
    """Format a date like "Jan 5, 2026" for tournament cards."""
    return f"{value.strftime('%b')} {value.day}, {value.year}"
