"""Conversion between NAV source dates (DD-MM-YYYY) and calendar dates.

The NAV source and our API speak ``DD-MM-YYYY`` strings, which do not sort
chronologically as text. Everything in between works with ``datetime.date``.
"""

from datetime import date, datetime

from navfolio.constants import NAV_DATE_FORMAT


def parse_nav_date(value: str) -> date:
    """Parse a ``DD-MM-YYYY`` string.

    Raises:
        ValueError: If the value is not a valid date in that format
    """
    return datetime.strptime(value.strip(), NAV_DATE_FORMAT).date()


def format_nav_date(value: date) -> str:
    """Format a calendar date as ``DD-MM-YYYY``."""
    return value.strftime(NAV_DATE_FORMAT)
