"""
Date Conversion Utility

Converts travel dates between ``datetime.date`` and the DD.MM.YYYY format
typed into the booking site's date field (e.g. "16.03.2026").
"""

from datetime import datetime

import pytz

TRAVEL_DATE_FORMAT = "%d.%m.%Y"


def parse_travel_date(date_str):
    """
    Convert a DD.MM.YYYY string to a date.

    Args:
        date_str (str): Date in DD.MM.YYYY format

    Returns:
        datetime.date: The parsed date

    Raises:
        ValueError: If date_str is not in valid DD.MM.YYYY format
    """
    try:
        return datetime.strptime(date_str.strip(), TRAVEL_DATE_FORMAT).date()
    except (ValueError, AttributeError) as e:
        raise ValueError(f"Invalid date format '{date_str}'. Expected DD.MM.YYYY") from e


def format_travel_date(date_obj):
    """Convert a date to DD.MM.YYYY format."""
    return date_obj.strftime(TRAVEL_DATE_FORMAT)


def now_in_timezone(timezone="Europe/Moscow"):
    """
    Current time as an aware datetime in the given timezone.

    Raises:
        pytz.UnknownTimeZoneError: If the timezone name is unknown
    """
    return datetime.now(pytz.timezone(timezone))
