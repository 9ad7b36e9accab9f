"""
Utility modules for the flight price monitor.
"""

from .date_converter import format_travel_date, now_in_timezone, parse_travel_date

__all__ = ['parse_travel_date', 'format_travel_date', 'now_in_timezone']
