"""
Data Models

Immutable value objects passed between the fetcher and the monitor.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from utils.date_converter import format_travel_date, parse_travel_date


@dataclass(frozen=True)
class SearchQuery:
    """One route and travel date, fixed for the lifetime of a monitoring run."""

    origin: str
    destination: str
    date: date

    def __post_init__(self):
        if not self.origin or not self.origin.strip():
            raise ValueError("Origin city must not be empty")
        if not self.destination or not self.destination.strip():
            raise ValueError("Destination city must not be empty")

    @classmethod
    def from_strings(cls, origin, destination, date_str):
        """Build a query from raw user input; the date is DD.MM.YYYY."""
        return cls(
            origin=(origin or "").strip(),
            destination=(destination or "").strip(),
            date=parse_travel_date(date_str),
        )

    @property
    def date_text(self):
        return format_travel_date(self.date)

    def __str__(self):
        return f"{self.origin} -> {self.destination} on {self.date_text}"


@dataclass(frozen=True)
class PriceReading:
    value: Decimal
    timestamp: datetime

    def __post_init__(self):
        if self.value < 0:
            raise ValueError(f"Price must be non-negative, got {self.value}")
