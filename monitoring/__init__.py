"""
Monitoring Module

Contains the flight price monitoring functionality:
- Browser automation of the booking search form
- Baseline tracking and threshold checks
- Email notifications
"""

from .errors import (
    BrowserSessionError,
    ConfigError,
    InteractionError,
    NotificationError,
    ParseError,
    PriceMonitorError,
)
from .models import PriceReading, SearchQuery
from .notifier import EmailNotifier, LogNotifier
from .price_fetcher import PriceFetcher, parse_price
from .price_monitor import MonitorState, MonitorStatus, PriceMonitor, TickOutcome

__all__ = [
    'BrowserSessionError',
    'ConfigError',
    'InteractionError',
    'NotificationError',
    'ParseError',
    'PriceMonitorError',
    'PriceReading',
    'SearchQuery',
    'EmailNotifier',
    'LogNotifier',
    'PriceFetcher',
    'parse_price',
    'MonitorState',
    'MonitorStatus',
    'PriceMonitor',
    'TickOutcome',
]
