"""
Exception Types

Errors raised by the price fetcher, the notifiers and the configuration layer.
"""


class PriceMonitorError(Exception):
    """Base class for all price monitor errors."""


class InteractionError(PriceMonitorError):
    """A page element never reached the expected state within the wait bound."""

    def __init__(self, step, message=""):
        self.step = step
        self.message = message
        super().__init__(f"[{step}] {message}" if message else f"[{step}] interaction failed")


class BrowserSessionError(InteractionError):
    """The browser session itself is gone and cannot be recovered."""


class ParseError(PriceMonitorError):
    def __init__(self, text):
        self.text = text
        super().__init__(f"Could not parse price from {text!r}")


class NotificationError(PriceMonitorError):
    """Alert delivery failed."""


class ConfigError(PriceMonitorError):
    """Configuration could not be loaded or is invalid."""
