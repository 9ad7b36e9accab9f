"""
Price Monitor

Holds the baseline price for one search and decides, on every tick, whether
the current price has moved far enough from it to send an alert.

The baseline is the first successful reading of the run and never changes
afterwards; every later reading is compared against it, not against the
previous reading.
"""

import logging
import threading
from decimal import Decimal
from enum import Enum

from monitoring.errors import (
    BrowserSessionError,
    InteractionError,
    NotificationError,
    ParseError,
)

logger = logging.getLogger(__name__)


class MonitorStatus(Enum):
    UNINITIALIZED = "uninitialized"
    BASELINED = "baselined"


class TickOutcome(Enum):
    BASELINED = "baselined"
    UNCHANGED = "unchanged"
    NOTIFIED = "notified"
    NOTIFY_FAILED = "notify_failed"
    FETCH_FAILED = "fetch_failed"
    SKIPPED = "skipped"


class MonitorState:
    """
    Baseline and threshold for one monitoring run.

    Args:
        threshold: Minimum absolute change, in percent, that triggers an alert
    """

    def __init__(self, threshold):
        threshold = Decimal(str(threshold))
        if not threshold.is_finite() or threshold <= 0:
            raise ValueError(f"Threshold must be positive, got {threshold}")
        self.threshold = threshold
        self.baseline = None

    @property
    def status(self):
        if self.baseline is None:
            return MonitorStatus.UNINITIALIZED
        return MonitorStatus.BASELINED

    def establish_baseline(self, reading):
        if self.baseline is not None:
            raise RuntimeError("Baseline is already set for this run")
        self.baseline = reading

    def change_percent(self, reading):
        """Percentage change of the reading relative to the baseline."""
        if self.baseline is None:
            raise RuntimeError("Cannot compute a change before the baseline is set")
        base = self.baseline.value
        return (reading.value - base) / base * 100

    def exceeds_threshold(self, change_pct):
        return abs(change_pct) >= self.threshold


class PriceMonitor:
    """
    Runs one check per tick: fetch, compare to baseline, maybe notify.

    Fetch and parse failures are logged and leave the state untouched.
    A lost browser session is not recoverable here and is re-raised.
    """

    def __init__(self, fetcher, query, state, notifier):
        self.fetcher = fetcher
        self.query = query
        self.state = state
        self.notifier = notifier
        self.ticks = 0
        self.failures = 0
        self.notifications = 0
        self._lock = threading.Lock()

    def tick(self):
        if not self._lock.acquire(blocking=False):
            logger.warning("Previous check still in progress, skipping this tick")
            return TickOutcome.SKIPPED
        try:
            self.ticks += 1
            return self._check()
        finally:
            self._lock.release()

    def _check(self):
        try:
            reading = self.fetcher.fetch(self.query)
        except BrowserSessionError:
            self.failures += 1
            raise
        except (InteractionError, ParseError) as e:
            self.failures += 1
            logger.error(f"Price check failed for {self.query}: {e}")
            return TickOutcome.FETCH_FAILED

        if self.state.baseline is None:
            if reading.value == 0:
                # A zero baseline would make every later change undefined
                self.failures += 1
                logger.error(f"Ignoring zero price for {self.query} as baseline")
                return TickOutcome.FETCH_FAILED
            self.state.establish_baseline(reading)
            logger.info(f"Baseline price established: {reading.value}")
            return TickOutcome.BASELINED

        baseline = self.state.baseline.value
        change_pct = self.state.change_percent(reading)
        logger.info(
            f"Current price {reading.value}, baseline {baseline}, change {change_pct:+.2f}%"
        )

        if not self.state.exceeds_threshold(change_pct):
            return TickOutcome.UNCHANGED

        logger.warning(
            f"Price moved {change_pct:+.2f}% (threshold {self.state.threshold}%), sending alert"
        )
        try:
            self.notifier.notify(baseline, reading.value)
        except NotificationError as e:
            logger.error(f"Failed to send price alert: {e}")
            return TickOutcome.NOTIFY_FAILED

        self.notifications += 1
        return TickOutcome.NOTIFIED
