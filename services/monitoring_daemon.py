"""
Monitoring Daemon

Runs the price check on a fixed-rate schedule until it is asked to stop.
A single worker runs every tick to completion before the next one starts.
"""

import logging
import signal
import threading
import time

from monitoring.errors import BrowserSessionError

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 60


class MonitoringDaemon:
    """
    Fixed-rate scheduler around a PriceMonitor.

    Ticks are scheduled every ``interval`` seconds from the previous scheduled
    start. A tick that overruns the interval delays the next one; ticks never
    overlap. The browser session is released on every exit path.
    """

    def __init__(self, monitor, fetcher, interval=DEFAULT_INTERVAL):
        self.monitor = monitor
        self.fetcher = fetcher
        self.interval = interval
        self._stop_event = threading.Event()

    @property
    def running(self):
        return not self._stop_event.is_set()

    def stop(self):
        """Ask the loop to finish after the current tick."""
        self._stop_event.set()

    def run(self, max_ticks=None):
        """
        Run ticks until stopped.

        Args:
            max_ticks (int, optional): Stop after this many ticks

        Returns:
            int: Process exit status (0 on normal stop, 1 if the browser session was lost)
        """
        logger.info(f"Starting Monitoring Daemon for {self.monitor.query}")
        logger.info(f"Check interval: {self.interval} seconds")

        exit_code = 0
        cycle_count = 0
        next_run = time.monotonic()

        try:
            while self.running:
                cycle_count += 1
                logger.info(f"=== Monitoring Cycle #{cycle_count} ===")

                try:
                    outcome = self.monitor.tick()
                    logger.info(f"Cycle #{cycle_count} finished: {outcome.value}")
                except BrowserSessionError as e:
                    logger.critical(f"Browser session lost, shutting down: {e}")
                    exit_code = 1
                    break
                except Exception as e:
                    logger.error(f"Error in monitoring cycle: {e}", exc_info=True)

                if max_ticks is not None and cycle_count >= max_ticks:
                    break

                next_run += self.interval
                wait_time = next_run - time.monotonic()
                if wait_time <= 0:
                    if self.interval > 0:
                        logger.warning(
                            f"Cycle overran the interval by {-wait_time:.1f} seconds, starting next cycle now"
                        )
                    next_run = time.monotonic()
                    continue

                logger.info(f"Waiting {wait_time:.0f} seconds before next cycle...")
                self._stop_event.wait(wait_time)

        except KeyboardInterrupt:
            logger.info("Interrupted by user")
        finally:
            self.fetcher.close()
            logger.info(
                f"Checks: {self.monitor.ticks}, failed: {self.monitor.failures}, "
                f"alerts sent: {self.monitor.notifications}"
            )
            logger.info("Monitoring Daemon stopped")

        return exit_code


def install_signal_handlers(daemon):
    """Stop the daemon gracefully on SIGINT and SIGTERM."""

    def signal_handler(signum, frame):
        logger.info("Received shutdown signal. Stopping gracefully...")
        daemon.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)
