#!/usr/bin/env python3
"""
Flight Price Monitor - Main Entry Point

Checks the price of one flight every minute and emails an alert when it moves
more than the configured percentage away from the first observed price.

Usage:
    python main.py --origin Moscow --destination Sochi --date 16.03.2026
    python main.py            # prompts for the route and date
"""

import argparse
import math
import sys


def prompt_missing(args):
    """Ask for any search parameter not given on the command line."""
    if not args.origin:
        args.origin = input("Departure city: ")
    if not args.destination:
        args.destination = input("Destination city: ")
    if not args.date:
        args.date = input("Departure date (DD.MM.YYYY): ")
    return args


def main(argv=None):
    parser = argparse.ArgumentParser(description="Flight Price Monitor")

    parser.add_argument("--origin", help="Departure city")
    parser.add_argument("--destination", help="Destination city")
    parser.add_argument("--date", help="Departure date in DD.MM.YYYY format")
    parser.add_argument("--threshold", type=float, help="Alert threshold in percent (overrides PRICE_THRESHOLD)")
    parser.add_argument("--interval", type=float, help="Seconds between checks (overrides CHECK_INTERVAL_SECONDS)")
    parser.add_argument("--once", action="store_true", help="Run a single check and exit")
    parser.add_argument("--dry-run", action="store_true", help="Log alerts instead of emailing them")
    parser.add_argument("--no-headless", action="store_true", help="Show the browser window")

    args = parser.parse_args(argv)

    from config.logging_config import setup_logging
    from config.settings import load_settings
    from monitoring.errors import ConfigError
    from monitoring.models import SearchQuery
    from monitoring.notifier import EmailNotifier, LogNotifier
    from monitoring.price_fetcher import PriceFetcher
    from monitoring.price_monitor import MonitorState, PriceMonitor
    from services.monitoring_daemon import MonitoringDaemon, install_signal_handlers

    try:
        settings = load_settings(require_email=not args.dry_run)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    setup_logging(settings.log_file, settings.log_level)

    prompt_missing(args)
    try:
        query = SearchQuery.from_strings(args.origin, args.destination, args.date)
        state = MonitorState(args.threshold if args.threshold is not None else settings.threshold)
    except ValueError as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return 2

    interval = args.interval if args.interval is not None else settings.check_interval
    if not math.isfinite(interval) or interval <= 0:
        print("Invalid input: interval must be positive", file=sys.stderr)
        return 2

    if args.dry_run:
        notifier = LogNotifier()
    else:
        notifier = EmailNotifier(
            smtp_server=settings.smtp_server,
            smtp_port=settings.smtp_port,
            sender_email=settings.sender_email,
            sender_password=settings.sender_password,
            receiver_emails=settings.receiver_emails,
        )

    fetcher = PriceFetcher(
        url=settings.search_url,
        wait_timeout=settings.wait_timeout,
        headless=settings.headless and not args.no_headless,
        timezone=settings.timezone,
    )
    monitor = PriceMonitor(fetcher, query, state, notifier)
    daemon = MonitoringDaemon(monitor, fetcher, interval=interval)
    install_signal_handlers(daemon)

    print(f"🚀 Monitoring {query}")
    print(f"📉 Alert threshold: {state.threshold}%")
    return daemon.run(max_ticks=1 if args.once else None)


if __name__ == "__main__":
    sys.exit(main())
