"""
Configuration Management

Loads application settings from environment variables (and a .env file).
"""

import math
import os
from dataclasses import dataclass, field

import pytz
from dotenv import load_dotenv

from monitoring.errors import ConfigError

DEFAULT_SEARCH_URL = "https://www.aeroflot.ru/ru-ru"


@dataclass(frozen=True)
class Settings:
    search_url: str = DEFAULT_SEARCH_URL
    wait_timeout: float = 20
    threshold: float = 5
    check_interval: float = 60
    headless: bool = True
    timezone: str = "Europe/Moscow"
    smtp_server: str = "smtp.gmail.com"
    smtp_port: int = 587
    sender_email: str = None
    sender_password: str = None
    receiver_emails: list = field(default_factory=list)
    log_file: str = "price_monitor.log"
    log_level: str = "INFO"


def _get_number(name, default, cast=float):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw.strip())
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got '{raw}'") from e
    if not math.isfinite(value) or value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def _get_bool(name, default):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_settings(require_email=True, env_file=None):
    """
    Read settings from the environment.

    Args:
        require_email (bool): Fail when mail credentials are missing
        env_file (str, optional): Path to a .env file (default: search upwards)

    Returns:
        Settings: Validated settings

    Raises:
        ConfigError: If a value is missing or invalid
    """
    load_dotenv(env_file)

    receivers = [
        email.strip()
        for email in os.getenv("RECEIVER_EMAILS", "").split(",")
        if email.strip()
    ]

    settings = Settings(
        search_url=os.getenv("SEARCH_URL", DEFAULT_SEARCH_URL),
        wait_timeout=_get_number("WAIT_TIMEOUT_SECONDS", 20),
        threshold=_get_number("PRICE_THRESHOLD", 5),
        check_interval=_get_number("CHECK_INTERVAL_SECONDS", 60),
        headless=_get_bool("HEADLESS", True),
        timezone=os.getenv("TIMEZONE", "Europe/Moscow"),
        smtp_server=os.getenv("SMTP_SERVER", "smtp.gmail.com"),
        smtp_port=_get_number("SMTP_PORT", 587, cast=int),
        sender_email=os.getenv("SENDER_EMAIL"),
        sender_password=os.getenv("SENDER_PASSWORD"),
        receiver_emails=receivers,
        log_file=os.getenv("LOG_FILE", "price_monitor.log"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )

    if not settings.search_url:
        raise ConfigError("SEARCH_URL must not be empty")

    try:
        pytz.timezone(settings.timezone)
    except pytz.UnknownTimeZoneError as e:
        raise ConfigError(f"Unknown timezone '{settings.timezone}'") from e

    if require_email:
        missing = [
            name
            for name, value in (
                ("SENDER_EMAIL", settings.sender_email),
                ("SENDER_PASSWORD", settings.sender_password),
                ("RECEIVER_EMAILS", settings.receiver_emails),
            )
            if not value
        ]
        if missing:
            raise ConfigError(f"Email settings not configured: {', '.join(missing)}")

    return settings
