"""Tests for price alert formatting and SMTP delivery."""

import smtplib
from decimal import Decimal
from unittest.mock import patch

import pytest

from monitoring.errors import NotificationError
from monitoring.notifier import EmailNotifier, LogNotifier, format_price_alert


def make_notifier(**overrides):
    params = dict(
        smtp_server="smtp.example.com",
        smtp_port=587,
        sender_email="monitor@example.com",
        sender_password="secret",
        receiver_emails=["traveller@example.com", "partner@example.com"],
    )
    params.update(overrides)
    return EmailNotifier(**params)


def test_format_price_alert_increase():
    subject, body = format_price_alert(Decimal(10000), Decimal(10600))

    assert subject == "Price changed by 6.00%"
    assert "Initial price: 10000.00 RUB" in body
    assert "Current price: 10600.00 RUB" in body
    assert "Change: +600.00 RUB (+6.00%)" in body


def test_format_price_alert_decrease():
    subject, body = format_price_alert(Decimal(25000), Decimal(20000))

    assert subject == "Price changed by -20.00%"
    assert "Change: -5000.00 RUB (-20.00%)" in body


def test_email_is_sent_over_starttls():
    with patch("smtplib.SMTP") as mock_smtp:
        make_notifier().notify(Decimal(25000), Decimal(30000))

    mock_smtp.assert_called_once_with("smtp.example.com", 587, timeout=20)
    server = mock_smtp.return_value.__enter__.return_value
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("monitor@example.com", "secret")
    message = server.send_message.call_args[0][0]
    assert message["To"] == "traveller@example.com, partner@example.com"
    assert message["Subject"] == "Price changed by 20.00%"


def test_smtp_failure_raises_notification_error():
    with patch("smtplib.SMTP") as mock_smtp:
        server = mock_smtp.return_value.__enter__.return_value
        server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad credentials")

        with pytest.raises(NotificationError):
            make_notifier().notify(Decimal(100), Decimal(200))


def test_connection_failure_raises_notification_error():
    with patch("smtplib.SMTP", side_effect=ConnectionRefusedError("refused")):
        with pytest.raises(NotificationError):
            make_notifier().notify(Decimal(100), Decimal(200))


@pytest.mark.parametrize(
    "overrides",
    [{"sender_email": None}, {"sender_password": ""}, {"receiver_emails": []}],
)
def test_missing_settings_raise_before_connecting(overrides):
    with patch("smtplib.SMTP") as mock_smtp:
        with pytest.raises(NotificationError):
            make_notifier(**overrides).notify(Decimal(100), Decimal(200))

    mock_smtp.assert_not_called()


def test_log_notifier_writes_warning(caplog):
    with caplog.at_level("WARNING", logger="monitoring.notifier"):
        LogNotifier().notify(Decimal(100), Decimal(150))

    assert "Price changed by 50.00%" in caplog.text
