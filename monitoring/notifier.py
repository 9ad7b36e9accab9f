"""
Notification Module

Formats price-change alerts and delivers them by email.
"""

import logging
import smtplib
from decimal import Decimal
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from monitoring.errors import NotificationError

logger = logging.getLogger(__name__)

SMTP_TIMEOUT = 20


def format_price_alert(baseline, current):
    """
    Build the subject and body of a price alert.

    Args:
        baseline: Price observed on the first check
        current: Price observed on this check

    Returns:
        tuple: (subject, body)
    """
    baseline = Decimal(baseline)
    current = Decimal(current)
    difference = current - baseline
    percentage = difference / baseline * 100

    subject = f"Price changed by {percentage:.2f}%"
    body = f"""Initial price: {baseline:.2f} RUB
Current price: {current:.2f} RUB
Change: {difference:+.2f} RUB ({percentage:+.2f}%)

---
This is an automated notification from the flight price monitor.
"""
    return subject, body


class EmailNotifier:
    """
    Sends price alerts over SMTP with STARTTLS.
    """

    def __init__(self, smtp_server, smtp_port, sender_email, sender_password, receiver_emails, timeout=SMTP_TIMEOUT):
        self.smtp_server = smtp_server
        self.smtp_port = smtp_port
        self.sender_email = sender_email
        self.sender_password = sender_password
        self.receiver_emails = list(receiver_emails)
        self.timeout = timeout

    def notify(self, baseline, current):
        """
        Email a price alert to every receiver.

        Raises:
            NotificationError: If credentials are missing or SMTP delivery fails
        """
        if not self.sender_email or not self.sender_password:
            raise NotificationError(
                "Email credentials not configured. Set SENDER_EMAIL and SENDER_PASSWORD."
            )
        if not self.receiver_emails:
            raise NotificationError("No receivers configured. Set RECEIVER_EMAILS.")

        subject, body = format_price_alert(baseline, current)

        message = MIMEMultipart()
        message["From"] = self.sender_email
        message["To"] = ", ".join(self.receiver_emails)
        message["Subject"] = subject
        message.attach(MIMEText(body, "plain", "utf-8"))

        try:
            with smtplib.SMTP(self.smtp_server, self.smtp_port, timeout=self.timeout) as server:
                server.starttls()
                server.login(self.sender_email, self.sender_password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"SMTP error sending price alert: {e}") from e

        logger.info(f"Price alert sent to {', '.join(self.receiver_emails)}")


class LogNotifier:
    """Writes alerts to the log instead of sending them."""

    def notify(self, baseline, current):
        subject, body = format_price_alert(baseline, current)
        logger.warning(f"{subject}\n{body}")
