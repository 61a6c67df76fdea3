"""Outbound mail over SMTP."""

import logging
import smtplib
from email.message import EmailMessage

from src.config import get_settings
from src.services.errors import MailDeliveryError

logger = logging.getLogger(__name__)


class MailTransport:
    """Sends plain-text mail through the configured SMTP server."""

    def __init__(self) -> None:
        self.settings = get_settings()
        self.timeout = 30.0

    def send(self, to: str, subject: str, body: str) -> None:
        """Send a message. Raises MailDeliveryError on any SMTP failure."""
        message = EmailMessage()
        message["From"] = self.settings.mail_sender or ""
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)

        try:
            with smtplib.SMTP(
                self.settings.smtp_host, self.settings.smtp_port, timeout=self.timeout
            ) as smtp:
                if self.settings.smtp_use_tls:
                    smtp.starttls()
                if self.settings.smtp_username and self.settings.smtp_password:
                    smtp.login(self.settings.smtp_username, self.settings.smtp_password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send mail to {to}: {e}")
            raise MailDeliveryError() from e

        logger.info(f"Sent '{subject}' to {to}")


def get_mail_transport() -> MailTransport:
    """Get a mail transport instance."""
    return MailTransport()
