"""Outbound email transports."""

import smtplib
from email.message import EmailMessage
from typing import Protocol

from ..config import settings
from ..logging_config import get_logger

logger = get_logger(__name__)


class Notifier(Protocol):
    def send(self, recipient: str, subject: str, body: str) -> bool:
        """Deliver a message; True if the transport accepted it."""
        ...


class SmtpNotifier:
    """Sends plain text mail through an SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        sender: str = "noreply@localhost",
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.sender = sender
        self.timeout = timeout

    def send(self, recipient: str, subject: str, body: str) -> bool:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = recipient
        msg["Subject"] = subject
        msg.set_content(body)

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                "Email delivery failed",
                recipient=recipient,
                smtp_host=self.host,
                error=str(e),
            )
            return False

        logger.info("Email delivered", recipient=recipient, subject=subject)
        return True


class LogNotifier:
    """Development transport: writes the message to the log instead of sending it."""

    def send(self, recipient: str, subject: str, body: str) -> bool:
        # body holds the restore link
        logger.info(
            "Email (not sent, no SMTP host)",
            recipient=recipient,
            subject=subject,
            body=body,
        )
        return True


def get_notifier() -> Notifier:
    if not settings.smtp_host:
        return LogNotifier()
    return SmtpNotifier(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_username,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
        sender=settings.email_from,
        timeout=settings.smtp_timeout,
    )
