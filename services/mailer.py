"""Outbound email backends used for verification messages."""

from __future__ import annotations

import logging
import smtplib
from abc import ABC, abstractmethod
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Mapping

from .errors import MailDeliveryError

logger = logging.getLogger(__name__)


class EmailSender(ABC):
    """Collaborator that delivers a single HTML message."""

    @abstractmethod
    def send(self, to: str, subject: str, html_body: str) -> None:
        """Deliver the message or raise ``MailDeliveryError``."""


class SmtpEmailSender(EmailSender):
    """Send mail through an SMTP relay, optionally upgrading with STARTTLS."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        *,
        username: str | None = None,
        password: str | None = None,
        sender: str | None = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender or username or "no-reply@localhost"
        self.use_tls = use_tls
        self.timeout = timeout

        if username and not password:
            logger.warning("SMTP username configured without a password; login will fail.")

    def _build_message(self, to: str, subject: str, html_body: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = self.sender
        msg["To"] = to
        msg["Subject"] = subject
        msg.attach(MIMEText(html_body, "html"))
        return msg

    def send(self, to: str, subject: str, html_body: str) -> None:
        msg = self._build_message(to, subject, html_body)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.username:
                    server.login(self.username, self.password or "")
                server.send_message(msg, to_addrs=[to])
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send email to %s: %s", to, exc)
            raise MailDeliveryError() from exc

        logger.info("Email sent to %s", to)


class ConsoleEmailSender(EmailSender):
    """Log messages instead of delivering them. Intended for local development."""

    def send(self, to: str, subject: str, html_body: str) -> None:
        logger.info("Email to %s | %s\n%s", to, subject, html_body)


def build_email_sender(config: Mapping) -> EmailSender:
    """Create the email backend named by ``MAIL_BACKEND``."""

    backend = (config.get("MAIL_BACKEND") or "smtp").strip().lower()
    if backend == "console":
        return ConsoleEmailSender()
    if backend != "smtp":
        raise ValueError(f"Unknown MAIL_BACKEND: {backend}")

    return SmtpEmailSender(
        config.get("MAIL_SERVER", "localhost"),
        int(config.get("MAIL_PORT", 587)),
        username=config.get("MAIL_USERNAME"),
        password=config.get("MAIL_PASSWORD"),
        sender=config.get("MAIL_DEFAULT_SENDER"),
        use_tls=bool(config.get("MAIL_USE_TLS", True)),
        timeout=float(config.get("MAIL_TIMEOUT", 10)),
    )
