# storefront_http_api/mail.py

from __future__ import annotations

import smtplib
from email.message import EmailMessage
from typing import Optional

from storefront_http_api.config import settings
from storefront_http_api.logging import get_logger

logger = get_logger(__name__)


class SMTPMailer:
    """
    Minimal SMTP transport.

    When no SMTP host is configured the message is only logged, which keeps
    local development and CI free of a mail server.
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: Optional[bool] = None,
        default_sender: Optional[str] = None,
    ) -> None:
        self.host = host if host is not None else settings.SMTP_HOST
        self.port = port if port is not None else settings.SMTP_PORT
        self.user = user if user is not None else settings.SMTP_USER
        self.password = password if password is not None else settings.SMTP_PASSWORD
        self.use_tls = use_tls if use_tls is not None else settings.SMTP_USE_TLS
        self.default_sender = default_sender or settings.MAIL_FROM

    def send(
        self,
        *,
        to: str,
        subject: str,
        body: str,
        sender: Optional[str] = None,
        reply_to: Optional[str] = None,
    ) -> None:
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = sender or self.default_sender
        message["To"] = to
        if reply_to:
            message["Reply-To"] = reply_to
        message.set_content(body)

        if not self.host:
            logger.info("mail_logged", to=to, subject=subject)
            return

        with smtplib.SMTP(self.host, self.port, timeout=10) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.user and self.password:
                smtp.login(self.user, self.password)
            smtp.send_message(message)

        logger.info("mail_sent", to=to, subject=subject)


def get_mailer() -> SMTPMailer:
    """FastAPI dependency; tests override it with a recording fake."""
    return SMTPMailer()


__all__ = ["SMTPMailer", "get_mailer"]
