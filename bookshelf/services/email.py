"""Outgoing mail over SMTP."""

import logging
import smtplib
import socket
import ssl
from email.message import EmailMessage
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from bookshelf.config import get_settings
from bookshelf.errors import EmailDeliveryError

logger = logging.getLogger("bookshelf")

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


class EmailService:
    """Sends transactional email through the configured SMTP relay."""

    def __init__(self) -> None:
        self.settings = get_settings()
        self.templates = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=select_autoescape(["html"]),
        )

    def send_email(self, to: str, subject: str, text: str, html: str | None = None) -> None:
        """Deliver one message. Raises EmailDeliveryError on any transport failure."""
        settings = self.settings
        message = EmailMessage()
        message["From"] = settings.SMTP_FROM_EMAIL
        message["To"] = to
        message["Subject"] = subject
        message.set_content(text)
        if html:
            message.add_alternative(html, subtype="html")

        try:
            with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=settings.SMTP_TIMEOUT) as server:
                server.ehlo()
                if settings.SMTP_USER:
                    server.starttls(context=ssl.create_default_context())
                    server.ehlo()
                    server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
                server.send_message(message)
        except (smtplib.SMTPException, socket.timeout, OSError) as e:
            logger.error("Failed to send email to %s: %s", to, e)
            raise EmailDeliveryError("Email could not be sent") from e

        logger.info("Email successfully sent to %s", to)

    def send_password_reset_email(self, to: str, reset_token: str) -> None:
        """Email a password reset link containing the plaintext token."""
        reset_url = f"{self.settings.CLIENT_URL.rstrip('/')}/reset-password/{reset_token}"

        if not self.settings.SMTP_HOST:
            # No relay configured (development): surface the link in the server log.
            logger.warning("PASSWORD RESET (SMTP not configured): %s", reset_url)
            return

        html = self.templates.get_template("password_reset.html").render(
            reset_url=reset_url,
            support_url=self.settings.SUPPORT_URL,
        )
        try:
            self.send_email(
                to=to,
                subject="Password Reset Request",
                text=f"You requested a password reset. Click here to reset your password: {reset_url}",
                html=html,
            )
        except EmailDeliveryError as e:
            raise EmailDeliveryError("Password reset email could not be sent") from e
        logger.info("Password reset email sent to %s", to)


_email_service: EmailService | None = None


def get_email_service() -> EmailService:
    """Get singleton email service instance."""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service
