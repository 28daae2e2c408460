"""SMTP email sending used by the email delivery channel."""

import re
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any

from django.conf import settings
from django.template.loader import render_to_string

import structlog
from pydantic import EmailStr, TypeAdapter, ValidationError

logger = structlog.get_logger(__name__)

_EMAIL_ADAPTER = TypeAdapter(EmailStr)

_HTML_ENTITIES = {
    "&nbsp;": " ",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&amp;": "&",
}


def html_to_plain(html: str) -> str:
    """Strip tags and common entities to build the text/plain alternative."""
    text = re.sub(r"<[^>]+>", "", html)
    for entity, char in _HTML_ENTITIES.items():
        text = text.replace(entity, char)
    text = re.sub(r"[ \t]+\n", "\n", text)
    return re.sub(r"\n\s*\n", "\n\n", text).strip()


class EmailService:
    """Sends multipart HTML emails through the configured SMTP server.

    Connection settings come from Django's ``EMAIL_*`` settings. A new SMTP
    connection is opened per message; sends are blocking and are run off the
    event loop by the email transport.
    """

    def __init__(self) -> None:
        """Read SMTP configuration from Django settings."""
        self.smtp_host = settings.EMAIL_HOST
        self.smtp_port = settings.EMAIL_PORT
        self.smtp_user = settings.EMAIL_HOST_USER
        self.smtp_password = settings.EMAIL_HOST_PASSWORD
        self.use_tls = settings.EMAIL_USE_TLS
        self.timeout = getattr(settings, "EMAIL_TIMEOUT", None) or 10
        self.from_email = settings.DEFAULT_FROM_EMAIL

    @staticmethod
    def is_valid_email(address: str) -> bool:
        """Return True if ``address`` is a syntactically valid email."""
        try:
            _EMAIL_ADAPTER.validate_python(address)
        except ValidationError:
            return False
        return True

    def send_email(self, to_email: str, subject: str, html_content: str) -> None:
        """Send one HTML email with a plain-text alternative.

        Args:
            to_email: Recipient address.
            subject: Subject line.
            html_content: HTML body.

        Raises:
            ValueError: If the address is invalid.
            smtplib.SMTPException: If the SMTP exchange fails.
            OSError: If the server cannot be reached.
        """
        if not self.is_valid_email(to_email):
            raise ValueError(f"Invalid email address: {to_email}")

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_email
        msg["To"] = to_email
        msg.attach(MIMEText(html_to_plain(html_content), "plain"))
        msg.attach(MIMEText(html_content, "html"))

        try:
            with smtplib.SMTP(
                self.smtp_host, self.smtp_port, timeout=self.timeout
            ) as server:
                if self.use_tls:
                    server.starttls()
                if self.smtp_user and self.smtp_password:
                    server.login(self.smtp_user, self.smtp_password)
                server.send_message(msg)
        except smtplib.SMTPException as e:
            logger.error(
                "email_send_failed",
                to_email=to_email,
                subject=subject,
                error=str(e),
            )
            raise

        logger.info("email_sent", to_email=to_email, subject=subject)

    def send_template_email(
        self,
        to_email: str,
        subject: str,
        template_name: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Render a Django template and send it.

        Raises:
            django.template.TemplateDoesNotExist: If the template is missing.
        """
        html_content = render_to_string(template_name, context or {})
        self.send_email(to_email=to_email, subject=subject, html_content=html_content)
