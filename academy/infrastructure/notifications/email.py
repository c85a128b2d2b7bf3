# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Outgoing email using async SMTP.

Configuration comes from SMTPSettings (SMTP_HOST, SMTP_PORT, SMTP_USER,
SMTP_PASS, SMTP_FROM). Callers check ``is_configured`` to decide whether
a missing configuration is an error (contact form) or a skip
(volunteer notifications).
"""

import logging
from email.message import EmailMessage
from email.utils import formataddr

import aiosmtplib

from academy.core.config.settings import SMTPSettings

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """Raised when the SMTP server rejects or cannot accept a message."""

    pass


class EmailNotConfiguredError(EmailDeliveryError):
    """Raised when SMTP settings are incomplete."""

    pass


class EmailSender:
    """Sends plain text or HTML mail through the configured SMTP server."""

    def __init__(self, settings: SMTPSettings) -> None:
        self._settings = settings

    @property
    def is_configured(self) -> bool:
        return self._settings.is_configured

    @property
    def settings(self) -> SMTPSettings:
        return self._settings

    def build_message(
        self,
        to: str,
        subject: str,
        text: str,
        html: str | None = None,
        reply_to: str | None = None,
        from_name: str | None = None,
    ) -> EmailMessage:
        message = EmailMessage()
        message["From"] = formataddr(
            (from_name or self._settings.from_name, self._settings.from_email or "")
        )
        message["To"] = to
        message["Subject"] = subject
        if reply_to:
            message["Reply-To"] = reply_to
        message.set_content(text)
        if html:
            message.add_alternative(html, subtype="html")
        return message

    async def send(self, message: EmailMessage) -> None:
        """Deliver a message.

        Args:
            message: Fully built message.

        Raises:
            EmailNotConfiguredError: If SMTP settings are incomplete.
            EmailDeliveryError: If delivery fails.
        """
        if not self.is_configured:
            raise EmailNotConfiguredError("SMTP is not configured")

        try:
            await aiosmtplib.send(
                message,
                hostname=self._settings.host,
                port=self._settings.port,
                username=self._settings.username,
                password=self._settings.password.get_secret_value(),
                use_tls=self._settings.use_implicit_tls,
                start_tls=not self._settings.use_implicit_tls,
                timeout=self._settings.timeout,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", message["To"], e)
            raise EmailDeliveryError(f"SMTP error: {e}") from e

        logger.info("Email sent to %s: %s", message["To"], message["Subject"])
