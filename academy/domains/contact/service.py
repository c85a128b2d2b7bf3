# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Contact form delivery to the admin inbox."""

from __future__ import annotations

import logging
from html import escape

from academy.infrastructure.notifications import EmailSender
from academy.models.contact import ContactRequest

logger = logging.getLogger(__name__)


class ContactError(Exception):
    """Base exception for contact form errors."""

    pass


class ContactUnavailableError(ContactError):
    """Raised when there is no configured inbox or SMTP server."""

    pass


class ContactService:
    """Forwards contact form submissions by email.

    Attributes:
        email: Email sender.
    """

    def __init__(self, email: EmailSender) -> None:
        self.email = email

    async def submit(self, request: ContactRequest) -> None:
        """Send a contact form message to the admin inbox.

        The sender's address is set as Reply-To so staff can answer directly.

        Raises:
            ContactUnavailableError: If email is not configured.
            EmailDeliveryError: If the SMTP server fails.
        """
        inbox = self.email.settings.admin_email or self.email.settings.from_email
        if not self.email.is_configured or not inbox:
            raise ContactUnavailableError("Email is not configured")

        text = (
            f"From: {request.name} ({request.email})\n"
            f"Subject: {request.subject}\n\n"
            f"{request.message}\n"
        )
        html = (
            f"<p><strong>From:</strong> {escape(request.name)} ({escape(str(request.email))})</p>"
            f"<p><strong>Subject:</strong> {escape(request.subject)}</p>"
            "<p><strong>Message:</strong></p>"
            f"<p>{escape(request.message)}</p>"
        )
        message = self.email.build_message(
            to=inbox,
            subject=f"Contact Form: {request.subject}",
            text=text,
            html=html,
            reply_to=str(request.email),
            from_name=request.name,
        )
        await self.email.send(message)
        logger.info("Forwarded contact form message from %s", request.email)
