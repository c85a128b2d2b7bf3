# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Contact domain: contact form email."""

from academy.domains.contact.service import ContactError, ContactService, ContactUnavailableError

__all__ = [
    "ContactService",
    "ContactError",
    "ContactUnavailableError",
]
