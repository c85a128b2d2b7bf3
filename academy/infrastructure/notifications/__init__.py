# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Outgoing notifications."""

from academy.infrastructure.notifications.email import (
    EmailDeliveryError,
    EmailNotConfiguredError,
    EmailSender,
)

__all__ = [
    "EmailSender",
    "EmailDeliveryError",
    "EmailNotConfiguredError",
]
