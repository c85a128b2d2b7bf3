# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Donation domain: checkout and redirect URLs."""

from academy.domains.donation.service import (
    CheckoutUnavailableError,
    DonationError,
    DonationService,
    DonationsNotConfiguredError,
    InvalidDonationError,
    parse_amount,
)

__all__ = [
    "DonationService",
    "DonationError",
    "InvalidDonationError",
    "DonationsNotConfiguredError",
    "CheckoutUnavailableError",
    "parse_amount",
]
