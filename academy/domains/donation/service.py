# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Donation service for starting a donation checkout.

Card donations go through a hosted Stripe checkout session; PayPal and
crypto donations redirect to configured hosted pages. A configuration
value that is empty or the literal ``placeholder`` counts as unset.
"""

from __future__ import annotations

import logging
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from academy.core.config.settings import DonationSettings, is_unset
from academy.infrastructure.payments import StripeCheckout

logger = logging.getLogger(__name__)

MIN_DONATION_USD = Decimal("1")
MAX_DONATION_USD = Decimal("10000")

_HTTP_URL_RE = re.compile(r"^https?://", re.IGNORECASE)


class DonationError(Exception):
    """Base exception for donation errors."""

    pass


class InvalidDonationError(DonationError):
    """Raised when the amount or provider is invalid."""

    pass


class DonationsNotConfiguredError(DonationError):
    """Raised when the requested donation route is not configured."""

    pass


class CheckoutUnavailableError(DonationError):
    """Raised when the payment provider returned no checkout URL."""

    pass


def parse_amount(amount: Any) -> Decimal:
    """Validate a donation amount and round it to cents.

    Args:
        amount: Number or numeric string from the request.

    Returns:
        Amount in dollars with two decimal places.

    Raises:
        InvalidDonationError: If the amount is not a finite number in range.
    """
    if amount is None or isinstance(amount, bool):
        raise InvalidDonationError("Invalid amount")
    try:
        value = Decimal(str(amount).strip() or "0")
    except InvalidOperation as e:
        raise InvalidDonationError("Invalid amount") from e
    if not value.is_finite():
        raise InvalidDonationError("Invalid amount")

    if value < MIN_DONATION_USD:
        raise InvalidDonationError("Minimum donation is $1")
    if value > MAX_DONATION_USD:
        raise InvalidDonationError("Maximum donation is $10,000")
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class DonationService:
    """Creates donation checkout URLs.

    Attributes:
        settings: Donation settings.
        checkout: Stripe checkout client.
    """

    def __init__(self, settings: DonationSettings, checkout: StripeCheckout) -> None:
        self.settings = settings
        self.checkout = checkout

    @property
    def base_url(self) -> str | None:
        """Public site URL without trailing slashes, or None if unusable."""
        raw = (self.settings.base_url or "").strip().rstrip("/")
        if is_unset(raw) or not _HTTP_URL_RE.match(raw):
            return None
        return raw

    async def create_session(self, amount: Any, provider: str | None = "stripe") -> str:
        """Start a donation and return the URL to send the donor to.

        Args:
            amount: Donation in dollars.
            provider: ``stripe``, ``paypal`` or ``crypto``.

        Returns:
            Checkout or redirect URL.

        Raises:
            DonationsNotConfiguredError: If the site URL or the provider is not configured.
            InvalidDonationError: If the amount or provider is invalid.
            CheckoutUnavailableError: If Stripe returned no URL.
            PaymentProviderError: If Stripe rejected the request.
        """
        base_url = self.base_url
        if base_url is None:
            raise DonationsNotConfiguredError("Donations are not configured (BASE_URL)")

        provider_key = (provider or "stripe").strip().lower()
        amount_usd = parse_amount(amount)

        if provider_key == "paypal":
            return self._redirect_url(self.settings.paypal_donate_url, "PayPal")
        if provider_key == "crypto":
            return self._redirect_url(self.settings.crypto_donation_url, "Crypto")
        if provider_key != "stripe":
            raise InvalidDonationError("Unknown provider")

        if not self.checkout.is_configured:
            raise DonationsNotConfiguredError("Stripe is not configured")

        url = await self.checkout.create_donation_session(
            amount_usd, base_url, self.settings.product_name
        )
        if not url:
            raise CheckoutUnavailableError("Stripe did not return a checkout URL")
        return url

    @staticmethod
    def _redirect_url(url: str | None, label: str) -> str:
        if is_unset(url):
            raise DonationsNotConfiguredError(f"{label} donations are not configured")
        return url.strip()
