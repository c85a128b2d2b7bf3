# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Hosted donation checkout through Stripe Checkout Sessions."""

import asyncio
import logging
from decimal import Decimal

import stripe
from pydantic import SecretStr

from academy.core.config.settings import is_unset

logger = logging.getLogger(__name__)


class PaymentProviderError(Exception):
    """Raised when the payment provider rejects or fails a request."""

    pass


class PaymentProviderNotConfiguredError(PaymentProviderError):
    """Raised when no Stripe secret key is configured."""

    pass


class StripeCheckout:
    """Creates one-off donation checkout sessions."""

    def __init__(self, secret_key: SecretStr | None) -> None:
        self._secret_key = secret_key

    @property
    def is_configured(self) -> bool:
        return not is_unset(self._secret_key)

    async def create_donation_session(
        self,
        amount_usd: Decimal,
        base_url: str,
        product_name: str,
    ) -> str | None:
        """Create a checkout session for a single donation.

        Args:
            amount_usd: Donation in dollars, already rounded to cents.
            base_url: Public site URL for the return pages.
            product_name: Line item name shown at checkout.

        Returns:
            Hosted checkout URL, or None if Stripe returned none.

        Raises:
            PaymentProviderNotConfiguredError: If Stripe is not configured.
            PaymentProviderError: If Stripe rejects the request.
        """
        if not self.is_configured:
            raise PaymentProviderNotConfiguredError("Stripe is not configured")

        cents = int(amount_usd * 100)
        try:
            session = await asyncio.to_thread(
                stripe.checkout.Session.create,
                api_key=self._secret_key.get_secret_value(),
                mode="payment",
                submit_type="donate",
                line_items=[
                    {
                        "quantity": 1,
                        "price_data": {
                            "currency": "usd",
                            "unit_amount": cents,
                            "product_data": {"name": product_name},
                        },
                    }
                ],
                invoice_creation={"enabled": True},
                success_url=f"{base_url}/donate/thank-you?m=stripe&session_id={{CHECKOUT_SESSION_ID}}",
                cancel_url=f"{base_url}/donate?canceled=1&m=stripe",
                metadata={
                    "purpose": "donation",
                    "amount_usd": f"{amount_usd:.2f}",
                },
            )
        except stripe.StripeError as e:
            logger.error("Stripe checkout session failed: %s", e)
            raise PaymentProviderError(f"Stripe error: {e.user_message or e}") from e

        logger.info("Created donation checkout session for $%s", f"{amount_usd:.2f}")
        return getattr(session, "url", None)
