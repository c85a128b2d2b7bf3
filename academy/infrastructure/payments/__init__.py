# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Payment provider integration."""

from academy.infrastructure.payments.stripe_checkout import (
    PaymentProviderError,
    PaymentProviderNotConfiguredError,
    StripeCheckout,
)

__all__ = [
    "StripeCheckout",
    "PaymentProviderError",
    "PaymentProviderNotConfiguredError",
]
