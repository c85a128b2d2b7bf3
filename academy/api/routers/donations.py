# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Donation API endpoint.

- POST /donate/create-session - Start a donation and get the URL to redirect to
"""

import logging

from fastapi import APIRouter, HTTPException, Request, status

from academy.api.dependencies import AppSettings, Checkout
from academy.api.middleware.rate_limit import BURST_LIMIT, limiter
from academy.domains.donation import (
    CheckoutUnavailableError,
    DonationService,
    DonationsNotConfiguredError,
    InvalidDonationError,
)
from academy.infrastructure.payments import PaymentProviderError, PaymentProviderNotConfiguredError
from academy.models.donation import DonationSessionRequest, DonationSessionResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/donate/create-session",
    response_model=DonationSessionResponse,
    summary="Create donation session",
    description=(
        "Validate the amount (1 to 10,000 USD) and return a Stripe checkout URL, "
        "or the configured PayPal or crypto donation page."
    ),
)
@limiter.limit(BURST_LIMIT)
async def create_donation_session(
    request: Request,
    data: DonationSessionRequest,
    settings: AppSettings,
    checkout: Checkout,
) -> DonationSessionResponse:
    """Start a donation."""
    service = DonationService(settings.donations, checkout)

    try:
        url = await service.create_session(data.amount, data.provider)
    except InvalidDonationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except (DonationsNotConfiguredError, PaymentProviderNotConfiguredError) as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except CheckoutUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    except PaymentProviderError as e:
        logger.error("Stripe checkout session failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to create checkout session",
        )
    return DonationSessionResponse(url=url)
