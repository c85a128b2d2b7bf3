# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Contact form API endpoint.

- POST /contact - Email an inquiry to the admin inbox
"""

import logging

from fastapi import APIRouter, HTTPException, Request, status

from academy.api.dependencies import Email
from academy.api.middleware.rate_limit import BURST_LIMIT, limiter
from academy.domains.contact import ContactService, ContactUnavailableError
from academy.infrastructure.notifications import EmailDeliveryError
from academy.models.common import MessageResponse
from academy.models.contact import ContactRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/contact",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit contact form",
)
@limiter.limit(BURST_LIMIT)
async def submit_contact(
    request: Request,
    data: ContactRequest,
    email: Email,
) -> MessageResponse:
    """Send a contact inquiry."""
    try:
        await ContactService(email).submit(data)
    except ContactUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except EmailDeliveryError as e:
        logger.error("Contact form email failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Error submitting inquiry",
        )
    return MessageResponse(message="Inquiry and email submitted successfully")
