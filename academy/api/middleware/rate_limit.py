# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Rate limiting using slowapi.

Every API route shares the general limit (100 requests per 15 minutes per
client IP by default). Sign-up and the public forms are additionally
decorated with the stricter burst limit.

Example:
    @router.post("/sign-up")
    @limiter.limit(BURST_LIMIT)
    async def sign_up(request: Request, ...):
        ...
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from academy.core.config import get_settings

logger = logging.getLogger(__name__)

_settings = get_settings().rate_limit

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[_settings.default],
    storage_uri=_settings.storage_uri,
    enabled=_settings.enabled,
)

BURST_LIMIT = _settings.burst


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Respond 429 with a plain message."""
    logger.warning(
        "Rate limit exceeded: %s %s from %s (%s)",
        request.method,
        request.url.path,
        get_remote_address(request),
        exc.detail,
    )
    return JSONResponse(
        status_code=429,
        content={"detail": "Too many requests. Please try again later."},
    )
