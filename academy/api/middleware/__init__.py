# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""HTTP middleware: session tokens and rate limiting."""

from academy.api.middleware.auth import AuthMiddleware, get_identity
from academy.api.middleware.rate_limit import BURST_LIMIT, limiter, rate_limit_exceeded_handler

__all__ = [
    "AuthMiddleware",
    "get_identity",
    "limiter",
    "BURST_LIMIT",
    "rate_limit_exceeded_handler",
]
