# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Identity provider integration."""

from academy.infrastructure.identity.client import (
    IdentityClient,
    IdentityProviderError,
    IdentityProviderNotConfiguredError,
)
from academy.infrastructure.identity.tokens import (
    IdentityClaims,
    IdentityTokenVerifier,
    InvalidTokenError,
    TokenError,
    TokenExpiredError,
)

__all__ = [
    "IdentityClient",
    "IdentityProviderError",
    "IdentityProviderNotConfiguredError",
    "IdentityClaims",
    "IdentityTokenVerifier",
    "TokenError",
    "TokenExpiredError",
    "InvalidTokenError",
]
