# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get database sessions
- Resolve the requesting user and check their role
- Get external service clients (identity, email, payments, translations)

Example:
    @router.get("/students-with-classes")
    async def list_students(db: DB, principal: PrivilegedUser):
        ...
"""

import logging
from typing import Annotated, AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from academy.api.middleware.auth import get_identity
from academy.core.config import Settings, get_settings
from academy.domains.access import (
    AccessGate,
    ForbiddenError,
    InvalidTargetError,
    Principal,
    TargetNotFoundError,
)
from academy.infrastructure.database.connection import db_connector
from academy.infrastructure.identity import IdentityClient
from academy.infrastructure.notifications import EmailSender
from academy.infrastructure.payments import StripeCheckout
from academy.infrastructure.translations import TranslationServiceClient

logger = logging.getLogger(__name__)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session.

    Yields:
        AsyncSession that commits on success and rolls back on error.
    """
    async with db_connector.session() as session:
        yield session


# =========================================================================
# External Clients
# =========================================================================


def get_identity_client() -> IdentityClient:
    """Get the identity provider client."""
    return IdentityClient(get_settings().identity)


def get_email_sender() -> EmailSender:
    """Get the SMTP email sender."""
    return EmailSender(get_settings().smtp)


def get_stripe_checkout() -> StripeCheckout:
    """Get the Stripe checkout client."""
    return StripeCheckout(get_settings().donations.stripe_secret_key)


def get_translation_client() -> TranslationServiceClient:
    """Get the remote translation service client."""
    return TranslationServiceClient(get_settings().translations)


# =========================================================================
# Authentication Dependencies
# =========================================================================


async def require_auth(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Principal:
    """Require a verified identity linked to a local user.

    Args:
        request: HTTP request.
        db: Database session.

    Returns:
        The requesting principal.

    Raises:
        HTTPException: 503 if auth is not configured, 401 if there is no
            valid session or no local user for it.
    """
    if not get_settings().identity.is_configured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Auth disabled: missing IDENTITY_SECRET_KEY",
        )

    claims = get_identity(request)
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )

    principal = await AccessGate(db).resolve_role(claims.subject)
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal


def require_privileged(principal: Annotated[Principal, Depends(require_auth)]) -> Principal:
    """Require an admin or instructor.

    Raises:
        HTTPException: 403 for any other role.
    """
    try:
        AccessGate.require_privileged(principal.role)
    except ForbiddenError as e:
        logger.info("Denied %s (%s): privileged role required", principal.user_id, principal.role)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    return principal


async def require_self_or_privileged(
    user_id: str,
    principal: Annotated[Principal, Depends(require_auth)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Principal:
    """Require an admin or instructor, or the user named by the ``user_id`` path parameter.

    Raises:
        HTTPException: 400 for a malformed id, 404 for an unknown user,
            403 for someone else's record.
    """
    try:
        await AccessGate(db).require_self_or_privileged(principal.role, user_id, principal.user_id)
    except InvalidTargetError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except TargetNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    return principal


# =========================================================================
# Type Aliases for Cleaner Endpoint Signatures
# =========================================================================

DB = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]
AuthenticatedUser = Annotated[Principal, Depends(require_auth)]
PrivilegedUser = Annotated[Principal, Depends(require_privileged)]
SelfOrPrivilegedUser = Annotated[Principal, Depends(require_self_or_privileged)]
Identity = Annotated[IdentityClient, Depends(get_identity_client)]
Email = Annotated[EmailSender, Depends(get_email_sender)]
Checkout = Annotated[StripeCheckout, Depends(get_stripe_checkout)]
Translations = Annotated[TranslationServiceClient, Depends(get_translation_client)]
