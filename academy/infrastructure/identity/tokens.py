# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Session token verification.

The identity provider issues signed session tokens whose ``sub`` claim is
the provider-side user id (stored locally as ``User.identity_id``). Tokens
are verified offline with the configured key.
"""

import logging

from jose import ExpiredSignatureError, JWTError as JoseJWTError, jwt
from pydantic import BaseModel

from academy.core.config.settings import IdentitySettings

logger = logging.getLogger(__name__)


class IdentityClaims(BaseModel):
    """Verified session token claims.

    Attributes:
        subject: Identity provider user id.
        session_id: Provider session id, when present.
        exp: Expiration timestamp.
    """

    subject: str
    session_id: str | None = None
    exp: int | None = None


class TokenError(Exception):
    """Base exception for session token errors."""

    pass


class TokenExpiredError(TokenError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(TokenError):
    """Raised when a token is malformed or its signature does not verify."""

    pass


class IdentityTokenVerifier:
    """Verifies session tokens against the configured key.

    Example:
        >>> verifier = IdentityTokenVerifier(settings.identity)
        >>> claims = verifier.verify(token)
        >>> claims.subject
        'user_2abc'
    """

    def __init__(self, settings: IdentitySettings) -> None:
        self._settings = settings

    def verify(self, token: str) -> IdentityClaims:
        """Decode and validate a session token.

        Args:
            token: Bearer token string.

        Returns:
            IdentityClaims with the verified subject.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid or the key is missing.
        """
        if self._settings.jwt_key is None:
            raise InvalidTokenError("No token verification key configured")

        options = {"verify_aud": False, "verify_iss": self._settings.issuer is not None}
        try:
            payload = jwt.decode(
                token,
                self._settings.jwt_key.get_secret_value(),
                algorithms=[self._settings.algorithm],
                issuer=self._settings.issuer,
                options=options,
            )
        except ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except JoseJWTError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise InvalidTokenError("Token has no subject")

        return IdentityClaims(
            subject=subject,
            session_id=payload.get("sid"),
            exp=payload.get("exp"),
        )
