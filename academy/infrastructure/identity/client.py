# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""HTTP client for the identity provider's backend API.

Covers the calls the academy makes outside of token verification:
looking up and deleting provider users, and managing their email addresses.
"""

import logging
from typing import Any

import httpx

from academy.core.config.settings import IdentitySettings, is_unset

logger = logging.getLogger(__name__)


class IdentityProviderError(Exception):
    """Raised when the identity provider rejects or fails a request.

    Attributes:
        status_code: HTTP status returned by the provider, if any.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class IdentityProviderNotConfiguredError(IdentityProviderError):
    """Raised when no backend API secret is configured."""

    pass


class IdentityClient:
    """Async client for identity provider user management.

    Attributes:
        base_url: Backend API base URL.
    """

    def __init__(self, settings: IdentitySettings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._settings = settings
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._settings.api_url.rstrip("/")

    def _headers(self) -> dict[str, str]:
        if is_unset(self._settings.secret_key):
            raise IdentityProviderNotConfiguredError("Identity provider secret key is not configured")
        return {
            "Authorization": f"Bearer {self._settings.secret_key.get_secret_value()}",
            "Content-Type": "application/json",
        }

    async def _request(self, method: str, path: str, json: dict | None = None) -> Any:
        headers = self._headers()
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self._settings.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, json=json, headers=headers)
        except httpx.HTTPError as e:
            logger.error("Identity provider request failed: %s %s: %s", method, path, e)
            raise IdentityProviderError(f"Identity provider unreachable: {e}") from e

        if response.status_code >= 400:
            logger.error(
                "Identity provider returned %s for %s %s: %s",
                response.status_code,
                method,
                path,
                response.text,
            )
            raise IdentityProviderError(
                f"Identity provider returned {response.status_code}",
                status_code=response.status_code,
            )
        if not response.content:
            return None
        return response.json()

    async def get_user(self, identity_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/users/{identity_id}")

    async def delete_user(self, identity_id: str) -> None:
        await self._request("DELETE", f"/users/{identity_id}")
        logger.info("Deleted identity provider user %s", identity_id)

    async def create_email_address(
        self,
        identity_id: str,
        email: str,
        verified: bool = True,
        primary: bool = True,
    ) -> dict[str, Any]:
        return await self._request(
            "POST",
            "/email_addresses",
            json={
                "user_id": identity_id,
                "email_address": email,
                "verified": verified,
                "primary": primary,
            },
        )

    async def delete_email_address(self, email_address_id: str) -> None:
        await self._request("DELETE", f"/email_addresses/{email_address_id}")

    async def replace_primary_email(self, identity_id: str, old_email: str, new_email: str) -> None:
        """Make new_email the primary address and remove old_email.

        Args:
            identity_id: Identity provider user id.
            old_email: Address to remove, if the provider still has it.
            new_email: Address to add as verified and primary.

        Raises:
            IdentityProviderError: If any provider call fails.
        """
        await self.create_email_address(identity_id, new_email)

        user = await self.get_user(identity_id)
        for address in user.get("email_addresses", []):
            if address.get("email_address") == old_email and address.get("id"):
                await self.delete_email_address(address["id"])
                break

        logger.info("Replaced primary email for identity %s", identity_id)
