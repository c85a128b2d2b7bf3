# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""HTTP client for the remote translation-string service (i18nexus).

Base strings are the source-language entries that translators work from.
Reads need only the project API key; writes also need a personal access token.
"""

import logging
from typing import Any

import httpx

from academy.core.config.settings import TranslationServiceSettings

logger = logging.getLogger(__name__)


class TranslationServiceError(Exception):
    """Raised when the translation service rejects or fails a request.

    Attributes:
        status_code: HTTP status returned by the service, if any.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TranslationServiceNotConfiguredError(TranslationServiceError):
    """Raised when the API key or access token is missing."""

    pass


class TranslationServiceClient:
    """Async client for base string management and full exports."""

    def __init__(
        self,
        settings: TranslationServiceSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return self._settings.is_configured

    def _require_configured(self) -> None:
        if not self.is_configured:
            raise TranslationServiceNotConfiguredError("Translation service is not configured")

    def _params(self) -> dict[str, str]:
        return {"api_key": self._settings.api_key.get_secret_value()}

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._settings.personal_access_token.get_secret_value()}",
        }

    async def _request(self, method: str, path: str, json: dict | None = None, write: bool = True) -> Any:
        self._require_configured()
        try:
            async with httpx.AsyncClient(
                base_url=self._settings.api_url.rstrip("/"),
                timeout=self._settings.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method,
                    path,
                    params=self._params(),
                    json=json,
                    headers=self._headers() if write else None,
                )
        except httpx.HTTPError as e:
            logger.error("Translation service request failed: %s %s: %s", method, path, e)
            raise TranslationServiceError(f"Translation service unreachable: {e}") from e

        if response.status_code >= 400:
            logger.error(
                "Translation service returned %s for %s %s: %s",
                response.status_code,
                method,
                path,
                response.text,
            )
            raise TranslationServiceError(
                f"Translation service returned {response.status_code}",
                status_code=response.status_code,
            )
        if not response.content:
            return None
        return response.json()

    async def create_base_string(self, key: str, value: str, namespace: str) -> None:
        await self._request(
            "POST",
            "/base_strings.json",
            json={"key": key, "value": value, "namespace": namespace},
        )

    async def delete_base_string(self, key: str, namespace: str) -> None:
        await self._request(
            "DELETE",
            "/base_strings.json",
            json={"id": {"key": key, "namespace": namespace}},
        )

    async def export_translations(self) -> dict[str, dict[str, dict[str, str]]]:
        """Fetch every translated string.

        Returns:
            Nested mapping of language -> namespace -> key -> value.
        """
        data = await self._request("GET", "/translations.json", write=False)
        return data or {}
