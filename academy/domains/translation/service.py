# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Translation service for stored UI strings.

This module provides the TranslationService class for:
- Reading one namespace of one language as a flat key/value map
- Upserting and creating single strings
- Importing every string from the remote translation service
"""

from __future__ import annotations

import logging

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.infrastructure.database.models import Translation
from academy.infrastructure.translations import (
    TranslationServiceClient,
    TranslationServiceNotConfiguredError,
)
from academy.models.translation import TranslationCreateRequest, TranslationResponse

logger = logging.getLogger(__name__)


class TranslationError(Exception):
    """Base exception for translation errors."""

    pass


class TranslationExistsError(TranslationError):
    """Raised when creating a (lng, ns, key) that already exists."""

    pass


class TranslationImportUnavailableError(TranslationError):
    """Raised when the remote translation service is not configured."""

    pass


class TranslationService:
    """Service for stored translation strings.

    Attributes:
        db: Async database session.
        remote: Remote translation service client, used by transfer().
    """

    def __init__(self, db: AsyncSession, remote: TranslationServiceClient | None = None) -> None:
        self.db = db
        self.remote = remote

    async def get_namespace(self, lng: str, ns: str) -> dict[str, str]:
        """All strings of one namespace in one language."""
        result = await self.db.execute(
            select(Translation.key, Translation.value)
            .where(Translation.lng == lng, Translation.ns == ns)
            .order_by(Translation.key)
        )
        return {key: value for key, value in result.all()}

    async def upsert(self, lng: str, ns: str, key: str, value: str) -> TranslationResponse:
        """Set a string, creating it if needed."""
        translation = await self._stage(lng, ns, key, value)
        await self.db.commit()
        return TranslationResponse.model_validate(translation)

    async def create(self, request: TranslationCreateRequest) -> TranslationResponse:
        """Create a string.

        Raises:
            TranslationExistsError: If the key already exists in that namespace and language.
        """
        taken = await self.db.scalar(
            select(
                exists().where(
                    Translation.lng == request.lng,
                    Translation.ns == request.ns,
                    Translation.key == request.key,
                )
            )
        )
        if taken:
            raise TranslationExistsError("Translation already exists")

        translation = Translation(lng=request.lng, ns=request.ns, key=request.key, value=request.value)
        self.db.add(translation)
        await self.db.commit()
        return TranslationResponse.model_validate(translation)

    async def transfer(self) -> int:
        """Import every remote string, then remove the imported base strings remotely.

        Strings are stored (and committed) before anything is deleted
        remotely, so a failed remote delete leaves both copies rather than
        neither. Re-running the transfer is safe.

        Returns:
            Number of strings imported.

        Raises:
            TranslationImportUnavailableError: If the remote service is not configured.
            TranslationServiceError: If the export or a remote delete fails.
        """
        if self.remote is None or not self.remote.is_configured:
            raise TranslationImportUnavailableError("Translation service is not configured")

        try:
            exported = await self.remote.export_translations()
        except TranslationServiceNotConfiguredError as e:
            raise TranslationImportUnavailableError(str(e)) from e

        base_strings: dict[tuple[str, str], None] = {}
        count = 0
        for lng, namespaces in exported.items():
            for ns, strings in namespaces.items():
                for key, value in strings.items():
                    await self._stage(lng, ns, key, str(value))
                    base_strings[(key, ns)] = None
                    count += 1
        await self.db.commit()
        logger.info("Imported %d translation strings", count)

        for key, ns in base_strings:
            await self.remote.delete_base_string(key, ns)
        logger.info("Removed %d remote base strings", len(base_strings))
        return count

    async def _stage(self, lng: str, ns: str, key: str, value: str) -> Translation:
        result = await self.db.execute(
            select(Translation).where(
                Translation.lng == lng,
                Translation.ns == ns,
                Translation.key == key,
            )
        )
        translation = result.scalar_one_or_none()
        if translation is None:
            translation = Translation(lng=lng, ns=ns, key=key, value=value)
            self.db.add(translation)
            # Flush so a later lookup for the same triple finds this row.
            await self.db.flush()
        else:
            translation.value = value
        return translation
