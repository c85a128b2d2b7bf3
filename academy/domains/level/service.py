# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Level service for the level catalog.

This module provides the LevelService class for:
- Listing levels in ascending order
- Creating, updating and deleting levels
- Keeping each level's translatable strings in sync

Every level owns a set of translation keys in the ``levels`` namespace:

    level_name_<id>                  -> name
    level_desc_<id>                  -> description
    level_skill_<skill_snake>_<id>   -> skill   (one per skill)

On create the base strings are pushed to the translation service. On
update the stored translations for the old keys are dropped and the new
base strings are pushed. On delete the stored translations are dropped.
"""

from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.infrastructure.database.models import DEFAULT_CLASS_IMAGE, Level, Translation
from academy.infrastructure.translations import (
    TranslationServiceClient,
    TranslationServiceError,
    TranslationServiceNotConfiguredError,
)
from academy.models.level import LevelCreateRequest, LevelResponse, LevelUpdateRequest
from academy.utils.identifiers import is_valid_id

logger = logging.getLogger(__name__)


class LevelServiceError(Exception):
    """Base exception for level service errors."""

    pass


class InvalidLevelIdError(LevelServiceError):
    """Raised when a level id is malformed."""

    pass


class LevelNotFoundError(LevelServiceError):
    """Raised when a level is not found."""

    pass


class DuplicateLevelError(LevelServiceError):
    """Raised when another level already has the number.

    Attributes:
        existing: The level holding the number.
    """

    def __init__(self, message: str, existing: LevelResponse) -> None:
        super().__init__(message)
        self.existing = existing


class TranslationSyncUnavailableError(LevelServiceError):
    """Raised when the translation service is not configured."""

    pass


class TranslationSyncError(LevelServiceError):
    """Raised when pushing base strings failed after the level was saved."""

    pass


def skill_key(skill: str) -> str:
    return "level_skill_" + skill.lower().replace(" ", "_")


def level_translation_strings(level: Level) -> dict[str, str]:
    """Translation keys owned by a level, mapped to their base strings."""
    strings = {
        f"level_name_{level.id}": level.name,
        f"level_desc_{level.id}": level.description,
    }
    for skill in level.skills:
        strings[f"{skill_key(skill)}_{level.id}"] = skill
    return strings


class LevelService:
    """Service for the level catalog.

    Attributes:
        db: Async database session.
        translations: Translation service client.
        namespace: Namespace the level strings live in.
    """

    def __init__(
        self,
        db: AsyncSession,
        translations: TranslationServiceClient,
        namespace: str = "levels",
    ) -> None:
        self.db = db
        self.translations = translations
        self.namespace = namespace

    async def list_levels(self, level: int | None = None) -> list[LevelResponse]:
        """List levels sorted by number, optionally just one number."""
        stmt = select(Level).order_by(Level.level)
        if level is not None:
            stmt = stmt.where(Level.level == level)
        result = await self.db.execute(stmt)
        return [LevelResponse.model_validate(row) for row in result.scalars().all()]

    async def create_level(self, request: LevelCreateRequest) -> LevelResponse:
        """Create a level and push its base strings.

        Args:
            request: Level data.

        Returns:
            The created level.

        Raises:
            DuplicateLevelError: If the number is taken.
            TranslationSyncUnavailableError: If translations cannot be synced.
            TranslationSyncError: If the base strings could not be pushed.
        """
        existing = await self._find_by_number(request.level)
        if existing is not None:
            raise DuplicateLevelError(
                "Level with this number already exists",
                LevelResponse.model_validate(existing),
            )
        self._require_sync()

        level = Level(
            level=request.level,
            name=request.name,
            description=request.description,
            image=request.image or DEFAULT_CLASS_IMAGE,
            skills=list(request.skills),
        )
        self.db.add(level)
        await self.db.commit()
        logger.info("Created level %s (%d)", level.id, level.level)

        await self._push_strings(level)
        return LevelResponse.model_validate(level)

    async def update_level(self, level_id: str, request: LevelUpdateRequest) -> LevelResponse:
        """Update a level and resync its strings.

        Raises:
            InvalidLevelIdError: If the id is malformed.
            DuplicateLevelError: If the new number belongs to another level.
            LevelNotFoundError: If the level is not found.
            TranslationSyncUnavailableError: If translations cannot be synced.
            TranslationSyncError: If the base strings could not be pushed.
        """
        if not is_valid_id(level_id):
            raise InvalidLevelIdError("Invalid ID")

        if request.level is not None:
            existing = await self._find_by_number(request.level)
            if existing is not None and existing.id != level_id:
                raise DuplicateLevelError(
                    "Level with this number already exists",
                    LevelResponse.model_validate(existing),
                )

        level = await self.db.get(Level, level_id)
        if level is None:
            raise LevelNotFoundError("Level not found")
        self._require_sync()

        old_keys = list(level_translation_strings(level))
        for field, value in request.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(level, field, value)

        await self._drop_stored_translations(old_keys)
        await self.db.commit()
        logger.info("Updated level %s", level.id)

        await self._push_strings(level)
        return LevelResponse.model_validate(level)

    async def delete_level(self, level_id: str) -> None:
        """Delete a level and its stored translations.

        Raises:
            InvalidLevelIdError: If the id is malformed.
            LevelNotFoundError: If the level is not found.
        """
        if not is_valid_id(level_id):
            raise InvalidLevelIdError("Invalid ID")
        level = await self.db.get(Level, level_id)
        if level is None:
            raise LevelNotFoundError("Level not found")

        await self._drop_stored_translations(list(level_translation_strings(level)))
        await self.db.delete(level)
        await self.db.commit()
        logger.info("Deleted level %s", level_id)

    async def _find_by_number(self, number: int) -> Level | None:
        result = await self.db.execute(select(Level).where(Level.level == number))
        return result.scalar_one_or_none()

    def _require_sync(self) -> None:
        if not self.translations.is_configured:
            raise TranslationSyncUnavailableError("Translation service is not configured")

    async def _drop_stored_translations(self, keys: list[str]) -> None:
        await self.db.execute(delete(Translation).where(Translation.key.in_(keys)))

    async def _push_strings(self, level: Level) -> None:
        try:
            for key, value in level_translation_strings(level).items():
                await self.translations.create_base_string(key, value, self.namespace)
        except TranslationServiceNotConfiguredError as e:
            raise TranslationSyncUnavailableError(str(e)) from e
        except TranslationServiceError as e:
            logger.error("Level %s saved but its base strings were not pushed: %s", level.id, e)
            raise TranslationSyncError("Failed to create level translations") from e
