# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Level domain: level catalog with translation sync."""

from academy.domains.level.service import (
    DuplicateLevelError,
    InvalidLevelIdError,
    LevelNotFoundError,
    LevelService,
    LevelServiceError,
    TranslationSyncError,
    TranslationSyncUnavailableError,
    level_translation_strings,
)

__all__ = [
    "LevelService",
    "LevelServiceError",
    "InvalidLevelIdError",
    "LevelNotFoundError",
    "DuplicateLevelError",
    "TranslationSyncError",
    "TranslationSyncUnavailableError",
    "level_translation_strings",
]
