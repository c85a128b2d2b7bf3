# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Translation domain: stored UI strings."""

from academy.domains.translation.service import (
    TranslationError,
    TranslationExistsError,
    TranslationImportUnavailableError,
    TranslationService,
)

__all__ = [
    "TranslationService",
    "TranslationError",
    "TranslationExistsError",
    "TranslationImportUnavailableError",
]
