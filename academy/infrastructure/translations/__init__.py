# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Remote translation-string service integration."""

from academy.infrastructure.translations.client import (
    TranslationServiceClient,
    TranslationServiceError,
    TranslationServiceNotConfiguredError,
)

__all__ = [
    "TranslationServiceClient",
    "TranslationServiceError",
    "TranslationServiceNotConfiguredError",
]
