# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package.

Example:
    >>> from academy.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from academy.core.config.settings import (
    CORSSettings,
    DatabaseSettings,
    DonationSettings,
    IdentitySettings,
    RateLimitSettings,
    Settings,
    SMTPSettings,
    TranslationServiceSettings,
    clear_settings_cache,
    get_settings,
    is_unset,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "is_unset",
    # Subsettings
    "DatabaseSettings",
    "IdentitySettings",
    "RateLimitSettings",
    "CORSSettings",
    "SMTPSettings",
    "DonationSettings",
    "TranslationServiceSettings",
]
