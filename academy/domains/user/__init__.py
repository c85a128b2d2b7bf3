# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User domain: accounts and profiles."""

from academy.domains.user.service import (
    EmailAlreadyExistsError,
    IdentityAlreadyLinkedError,
    InvalidUserIdError,
    UserNotFoundError,
    UserService,
    UserServiceError,
)

__all__ = [
    "UserService",
    "UserServiceError",
    "InvalidUserIdError",
    "UserNotFoundError",
    "EmailAlreadyExistsError",
    "IdentityAlreadyLinkedError",
]
