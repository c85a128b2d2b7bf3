# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Volunteer domain: applications and review."""

from academy.domains.volunteer.service import (
    InvalidVolunteerIdError,
    VolunteerError,
    VolunteerNotFoundError,
    VolunteerService,
    VolunteerValidationError,
)

__all__ = [
    "VolunteerService",
    "VolunteerError",
    "VolunteerValidationError",
    "InvalidVolunteerIdError",
    "VolunteerNotFoundError",
]
