# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class domain: catalog, track views and duplicate-schedule detection."""

from academy.domains.class_.service import (
    ClassNotFoundError,
    ClassService,
    ClassServiceError,
    DuplicateClassError,
    InvalidClassFilterError,
    InvalidClassIdError,
    StudentNotFoundError,
    schedules_match,
)

__all__ = [
    "ClassService",
    "ClassServiceError",
    "ClassNotFoundError",
    "DuplicateClassError",
    "InvalidClassFilterError",
    "InvalidClassIdError",
    "StudentNotFoundError",
    "schedules_match",
]
