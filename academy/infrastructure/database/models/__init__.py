# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the entity store.

The User<->Class relationship is stored as two mirrored sets, one owned by
each side: ``user_enrolled_classes`` (a user's enrolled classes) and
``class_roster`` (a class's roster).
"""

from academy.infrastructure.database.models.base import Base
from academy.infrastructure.database.models.class_ import (
    DEFAULT_CLASS_IMAGE,
    DEFAULT_TIMEZONE,
    Class,
    ClassRosterEntry,
)
from academy.infrastructure.database.models.level import Level
from academy.infrastructure.database.models.translation import Translation
from academy.infrastructure.database.models.user import (
    PRIVILEGE_ADMIN,
    PRIVILEGE_INSTRUCTOR,
    PRIVILEGE_STUDENT,
    PRIVILEGED_ROLES,
    PRIVILEGES,
    User,
    UserEnrolledClass,
)
from academy.infrastructure.database.models.volunteer import (
    ROLE_INTERESTS,
    UYGHUR_PROFICIENCIES,
    VOLUNTEER_STATUSES,
    WEEKLY_HOURS,
    Volunteer,
)

__all__ = [
    "Base",
    "User",
    "UserEnrolledClass",
    "Class",
    "ClassRosterEntry",
    "Level",
    "Volunteer",
    "Translation",
    "DEFAULT_CLASS_IMAGE",
    "DEFAULT_TIMEZONE",
    "PRIVILEGE_ADMIN",
    "PRIVILEGE_INSTRUCTOR",
    "PRIVILEGE_STUDENT",
    "PRIVILEGES",
    "PRIVILEGED_ROLES",
    "ROLE_INTERESTS",
    "WEEKLY_HOURS",
    "UYGHUR_PROFICIENCIES",
    "VOLUNTEER_STATUSES",
]
