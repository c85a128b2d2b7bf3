# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Membership domain: the mirrored User<->Class relationship."""

from academy.domains.membership.service import (
    AlreadyEnrolledError,
    ClassNotFoundError,
    ConsistencyGapError,
    EnrollmentClosedError,
    InvalidIdentifierError,
    MembershipError,
    MembershipService,
    NotEnrolledError,
    UserNotFoundError,
)

__all__ = [
    "MembershipService",
    "MembershipError",
    "InvalidIdentifierError",
    "UserNotFoundError",
    "ClassNotFoundError",
    "AlreadyEnrolledError",
    "NotEnrolledError",
    "EnrollmentClosedError",
    "ConsistencyGapError",
]
