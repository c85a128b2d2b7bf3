# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Roster domain: filtered, paginated user and student listings."""

from academy.domains.roster.service import (
    InvalidPrivilegeFilterError,
    RosterQueryError,
    RosterQueryService,
)

__all__ = [
    "RosterQueryService",
    "RosterQueryError",
    "InvalidPrivilegeFilterError",
]
