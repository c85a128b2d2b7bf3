# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Access domain: principals and authorization decisions."""

from academy.domains.access.service import (
    AccessError,
    AccessGate,
    ForbiddenError,
    InvalidTargetError,
    NotProvisionedError,
    Principal,
    TargetNotFoundError,
)

__all__ = [
    "AccessGate",
    "Principal",
    "AccessError",
    "NotProvisionedError",
    "ForbiddenError",
    "InvalidTargetError",
    "TargetNotFoundError",
]
