# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- datetime: Timezone-aware datetime helpers
- identifiers: Record id generation and validation
- query: Search escaping and pagination clamping
"""

from academy.utils.datetime import utc_now
from academy.utils.identifiers import is_valid_id, new_id
from academy.utils.logging import bind_context, clear_context, setup_logging
from academy.utils.query import (
    clamp_limit,
    clamp_page,
    contains_pattern,
    escape_like,
    positive_int,
)

__all__ = [
    # Logging
    "setup_logging",
    "bind_context",
    "clear_context",
    # Datetime
    "utc_now",
    # Identifiers
    "new_id",
    "is_valid_id",
    # Query helpers
    "escape_like",
    "contains_pattern",
    "clamp_page",
    "clamp_limit",
    "positive_int",
]
