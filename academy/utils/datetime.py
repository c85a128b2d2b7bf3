# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Timezone-aware datetime helpers."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC.

    SQLite returns naive datetimes even for timezone-aware columns, so
    values read back from the store pass through here before leaving the API.

    Args:
        value: Datetime to normalize.

    Returns:
        Timezone-aware UTC datetime.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
