# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Search pattern escaping and pagination clamping.

User-supplied search text is always matched as a literal substring:
LIKE metacharacters are escaped before the pattern is built, and the
queries that use these patterns pass ``escape=LIKE_ESCAPE``.
"""

LIKE_ESCAPE = "\\"

DEFAULT_PAGE_LIMIT = 100
MAX_PAGE_LIMIT = 200
# Keeps (page - 1) * limit within a 64-bit OFFSET.
MAX_PAGE = 1_000_000


def escape_like(text: str) -> str:
    """Escape LIKE metacharacters so the text matches literally.

    Args:
        text: Raw search text.

    Returns:
        Text safe to embed in a LIKE pattern using LIKE_ESCAPE.
    """
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


def contains_pattern(text: str) -> str:
    """Build a case-insensitive substring pattern for ILIKE."""
    return f"%{escape_like(text)}%"


def _to_int(value: object) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def positive_int(value: object) -> int | None:
    """Parse a strictly positive integer; anything else is None."""
    number = _to_int(value)
    if number is None or number < 1:
        return None
    return number


def clamp_page(value: object) -> int:
    """Clamp a page number to [1, MAX_PAGE]; missing or malformed values mean 1."""
    page = _to_int(value)
    if page is None:
        return 1
    return min(MAX_PAGE, max(1, page))


def clamp_limit(
    value: object,
    default: int = DEFAULT_PAGE_LIMIT,
    maximum: int = MAX_PAGE_LIMIT,
) -> int:
    """Clamp a page size to [1, maximum]; missing or malformed values mean default.

    Args:
        value: Raw limit from the query string.
        default: Limit used when none was given.
        maximum: Largest page size served.

    Returns:
        Page size within bounds.
    """
    limit = _to_int(value)
    if limit is None or limit == 0:
        limit = default
    return min(maximum, max(1, limit))
