# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Record identifier helpers.

Every stored record is keyed by the canonical string form of a UUID4.
"""

from uuid import UUID, uuid4


def new_id() -> str:
    """Generate a new record identifier."""
    return str(uuid4())


def is_valid_id(value: object) -> bool:
    """Check whether a value is a well-formed record identifier.

    Args:
        value: Candidate identifier, usually taken from a path or body.

    Returns:
        True if the value is a UUID string in canonical form.
    """
    if not isinstance(value, str):
        return False
    try:
        return str(UUID(value)) == value.lower()
    except ValueError:
        return False
