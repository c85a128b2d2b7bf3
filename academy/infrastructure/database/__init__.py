# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Entity store: models, the shared connection and relationship set primitives."""

from academy.infrastructure.database.connection import (
    DatabaseConnector,
    DatabaseError,
    db_connector,
)

__all__ = [
    "DatabaseConnector",
    "DatabaseError",
    "db_connector",
]
