# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Declarative base and shared column helpers for all tables."""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from academy.utils.datetime import utc_now
from academy.utils.identifiers import new_id


class Base(DeclarativeBase):
    """Base class for every mapped table."""

    pass


def id_column() -> Mapped[str]:
    """Primary key holding a UUID4 string."""
    return mapped_column(String(36), primary_key=True, default=new_id)


def created_at_column() -> Mapped[datetime]:
    return mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
