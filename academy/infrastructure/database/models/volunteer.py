# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Volunteer application table."""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from academy.infrastructure.database.models.base import Base, created_at_column, id_column
from academy.utils.datetime import utc_now

ROLE_INTERESTS = frozenset({"teach", "admin", "both"})
WEEKLY_HOURS = frozenset({"1", "2", "more"})
UYGHUR_PROFICIENCIES = frozenset({"fluent", "somewhat", "no"})
VOLUNTEER_STATUSES = frozenset({"pending", "approved", "rejected"})


class Volunteer(Base):
    """A submitted volunteer application and its review status."""

    __tablename__ = "volunteers"

    id: Mapped[str] = id_column()
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50))
    role_interest: Mapped[str] = mapped_column(String(20), nullable=False)
    weekly_hours: Mapped[str] = mapped_column(String(20), nullable=False)
    uyghur_proficiency: Mapped[str] = mapped_column(String(20), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    subjects: Mapped[str] = mapped_column(Text, nullable=False)
    availability: Mapped[str] = mapped_column(Text, nullable=False)
    motivation: Mapped[str] = mapped_column(Text, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )

    __table_args__ = (
        Index("ix_volunteers_status_created", "status", "created_at"),
    )
