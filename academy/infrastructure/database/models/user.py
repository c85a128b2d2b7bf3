# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User table and the user-owned side of the enrollment relationship."""

from datetime import datetime

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from academy.infrastructure.database.models.base import Base, created_at_column, id_column

PRIVILEGE_ADMIN = "admin"
PRIVILEGE_INSTRUCTOR = "instructor"
PRIVILEGE_STUDENT = "student"

PRIVILEGES = frozenset({PRIVILEGE_ADMIN, PRIVILEGE_INSTRUCTOR, PRIVILEGE_STUDENT})
PRIVILEGED_ROLES = frozenset({PRIVILEGE_ADMIN, PRIVILEGE_INSTRUCTOR})


class User(Base):
    """An account, linked to exactly one identity-provider subject."""

    __tablename__ = "users"

    id: Mapped[str] = id_column()
    identity_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    whatsapp: Mapped[str | None] = mapped_column(String(50))
    gender: Mapped[str | None] = mapped_column(String(50))
    age: Mapped[int | None] = mapped_column(Integer)
    privilege: Mapped[str] = mapped_column(String(20), nullable=False, default=PRIVILEGE_STUDENT)
    creation_date: Mapped[datetime] = created_at_column()

    __table_args__ = (
        Index("ix_users_privilege_name", "privilege", "last_name", "first_name"),
    )

    @property
    def is_privileged(self) -> bool:
        return self.privilege in PRIVILEGED_ROLES


class UserEnrolledClass(Base):
    """One entry of a user's enrolled-classes set.

    The class id is not a foreign key: this row mirrors a
    roster entry owned by the class, and the two sides are maintained
    separately by the membership service.
    """

    __tablename__ = "user_enrolled_classes"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    class_id: Mapped[str] = mapped_column(String(36), primary_key=True)

    __table_args__ = (
        Index("ix_user_enrolled_classes_class_id", "class_id"),
    )
