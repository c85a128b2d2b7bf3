# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Level catalog table."""

from sqlalchemy import JSON, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from academy.infrastructure.database.models.base import Base, id_column
from academy.infrastructure.database.models.class_ import DEFAULT_CLASS_IMAGE


class Level(Base):
    """Descriptive metadata for one numbered level."""

    __tablename__ = "levels"

    id: Mapped[str] = id_column()
    level: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str] = mapped_column(String(255), nullable=False, default=DEFAULT_CLASS_IMAGE)
    skills: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
