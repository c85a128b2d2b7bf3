# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Translation string table."""

from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from academy.infrastructure.database.models.base import Base, id_column


class Translation(Base):
    """One translated string, unique per (language, namespace, key)."""

    __tablename__ = "translations"

    id: Mapped[str] = id_column()
    lng: Mapped[str] = mapped_column(String(20), nullable=False)
    ns: Mapped[str] = mapped_column(String(100), nullable=False)
    key: Mapped[str] = mapped_column(String(255), nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")

    __table_args__ = (
        UniqueConstraint("lng", "ns", "key", name="uq_translations_lng_ns_key"),
    )
